"""click, plus the parameter types examflow commands share.

Command modules import this in place of click::

    import examflow.lib.cli as click
"""

from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

from examflow.model.id import ShortUUIDKey

E = t.TypeVar("E", bound=enum.Enum)
K = t.TypeVar("K", bound=ShortUUIDKey)


class EnumType(click.Choice):
    """Choose an enum member by its value, e.g. ``--type voice``."""

    def __init__(self, enum_: type[E]):
        super().__init__([str(e.value) for e in enum_], case_sensitive=False)
        self.enum = enum_

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> E:
        if isinstance(value, self.enum):
            return value
        return self.enum(super().convert(value, param, ctx))


class KeyParamType(click.ParamType):
    """A prefixed identifier such as ``exam$...``."""

    def __init__(self, key_type: type[K]):
        self.key_type = key_type
        self.name = key_type.__name__

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> K:
        if isinstance(value, self.key_type):
            return value
        try:
            return self.key_type(str(value).strip())
        except ValueError as e:
            self.fail(f"{value!r} is not a valid {self.name}: {e}", param, ctx)


class DirectoryURL(click.ParamType):
    """An existing local directory, given as a path or a ``file://`` URL."""

    name = "DIRECTORY"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.FileUrl:
        if isinstance(value, p.FileUrl):
            return value
        text = str(value)
        if "://" in text:
            url = p.AnyUrl(text)
            if url.scheme != "file" or url.path is None:
                self.fail(f"{text}: only file:// URLs are supported", param, ctx)
            text = url.path
        path = pathlib.Path(text).expanduser().absolute()
        if not path.is_dir():
            self.fail(f"{path}: not a directory", param, ctx)
        return p.FileUrl(path.as_uri())
