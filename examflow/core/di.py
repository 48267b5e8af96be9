"""Dependency-injection markers used across examflow.

Functions declare their collaborators as defaults, e.g.
``session: Session = di.Provide["storage.persistent.session"]``; once the
container is booted and wired, omitted arguments are filled in. Passing an
argument explicitly always wins, which is how tests supply their own session
and clock.
"""

from __future__ import annotations

__all__ = [
    "Manage",
    "NotReady",
    "Provide",
    "inject",
]

import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import ClassGetItemMeta, Closing, Provide

from examflow.lib.sentinel import NotReady

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")
T = t.TypeVar("T")


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:
    return t.cast(t.Callable[P, TReturn], wiring.inject(fn))


class Manage(object, metaclass=ClassGetItemMeta):
    """``Provide`` for a dependency owned by the call: resources are shut down when it returns."""

    def __new__(cls, provider: Provider[T] | Container | str):
        return Closing[Provide[provider]]

    @classmethod
    def __class_getitem__(cls, item: Provider[T] | Container | str):
        return cls(item)
