"""Settings sources: cascading YAML documents and command-line overrides.

Both read the boot parameters (``root``, ``env`` and for overrides
``override``) from the init kwargs that pydantic-settings hands them as
``current_state``.
"""

import functools
import typing as t
from collections.abc import Mapping
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource, SettingsError

from examflow.model import DeploymentEnvironment

BootKeys = frozenset({"root", "env", "override"})


class BootState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: tuple[str, ...]


def merge(base: Mapping[str, t.Any], overlay: Mapping[str, t.Any]) -> dict[str, t.Any]:
    """Merge ``overlay`` onto a copy of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for k, v in overlay.items():
        current = merged.get(k)
        if isinstance(v, Mapping) and isinstance(current, Mapping):
            merged[k] = merge(t.cast(Mapping[str, t.Any], current), t.cast(Mapping[str, t.Any], v))
        else:
            merged[k] = v
    return merged


class FieldSource(PydanticBaseSettingsSource):
    """Collects one value per settings field; fields the source lacks raise KeyError and are skipped."""

    @property
    def boot(self) -> BootState:
        return t.cast(BootState, self.current_state)

    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in BootKeys:
                continue
            try:
                value, key, is_complex = self.get_field_value(field, field_name)
                data[key] = self.prepare_field_value(field_name, field, value, is_complex)
            except KeyError:
                continue
            except (ValueError, yaml.YAMLError) as e:
                raise SettingsError(f"cannot parse {field_name!r} from {self!r}") from e
        return data

    def prepare_field_value(self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool):
        return value


class OverrideSettingsSource(FieldSource):
    """Values from ``-o dotted.path=value`` options, each value parsed as YAML."""

    @functools.cached_property
    def options(self) -> dict[str, t.Any]:
        tree: dict[str, t.Any] = {}
        for option in self.boot.get("override", ()):
            path, sep, raw = option.partition("=")
            if not sep:
                raise SettingsError(f"override {option!r} is not of the form key.path=value")
            *parents, leaf = [part.strip() for part in path.split(".")]
            node = tree
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = yaml.safe_load(raw)
        return tree

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.options:
            raise KeyError(field_name)
        value = self.options[field_name]
        return value, field_name, isinstance(value, dict)


class YAMLCascadingSettingsSource(FieldSource):
    """``<field>.yaml`` from the root, with ``env.d/<env>/<field>.yaml`` merged over it."""

    @functools.cached_property
    def directories(self) -> list[Path]:
        root = self.boot["root"]
        if root.scheme != "file" or root.path is None:
            raise SettingsError(f"configuration root must be a file:// URL, got {root}")
        directories = [Path(root.path)]
        if (overlay := self.boot["env"].overlay) is not None:
            directories.append(directories[0] / overlay)
        return directories

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        documents = [d / f"{field_name}.yaml" for d in self.directories]
        found = [doc.read_text(encoding="utf8") for doc in documents if doc.exists()]
        if not found:
            raise KeyError(field_name)
        return found, field_name, True

    def prepare_field_value(self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool):
        merged: t.Any = {}
        for text in t.cast(list[str], value):
            loaded = yaml.safe_load(text)
            merged = merge(merged, loaded) if isinstance(loaded, dict) and isinstance(merged, dict) else loaded
        return merged
