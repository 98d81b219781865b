"""Read-only mapping over parsed knife.rb declarations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

_MISSING = object()


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value if isinstance(value, Settings) else Settings(value)
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return value


class Settings(Mapping[str, Any]):
    """
    Immutable view of knife settings.

    Nested groups (``chef_zero[:port]``) are Settings themselves and lists are
    stored as tuples, so instances can be shared freely between readers.

    Lookup accepts a plain name, a dotted path or an explicit key path:

        settings["node_name"]
        settings["chef_zero"]["port"]
        settings["chef_zero.port"]
        settings.lookup("chef_zero", "port", default=8889)
    """

    __slots__ = ("_values", "_source")

    def __init__(self, values: Mapping[str, Any] | None = None, source: str | None = None) -> None:
        self._values: dict[str, Any] = {
            key: _freeze(value) for key, value in (values or {}).items()
        }
        self._source = source

    def __getitem__(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            if isinstance(key, str) and "." in key:
                value = self.lookup(*key.split("."), default=_MISSING)
                if value is not _MISSING:
                    return value
            raise

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        # Tuples and lists holding the same items compare equal here
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.to_dict() == _thaw(other)

    __hash__ = None  # type: ignore[assignment]

    @property
    def source(self) -> str | None:
        """Path the settings were loaded from, if any."""
        return self._source

    def __repr__(self) -> str:
        source = f", source={self.source!r}" if self.source else ""
        return f"{type(self).__name__}({self.to_dict()!r}{source})"

    def lookup(self, name: str, *subkeys: str, default: Any = None) -> Any:
        """Return the value at ``name`` and nested ``subkeys``, or ``default``."""
        node: Any = self._values.get(name, _MISSING)
        for subkey in subkeys:
            if not isinstance(node, Settings):
                return default
            node = node._values.get(subkey, _MISSING)
        return default if node is _MISSING else node

    def to_dict(self) -> dict[str, Any]:
        """Plain dict/list copy, suitable for YAML or JSON dumping."""
        return {key: _thaw(value) for key, value in self._values.items()}
