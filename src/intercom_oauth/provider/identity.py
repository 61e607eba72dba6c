from __future__ import annotations

from types import MappingProxyType
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional


def _as_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (bool, Mapping, list, tuple)):
        return None
    return str(value)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class IntercomIdentity(Mapping[str, Any]):
    """Read-only view over an Intercom ``/me`` payload.

    The payload is copied and frozen on construction, nested objects
    included: nested mappings become read-only and lists become tuples.
    ``to_dict()`` hands back a plain, independent copy.

    Accessors normalize to ``Optional[str]``: strings come back unchanged,
    numbers are rendered with ``str()``, and a missing key, ``None``, a
    boolean or a nested object yields ``None``. An empty payload stands for
    an account whose email Intercom has not verified, so every accessor
    then returns ``None``.
    """

    def __init__(self, payload: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = _freeze(dict(payload or {}))

    @property
    def id(self) -> Optional[str]:
        return _as_str(self._data.get("id"))

    @property
    def name(self) -> Optional[str]:
        return _as_str(self._data.get("name"))

    @property
    def email(self) -> Optional[str]:
        return _as_str(self._data.get("email"))

    @property
    def avatar_url(self) -> Optional[str]:
        avatar = self._data.get("avatar")
        if not isinstance(avatar, Mapping):
            return None
        return _as_str(avatar.get("image_url"))

    def to_dict(self) -> Dict[str, Any]:
        return _thaw(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IntercomIdentity):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self.to_dict() == _thaw(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"IntercomIdentity(id={self.id!r}, email={self.email!r})"
