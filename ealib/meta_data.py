"""
Open-ended metadata attached to individuals.

Metadata carries things like location or lineage annotations. Keys are
strings (enum members are stored under their name) and values are restricted
to a closed set of kinds so that the archive layout stays stable.
"""
from collections.abc import MutableMapping
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional, Union

from ealib.archive import ArchiveError, ArchiveReader, ArchiveWriter, format_float

Key = Union[str, Enum]
Value = Union[bool, int, float, str]


def _parse_bool(text: str) -> bool:
    if text not in ("0", "1"):
        raise ValueError(text)
    return text == "1"


# Kind name -> (python type, text form, parser). `bool` precedes `int`
# because bool is a subclass of int.
_KINDS: Dict[str, tuple] = {
    "bool": (bool, lambda v: "1" if v else "0", _parse_bool),
    "int": (int, str, int),
    "float": (float, format_float, float),
    "str": (str, str, str),
}


def _kind_of(value: Any) -> str:
    for kind, (kind_type, _, _) in _KINDS.items():
        if isinstance(value, kind_type):
            return kind
    raise TypeError(
        f"Unsupported metadata value type {type(value).__name__}. "
        f"Supported: {list(_KINDS.keys())}"
    )


def _normalize_key(key: Key) -> str:
    if isinstance(key, Enum):
        return key.name
    if not isinstance(key, str):
        raise TypeError(f"Metadata keys must be str or Enum, got {type(key).__name__}.")
    return key


class _Entry:
    """A single key/value pair in its archive form."""

    def __init__(self, key: str = "", value: Optional[Value] = None):
        self.key = key
        self.value = value

    def save(self, ar: ArchiveWriter):
        kind = _kind_of(self.value)
        _, render, _ = _KINDS[kind]
        ar.write_str("key", self.key)
        ar.write_str("kind", kind)
        ar.write_str("value", render(self.value))

    def load(self, ar: ArchiveReader):
        self.key = ar.read_str("key")
        kind = ar.read_str("kind")
        if kind not in _KINDS:
            raise ArchiveError(f"Unknown metadata kind {kind!r} for key {self.key!r}.")
        _, _, parse = _KINDS[kind]
        text = ar.read_str("value")
        try:
            self.value = parse(text)
        except ValueError:
            raise ArchiveError(f"Invalid {kind} metadata value for key {self.key!r}: {text!r}") from None


class MetaData(MutableMapping):
    """
    A typed key/value mapping.

    Args:
        initial (Optional[Dict[Key, Value]]): Entries to start with.
    """

    def __init__(self, initial: Optional[Dict[Key, Value]] = None, **kwargs: Value):
        self._data: Dict[str, Value] = {}
        if initial:
            self.update(initial)
        self.update(kwargs)

    def __getitem__(self, key: Key) -> Value:
        return self._data[_normalize_key(key)]

    def __setitem__(self, key: Key, value: Value):
        _kind_of(value)
        self._data[_normalize_key(key)] = value

    def __delitem__(self, key: Key):
        del self._data[_normalize_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key) -> bool:
        try:
            return _normalize_key(key) in self._data
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"MetaData({self._data!r})"

    def get_as(self, key: Key, kind: Callable, default: Any = None) -> Any:
        """
        Returns the value under `key` converted with `kind`, or `default` if
        the key is absent.
        """
        if key not in self:
            return default
        return kind(self[key])

    def save(self, ar: ArchiveWriter):
        ar.write_int("count", len(self._data))
        for key, value in self._data.items():
            ar.write_nested("item", _Entry(key, value))

    def load(self, ar: ArchiveReader):
        count = ar.read_int("count")
        if count < 0:
            raise ArchiveError(f"Negative metadata count: {count}")
        data = {}
        for _ in range(count):
            entry = ar.read_nested("item", _Entry())
            data[entry.key] = entry.value
        self._data = data
