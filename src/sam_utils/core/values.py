# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Typed, key-sorted value store.

`Values` maps a `Key` to a geometric value and remembers each entry's
`ValueType` tag, fixed at insertion from the value's class. It is the
container every batch utility reads from or writes to.

Ordering contract
-----------------
Iteration, `keys()` and `filter()` always run in ascending key order. The
matrix extractors, the perturbation engine (which must consume random draws in
a reproducible order) and the frame retargeter all rely on this.

Errors
------
ValuesKeyAlreadyExists
    `insert` on a key that is already present.
ValuesKeyDoesNotExist
    `at` / `update` / `erase` on an absent key.
ValuesIncorrectType
    Typed `at`, or `update` with a value of a different type than stored.

Typed reads are meant for callers that know what a key holds. To ask whether
a key holds a given type, use `type_of` (or `filter`), which never raises.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Tuple, Any

from .types import Entry, Key, ValueType


class ValuesKeyAlreadyExists(KeyError):
    def __init__(self, key: Key) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Attempting to insert key {self.key} that already exists"


class ValuesKeyDoesNotExist(KeyError):
    def __init__(self, key: Key, operation: str = "at") -> None:
        super().__init__(key)
        self.key = key
        self.operation = operation

    def __str__(self) -> str:
        return f"Attempting to {self.operation} key {self.key} that does not exist"


class ValuesIncorrectType(TypeError):
    def __init__(self, key: Key, stored: ValueType, requested: ValueType) -> None:
        super().__init__(key, stored, requested)
        self.key = key
        self.stored = stored
        self.requested = requested

    def __str__(self) -> str:
        return (
            f"Key {self.key} holds a {self.stored.value}, "
            f"but a {self.requested.value} was requested"
        )


def value_type_of(value: Any) -> ValueType:
    """Tag of a value, from the `value_type` attribute of its class."""
    tag = getattr(type(value), "value_type", None)
    if not isinstance(tag, ValueType):
        raise TypeError(f"Unsupported value type {type(value).__name__}")
    return tag


class Values:
    """Sorted mapping Key -> tagged geometric value."""

    def __init__(self, other: Optional["Values"] = None) -> None:
        self._entries: Dict[Key, Entry] = {}
        if other is not None:
            self._entries.update(other._entries)

    # --- Mutation ---

    def insert(self, key: Key, value: Any) -> None:
        key = Key(int(key))
        if key in self._entries:
            raise ValuesKeyAlreadyExists(key)
        self._entries[key] = Entry(key, value_type_of(value), value)

    def insert_values(self, other: "Values") -> None:
        """Insert every entry of `other`; nothing is inserted if any key exists."""
        for key in other.keys():
            if key in self._entries:
                raise ValuesKeyAlreadyExists(key)
        self._entries.update(other._entries)

    def update(self, key: Key, value: Any) -> None:
        key = Key(int(key))
        entry = self._entries.get(key)
        if entry is None:
            raise ValuesKeyDoesNotExist(key, "update")
        tag = value_type_of(value)
        if tag is not entry.type:
            raise ValuesIncorrectType(key, entry.type, tag)
        self._entries[key] = Entry(key, tag, value)

    def erase(self, key: Key) -> None:
        key = Key(int(key))
        if key not in self._entries:
            raise ValuesKeyDoesNotExist(key, "erase")
        del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    # --- Access ---

    def exists(self, key: Key) -> bool:
        return Key(int(key)) in self._entries

    def type_of(self, key: Key) -> Optional[ValueType]:
        """Tag stored under `key`, or None when the key is absent."""
        entry = self._entries.get(Key(int(key)))
        return None if entry is None else entry.type

    def at(self, key: Key, value_type: Optional[ValueType] = None) -> Any:
        """
        Value stored under `key`.

        If `value_type` is given, the stored tag must match it, otherwise
        `ValuesIncorrectType` is raised.
        """
        key = Key(int(key))
        entry = self._entries.get(key)
        if entry is None:
            raise ValuesKeyDoesNotExist(key)
        if value_type is not None and entry.type is not value_type:
            raise ValuesIncorrectType(key, entry.type, value_type)
        return entry.value

    def keys(self) -> List[Key]:
        return sorted(self._entries)

    def entries(self) -> List[Entry]:
        return [self._entries[k] for k in sorted(self._entries)]

    def filter(self, value_type: ValueType) -> List[Tuple[Key, Any]]:
        """(key, value) pairs holding `value_type`, in ascending key order."""
        return [(e.key, e.value) for e in self.entries() if e.type is value_type]

    def filter_values(self, value_type: ValueType) -> "Values":
        """New store holding only the entries tagged `value_type`."""
        out = Values()
        for key, value in self.filter(value_type):
            out.insert(key, value)
        return out

    def count(self, value_type: ValueType) -> int:
        return sum(1 for e in self._entries.values() if e.type is value_type)

    # --- Container protocol ---

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        try:
            return self.exists(key)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __repr__(self) -> str:
        body = ", ".join(f"{e.key}: {e.value!r}" for e in self.entries())
        return f"Values({{{body}}})"
