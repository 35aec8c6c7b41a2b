# Copyright (c) 2025.
# This file is part of sam-utils, released under the MIT License.
"""
Key and symbol encoding.

A symbolic key packs an 8-bit character tag and a 56-bit index into a single
64-bit integer:

    key = (ord(c) << 56) | index

so that poses and landmarks can share one key space while staying
distinguishable (e.g. ``x0, x1, ...`` for poses and ``l0, l1, ...`` for
landmarks). Raw keys below 2**56 never collide with a symbol whose character
is not NUL.

The batch builders turn an index vector (a list, a NumPy array, or a JAX
array, possibly of floats) into an ordered sequence or a set of keys.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from .types import Key, KEY_BITS

CHR_BITS = 8
INDEX_BITS = KEY_BITS - CHR_BITS
CHR_MASK = ((1 << CHR_BITS) - 1) << INDEX_BITS
INDEX_MASK = (1 << INDEX_BITS) - 1


def _chr_code(c: str) -> int:
    code = ord(c)
    if code >= 1 << CHR_BITS:
        raise ValueError(f"Symbol character {c!r} does not fit in {CHR_BITS} bits")
    return code


def symbol(c: str, j: int) -> Key:
    """Encode character ``c`` and index ``j`` into a single key."""
    j = int(j)
    if j < 0 or j > INDEX_MASK:
        raise ValueError(f"Symbol index {j} outside [0, 2^{INDEX_BITS})")
    return Key((_chr_code(c) << INDEX_BITS) | j)


def symbol_chr(key: Key) -> str:
    return chr((int(key) & CHR_MASK) >> INDEX_BITS)


def symbol_index(key: Key) -> int:
    return int(key) & INDEX_MASK


@dataclass(frozen=True)
class Symbol:
    """Character + index pair, the decoded form of a symbolic key."""
    chr: str
    index: int

    def key(self) -> Key:
        return symbol(self.chr, self.index)

    @classmethod
    def from_key(cls, key: Key) -> "Symbol":
        return cls(symbol_chr(key), symbol_index(key))

    def __str__(self) -> str:
        return f"{self.chr}{self.index}"


def raw_key(j: int) -> Key:
    j = int(j)
    if j < 0 or j >= 1 << KEY_BITS:
        raise ValueError(f"Key {j} outside [0, 2^{KEY_BITS})")
    return Key(j)


def _as_indices(indices: Iterable) -> List[int]:
    # Index vectors may arrive as float arrays; truncate like a C cast.
    arr = np.asarray(indices).reshape(-1)
    return [int(i) for i in arr.tolist()]


def _make_keys(indices: Iterable, tag: Optional[str]) -> List[Key]:
    if tag is None:
        return [raw_key(i) for i in _as_indices(indices)]
    if not tag:
        raise ValueError("Symbol tag must be a non-empty string")
    # Only the first character of the tag is used.
    c = tag[0]
    return [symbol(c, i) for i in _as_indices(indices)]


def create_key_list(indices: Iterable, tag: Optional[str] = None) -> List[Key]:
    """Keys for ``indices`` in input order, symbolic when ``tag`` is given."""
    return _make_keys(indices, tag)


def create_key_vector(indices: Iterable, tag: Optional[str] = None) -> Tuple[Key, ...]:
    """Immutable ordered counterpart of :func:`create_key_list`."""
    return tuple(_make_keys(indices, tag))


def create_key_set(indices: Iterable, tag: Optional[str] = None) -> Set[Key]:
    return set(_make_keys(indices, tag))
