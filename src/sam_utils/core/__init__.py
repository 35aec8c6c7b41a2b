"""Keys, the typed value store and the factor collection."""
from .types import Key, ValueType, FactorKind, Entry
from .keys import (
    Symbol,
    symbol,
    symbol_chr,
    symbol_index,
    create_key_list,
    create_key_vector,
    create_key_set,
)
from .values import (
    Values,
    ValuesKeyAlreadyExists,
    ValuesKeyDoesNotExist,
    ValuesIncorrectType,
)
from .factor_graph import FactorGraph

__all__ = [
    "Key", "ValueType", "FactorKind", "Entry",
    "Symbol", "symbol", "symbol_chr", "symbol_index",
    "create_key_list", "create_key_vector", "create_key_set",
    "Values", "ValuesKeyAlreadyExists", "ValuesKeyDoesNotExist", "ValuesIncorrectType",
    "FactorGraph",
]
