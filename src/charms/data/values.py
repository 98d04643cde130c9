# src/charms/data/values.py
"""Typed app-state values.

A Value is one of a closed set of variants. Equality is structural and there is
no numeric coercion: U64Value(1) != I64Value(1). Maps are stored as a key-sorted
tuple of (key, value) pairs so two maps with the same entries compare equal and
hash the same regardless of insertion order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class ValueKind(str, Enum):
    EMPTY = "empty"
    BOOL = "bool"
    U64 = "u64"
    I64 = "i64"
    BYTES = "bytes"
    STRING = "string"
    LIST = "list"
    MAP = "map"


def _is_int(v: Any) -> bool:
    # bool is an int subclass; never accept it as a number
    return isinstance(v, int) and not isinstance(v, bool)


def freeze_entries(mapping: Any, *, what: str) -> Tuple[Tuple[str, "Value"], ...]:
    """Normalize a mapping (or iterable of pairs) into a sorted, duplicate-free tuple."""
    if isinstance(mapping, Mapping):
        pairs: Iterable[Any] = mapping.items()
    else:
        pairs = mapping

    seen = set()
    out = []
    for pair in pairs:
        try:
            k, v = pair
        except (TypeError, ValueError) as e:
            raise TypeError(f"{what} entries must be (key, value) pairs") from e
        if not isinstance(k, str):
            raise TypeError(f"{what} keys must be str, got {type(k).__name__}")
        if k in seen:
            raise ValueError(f"{what} has duplicate key: {k!r}")
        if not isinstance(v, Value):
            raise TypeError(f"{what}[{k!r}] must be a Value, got {type(v).__name__}")
        seen.add(k)
        out.append((k, v))
    out.sort(key=lambda kv: kv[0])
    return tuple(out)


@dataclass(frozen=True, slots=True)
class Value(ABC):
    """Base of the Value union. Use one of the concrete variants."""

    @property
    @abstractmethod
    def kind(self) -> ValueKind:
        """Variant discriminant, also the wire `type` tag."""

    def is_empty(self) -> bool:
        return False

    def as_bool(self) -> Optional[bool]:
        return None

    def as_u64(self) -> Optional[int]:
        return None

    def as_i64(self) -> Optional[int]:
        return None

    def as_bytes(self) -> Optional[bytes]:
        return None

    def as_str(self) -> Optional[str]:
        return None


@dataclass(frozen=True, slots=True)
class EmptyValue(Value):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.EMPTY

    def is_empty(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class BoolValue(Value):
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"BoolValue requires bool, got {type(self.value).__name__}")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOL

    def as_bool(self) -> Optional[bool]:
        return self.value


@dataclass(frozen=True, slots=True)
class U64Value(Value):
    value: int

    def __post_init__(self) -> None:
        if not _is_int(self.value):
            raise TypeError(f"U64Value requires int, got {type(self.value).__name__}")
        if self.value < 0 or self.value > U64_MAX:
            raise ValueError(f"U64Value out of range: {self.value}")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.U64

    def as_u64(self) -> Optional[int]:
        return self.value


@dataclass(frozen=True, slots=True)
class I64Value(Value):
    value: int

    def __post_init__(self) -> None:
        if not _is_int(self.value):
            raise TypeError(f"I64Value requires int, got {type(self.value).__name__}")
        if self.value < I64_MIN or self.value > I64_MAX:
            raise ValueError(f"I64Value out of range: {self.value}")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.I64

    def as_i64(self) -> Optional[int]:
        return self.value


@dataclass(frozen=True, slots=True)
class BytesValue(Value):
    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise TypeError(f"BytesValue requires bytes, got {type(self.value).__name__}")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BYTES

    def as_bytes(self) -> Optional[bytes]:
        return self.value


@dataclass(frozen=True, slots=True)
class StringValue(Value):
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"StringValue requires str, got {type(self.value).__name__}")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING

    def as_str(self) -> Optional[str]:
        return self.value


@dataclass(frozen=True, slots=True)
class ListValue(Value):
    items: Tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for i, it in enumerate(items):
            if not isinstance(it, Value):
                raise TypeError(f"ListValue[{i}] must be a Value, got {type(it).__name__}")
        object.__setattr__(self, "items", items)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.LIST

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class MapValue(Value):
    entries: Tuple[Tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", freeze_entries(self.entries, what="MapValue"))

    @staticmethod
    def of(mapping: Mapping[str, Value]) -> "MapValue":
        return MapValue(freeze_entries(mapping, what="MapValue"))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.MAP

    def get(self, key: str) -> Optional[Value]:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.entries)

    def to_dict(self) -> dict:
        return dict(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


EMPTY = EmptyValue()


__all__ = [
    "EMPTY",
    "I64_MAX",
    "I64_MIN",
    "U64_MAX",
    "BoolValue",
    "BytesValue",
    "EmptyValue",
    "I64Value",
    "ListValue",
    "MapValue",
    "StringValue",
    "U64Value",
    "Value",
    "ValueKind",
    "freeze_entries",
]
