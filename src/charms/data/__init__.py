# src/charms/data/__init__.py
"""
Charms data model.

Plain value types shared by every checker:
  - values: the closed Value union (empty/bool/u64/i64/bytes/string/list/map)
  - types: App, UtxoRef, CharmState, TxInput/TxOutput, Transaction, NormalizedSpell

Everything here is frozen. Checkers read these objects and never mutate them.
"""

from __future__ import annotations

from charms.data.types import (
    App,
    CharmState,
    NormalizedSpell,
    SpellInput,
    SpellOutput,
    Transaction,
    TxInput,
    TxOutput,
    UtxoRef,
)
from charms.data.values import (
    EMPTY,
    BoolValue,
    BytesValue,
    EmptyValue,
    I64Value,
    ListValue,
    MapValue,
    StringValue,
    U64Value,
    Value,
    ValueKind,
)

__all__ = [
    "App",
    "CharmState",
    "NormalizedSpell",
    "SpellInput",
    "SpellOutput",
    "Transaction",
    "TxInput",
    "TxOutput",
    "UtxoRef",
    "EMPTY",
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
]
