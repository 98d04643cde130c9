# src/charms/data/types.py
"""Transaction-side data model.

These types are produced fresh for every verification call (usually by the JSON
mirror codec) and are never mutated by a checker. Constructors enforce the
structural invariants that a decoder must already satisfy: 32-byte hashes,
uint32 indexes, uint64 amounts, non-empty app tags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from charms.data.values import EMPTY, U64_MAX, Value, freeze_entries

U32_MAX = 2**32 - 1
HASH_LEN = 32
ZERO_HASH = bytes(HASH_LEN)


def _require_hash32(v: Any, *, field_name: str) -> bytes:
    if isinstance(v, (bytearray, memoryview)):
        v = bytes(v)
    if not isinstance(v, bytes):
        raise TypeError(f"schema error: field '{field_name}' must be bytes (got {type(v).__name__})")
    if len(v) != HASH_LEN:
        raise ValueError(f"schema error: field '{field_name}' must be {HASH_LEN} bytes (got {len(v)})")
    return v


def _require_uint(v: Any, *, field_name: str, max_value: int) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"schema error: field '{field_name}' must be int (got {type(v).__name__})")
    if v < 0 or v > max_value:
        raise ValueError(f"schema error: field '{field_name}' out of range: {v}")
    return v


@dataclass(frozen=True, slots=True)
class App:
    """Application descriptor. `tag` is `<family>:<instance>` and is the dispatch key."""

    tag: str
    vk_hash: bytes = ZERO_HASH
    params: Value = EMPTY

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str) or not self.tag:
            raise ValueError("schema error: field 'tag' must be a non-empty string")
        object.__setattr__(self, "vk_hash", _require_hash32(self.vk_hash, field_name="vk_hash"))
        if not isinstance(self.params, Value):
            raise TypeError(f"schema error: field 'params' must be a Value (got {type(self.params).__name__})")


@dataclass(frozen=True, slots=True)
class UtxoRef:
    txid: bytes
    vout: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _require_hash32(self.txid, field_name="txid"))
        _require_uint(self.vout, field_name="vout", max_value=U32_MAX)

    def __str__(self) -> str:
        return f"{self.txid.hex()}:{self.vout}"


@dataclass(frozen=True, slots=True)
class CharmState:
    """Per-app state attached to a UTXO: app tag -> Value.

    A missing tag (get() returns None) is not the same thing as a tag mapped to
    EmptyValue.
    """

    apps: Tuple[Tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "apps", freeze_entries(self.apps, what="CharmState"))

    @staticmethod
    def of(apps: Mapping[str, Value]) -> "CharmState":
        return CharmState(freeze_entries(apps, what="CharmState"))

    def with_app(self, tag: str, state: Value) -> "CharmState":
        merged = dict(self.apps)
        merged[tag] = state
        return CharmState.of(merged)

    def get(self, tag: str) -> Optional[Value]:
        for k, v in self.apps:
            if k == tag:
                return v
        return None

    def tags(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.apps)

    def __contains__(self, tag: object) -> bool:
        return any(k == tag for k, _ in self.apps)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tags())

    def __len__(self) -> int:
        return len(self.apps)


def _optional_state(v: Any, *, field_name: str) -> None:
    if v is not None and not isinstance(v, CharmState):
        raise TypeError(f"schema error: field '{field_name}' must be CharmState or None (got {type(v).__name__})")


@dataclass(frozen=True, slots=True)
class TxInput:
    utxo_ref: UtxoRef
    charm_state: Optional[CharmState] = None

    def __post_init__(self) -> None:
        if not isinstance(self.utxo_ref, UtxoRef):
            raise TypeError("schema error: field 'utxo_ref' must be UtxoRef")
        _optional_state(self.charm_state, field_name="charm_state")

    def state_for(self, tag: str) -> Optional[Value]:
        return None if self.charm_state is None else self.charm_state.get(tag)


@dataclass(frozen=True, slots=True)
class TxOutput:
    index: int
    value: int = 0
    script_pubkey: bytes = b""
    charm_state: Optional[CharmState] = None

    def __post_init__(self) -> None:
        _require_uint(self.index, field_name="index", max_value=U32_MAX)
        _require_uint(self.value, field_name="value", max_value=U64_MAX)
        if isinstance(self.script_pubkey, (bytearray, memoryview)):
            object.__setattr__(self, "script_pubkey", bytes(self.script_pubkey))
        elif not isinstance(self.script_pubkey, bytes):
            raise TypeError("schema error: field 'script_pubkey' must be bytes")
        _optional_state(self.charm_state, field_name="charm_state")

    def state_for(self, tag: str) -> Optional[Value]:
        return None if self.charm_state is None else self.charm_state.get(tag)


@dataclass(frozen=True, slots=True)
class SpellInput:
    utxo_ref: UtxoRef
    charms: Optional[CharmState] = None

    def __post_init__(self) -> None:
        if not isinstance(self.utxo_ref, UtxoRef):
            raise TypeError("schema error: field 'utxo_ref' must be UtxoRef")
        _optional_state(self.charms, field_name="charms")


@dataclass(frozen=True, slots=True)
class SpellOutput:
    index: int
    charms: Optional[CharmState] = None

    def __post_init__(self) -> None:
        _require_uint(self.index, field_name="index", max_value=U32_MAX)
        _optional_state(self.charms, field_name="charms")


@dataclass(frozen=True, slots=True)
class NormalizedSpell:
    version: int
    ins: Tuple[SpellInput, ...] = ()
    outs: Tuple[SpellOutput, ...] = ()

    def __post_init__(self) -> None:
        _require_uint(self.version, field_name="version", max_value=U32_MAX)
        object.__setattr__(self, "ins", _typed_tuple(self.ins, SpellInput, field_name="ins"))
        object.__setattr__(self, "outs", _typed_tuple(self.outs, SpellOutput, field_name="outs"))

    def verify(self) -> bool:
        """Structural well-formedness: version > 0 and at least one input and output."""
        return self.version > 0 and bool(self.ins) and bool(self.outs)


def _typed_tuple(items: Iterable[Any], cls: type, *, field_name: str) -> tuple:
    out = tuple(items)
    for i, it in enumerate(out):
        if not isinstance(it, cls):
            raise TypeError(f"schema error: field '{field_name}[{i}]' must be {cls.__name__} (got {type(it).__name__})")
    return out


@dataclass(frozen=True, slots=True)
class Transaction:
    txid: bytes = ZERO_HASH
    inputs: Tuple[TxInput, ...] = field(default_factory=tuple)
    outputs: Tuple[TxOutput, ...] = field(default_factory=tuple)
    spell: Optional[NormalizedSpell] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _require_hash32(self.txid, field_name="txid"))
        object.__setattr__(self, "inputs", _typed_tuple(self.inputs, TxInput, field_name="inputs"))
        object.__setattr__(self, "outputs", _typed_tuple(self.outputs, TxOutput, field_name="outputs"))
        if self.spell is not None and not isinstance(self.spell, NormalizedSpell):
            raise TypeError("schema error: field 'spell' must be NormalizedSpell or None")

    def verify_spell(self) -> bool:
        # No spell means no charm constraints.
        if self.spell is None:
            return True
        return self.spell.verify()

    def output_by_index(self, index: int) -> Optional[TxOutput]:
        for out in self.outputs:
            if out.index == index:
                return out
        return None


__all__ = [
    "HASH_LEN",
    "U32_MAX",
    "ZERO_HASH",
    "App",
    "CharmState",
    "NormalizedSpell",
    "SpellInput",
    "SpellOutput",
    "Transaction",
    "TxInput",
    "TxOutput",
    "UtxoRef",
]
