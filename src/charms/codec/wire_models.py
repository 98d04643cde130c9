# src/charms/codec/wire_models.py
"""Pydantic wire models for the JSON mirror of the data model.

Shape rules (shared with non-Python callers):
  - Value is adjacently tagged: {"type": "u64", "value": 1000}. Discriminants
    are lowercase: empty | bool | u64 | i64 | bytes | string | list | map.
  - Byte strings are hex. txid / vk_hash are exactly 32 bytes (64 hex chars).
  - Unknown keys are rejected everywhere.

These models only check shape and ranges. Conversion into charms.data objects
lives in charms.codec.json_mirror.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from charms.data.values import I64_MAX, I64_MIN, U64_MAX

U32_MAX = 2**32 - 1

Hex = Annotated[str, Field(pattern=r"^(?:[0-9a-fA-F]{2})*$")]
Hex32 = Annotated[str, Field(pattern=r"^[0-9a-fA-F]{64}$")]
U32 = Annotated[int, Field(strict=True, ge=0, le=U32_MAX)]
U64 = Annotated[int, Field(strict=True, ge=0, le=U64_MAX)]
I64 = Annotated[int, Field(strict=True, ge=I64_MIN, le=I64_MAX)]


class _StrictModel(BaseModel):
    """Strict model: reject unknown keys."""

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Value union
# ---------------------------------------------------------------------------


class WireEmpty(_StrictModel):
    type: Literal["empty"]
    value: None = None


class WireBool(_StrictModel):
    type: Literal["bool"]
    value: StrictBool


class WireU64(_StrictModel):
    type: Literal["u64"]
    value: U64


class WireI64(_StrictModel):
    type: Literal["i64"]
    value: I64


class WireBytes(_StrictModel):
    type: Literal["bytes"]
    value: Hex


class WireString(_StrictModel):
    type: Literal["string"]
    value: StrictStr


class WireList(_StrictModel):
    type: Literal["list"]
    value: List["WireData"] = Field(default_factory=list)


class WireMap(_StrictModel):
    type: Literal["map"]
    value: Dict[str, "WireData"] = Field(default_factory=dict)


WireData = Annotated[
    Union[WireEmpty, WireBool, WireU64, WireI64, WireBytes, WireString, WireList, WireMap],
    Field(discriminator="type"),
]

WireList.model_rebuild()
WireMap.model_rebuild()


# ---------------------------------------------------------------------------
# Data model mirror
# ---------------------------------------------------------------------------


class WireApp(_StrictModel):
    tag: Annotated[str, Field(min_length=1)]
    vk_hash: Hex32
    params: Optional[WireData] = None


class WireUtxoRef(_StrictModel):
    txid: Hex32
    vout: U32


class WireCharmState(_StrictModel):
    apps: Dict[str, WireData] = Field(default_factory=dict)


class WireTxInput(_StrictModel):
    utxo_ref: WireUtxoRef
    charm_state: Optional[WireCharmState] = None


class WireTxOutput(_StrictModel):
    index: U32
    value: U64 = 0
    script_pubkey: Hex = ""
    charm_state: Optional[WireCharmState] = None


class WireSpellInput(_StrictModel):
    utxo_ref: WireUtxoRef
    charms: Optional[WireCharmState] = None


class WireSpellOutput(_StrictModel):
    index: U32
    charms: Optional[WireCharmState] = None


class WireSpell(_StrictModel):
    version: U32
    ins: List[WireSpellInput] = Field(default_factory=list)
    outs: List[WireSpellOutput] = Field(default_factory=list)


class WireTransaction(_StrictModel):
    txid: Hex32
    inputs: List[WireTxInput] = Field(default_factory=list)
    outputs: List[WireTxOutput] = Field(default_factory=list)
    spell: Optional[WireSpell] = None


class WireCheckInput(_StrictModel):
    """The (app, tx, x, w) quadruple consumed by the checker."""

    app: WireApp
    tx: WireTransaction
    x: Optional[WireData] = None
    w: Optional[WireData] = None


__all__ = [
    "WireApp",
    "WireBool",
    "WireBytes",
    "WireCharmState",
    "WireCheckInput",
    "WireData",
    "WireEmpty",
    "WireI64",
    "WireList",
    "WireMap",
    "WireSpell",
    "WireSpellInput",
    "WireSpellOutput",
    "WireString",
    "WireTransaction",
    "WireTxInput",
    "WireTxOutput",
    "WireU64",
    "WireUtxoRef",
]
