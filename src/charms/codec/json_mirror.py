# src/charms/codec/json_mirror.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from charms.codec.wire_models import (
    WireApp,
    WireBool,
    WireBytes,
    WireCharmState,
    WireCheckInput,
    WireData,
    WireEmpty,
    WireI64,
    WireList,
    WireMap,
    WireSpell,
    WireString,
    WireTransaction,
    WireU64,
)
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
    I64Value,
    ListValue,
    MapValue,
    StringValue,
    U64Value,
    Value,
    ValueKind,
)
from charms.runtime.check_types import CheckReport, SpellCheckReport
from charms.runtime.errors import SpellDecodeError

Json = Dict[str, Any]
M = TypeVar("M", bound=BaseModel)

# Nesting cap for decoded documents, counted in JSON containers. A Value costs
# two levels per step (its tagged object and the list/map it holds).
MAX_WIRE_DEPTH = 128


def dumps_canonical(obj: Any) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _loads(raw: Union[str, bytes, bytearray, Json]) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SpellDecodeError("invalid_wire", "invalid_utf8", {"error": str(e)}) from e
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SpellDecodeError("invalid_wire", "invalid_json", {"error": str(e)}) from e
        except RecursionError as e:
            raise _too_deep() from e
    if _depth_exceeds(raw, MAX_WIRE_DEPTH):
        raise _too_deep()
    return raw


def _too_deep() -> SpellDecodeError:
    return SpellDecodeError("invalid_wire", "value_too_deep", {"max_depth": MAX_WIRE_DEPTH})


def _depth_exceeds(obj: Any, limit: int) -> bool:
    stack = [(obj, 1)]
    while stack:
        cur, depth = stack.pop()
        if isinstance(cur, dict):
            children: Any = cur.values()
        elif isinstance(cur, list):
            children = cur
        else:
            continue
        if depth > limit:
            return True
        stack.extend((c, depth + 1) for c in children)
    return False


def _errors(e: ValidationError) -> list:
    return [{"loc": list(err.get("loc", ())), "msg": str(err.get("msg", ""))} for err in e.errors()]


def _validate(model: Type[M], raw: Any, *, what: str) -> M:
    obj = _loads(raw)
    try:
        return model.model_validate(obj)
    except ValidationError as e:
        raise SpellDecodeError("invalid_wire", f"{what}_invalid", {"errors": _errors(e)}) from e


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------


def encode_value(v: Value) -> Json:
    if not isinstance(v, Value):
        raise TypeError(f"not a Value: {type(v).__name__}")
    kind = v.kind
    if kind is ValueKind.EMPTY:
        return {"type": kind.value}
    if kind is ValueKind.BYTES:
        return {"type": kind.value, "value": v.value.hex()}
    if kind is ValueKind.LIST:
        return {"type": kind.value, "value": [encode_value(it) for it in v.items]}
    if kind is ValueKind.MAP:
        return {"type": kind.value, "value": {k: encode_value(it) for k, it in v.entries}}
    return {"type": kind.value, "value": v.value}


def _value_from_wire(w: Any) -> Value:
    if w is None or isinstance(w, WireEmpty):
        return EMPTY
    if isinstance(w, WireBool):
        return BoolValue(w.value)
    if isinstance(w, WireU64):
        return U64Value(w.value)
    if isinstance(w, WireI64):
        return I64Value(w.value)
    if isinstance(w, WireBytes):
        return BytesValue(bytes.fromhex(w.value))
    if isinstance(w, WireString):
        return StringValue(w.value)
    if isinstance(w, WireList):
        return ListValue(tuple(_value_from_wire(it) for it in w.value))
    if isinstance(w, WireMap):
        return MapValue.of({k: _value_from_wire(it) for k, it in w.value.items()})
    raise SpellDecodeError("invalid_wire", "unknown_value_variant", {"type": type(w).__name__})


_VALUE_ADAPTER: TypeAdapter = TypeAdapter(WireData)


def decode_value(raw: Any) -> Value:
    obj = _loads(raw)
    try:
        w = _VALUE_ADAPTER.validate_python(obj)
    except ValidationError as e:
        raise SpellDecodeError("invalid_wire", "value_invalid", {"errors": _errors(e)}) from e
    return _build(lambda: _value_from_wire(w), what="value")


# ---------------------------------------------------------------------------
# App / state / transaction / spell
# ---------------------------------------------------------------------------


def encode_app(app: App) -> Json:
    return {"tag": app.tag, "vk_hash": app.vk_hash.hex(), "params": encode_value(app.params)}


def _app_from_wire(w: WireApp) -> App:
    return App(tag=w.tag, vk_hash=bytes.fromhex(w.vk_hash), params=_value_from_wire(w.params))


def decode_app(raw: Any) -> App:
    return _build(lambda: _app_from_wire(_validate(WireApp, raw, what="app")), what="app")


def encode_charm_state(state: Optional[CharmState]) -> Optional[Json]:
    if state is None:
        return None
    return {"apps": {tag: encode_value(v) for tag, v in state.apps}}


def _state_from_wire(w: Optional[WireCharmState]) -> Optional[CharmState]:
    if w is None:
        return None
    return CharmState.of({tag: _value_from_wire(v) for tag, v in w.apps.items()})


def _utxo_json(ref: UtxoRef) -> Json:
    return {"txid": ref.txid.hex(), "vout": ref.vout}


def encode_spell(spell: NormalizedSpell) -> Json:
    return {
        "version": spell.version,
        "ins": [{"utxo_ref": _utxo_json(i.utxo_ref), "charms": encode_charm_state(i.charms)} for i in spell.ins],
        "outs": [{"index": o.index, "charms": encode_charm_state(o.charms)} for o in spell.outs],
    }


def _spell_from_wire(w: WireSpell) -> NormalizedSpell:
    return NormalizedSpell(
        version=w.version,
        ins=tuple(
            SpellInput(
                utxo_ref=UtxoRef(bytes.fromhex(i.utxo_ref.txid), i.utxo_ref.vout),
                charms=_state_from_wire(i.charms),
            )
            for i in w.ins
        ),
        outs=tuple(SpellOutput(index=o.index, charms=_state_from_wire(o.charms)) for o in w.outs),
    )


def decode_spell(raw: Any) -> NormalizedSpell:
    return _build(lambda: _spell_from_wire(_validate(WireSpell, raw, what="spell")), what="spell")


def encode_transaction(tx: Transaction) -> Json:
    out: Json = {
        "txid": tx.txid.hex(),
        "inputs": [
            {"utxo_ref": _utxo_json(i.utxo_ref), "charm_state": encode_charm_state(i.charm_state)}
            for i in tx.inputs
        ],
        "outputs": [
            {
                "index": o.index,
                "value": o.value,
                "script_pubkey": o.script_pubkey.hex(),
                "charm_state": encode_charm_state(o.charm_state),
            }
            for o in tx.outputs
        ],
    }
    if tx.spell is not None:
        out["spell"] = encode_spell(tx.spell)
    return out


def _tx_from_wire(w: WireTransaction) -> Transaction:
    return Transaction(
        txid=bytes.fromhex(w.txid),
        inputs=tuple(
            TxInput(
                utxo_ref=UtxoRef(bytes.fromhex(i.utxo_ref.txid), i.utxo_ref.vout),
                charm_state=_state_from_wire(i.charm_state),
            )
            for i in w.inputs
        ),
        outputs=tuple(
            TxOutput(
                index=o.index,
                value=o.value,
                script_pubkey=bytes.fromhex(o.script_pubkey),
                charm_state=_state_from_wire(o.charm_state),
            )
            for o in w.outputs
        ),
        spell=None if w.spell is None else _spell_from_wire(w.spell),
    )


def decode_transaction(raw: Any) -> Transaction:
    return _build(lambda: _tx_from_wire(_validate(WireTransaction, raw, what="tx")), what="tx")


def decode_check_input(raw: Any) -> Tuple[App, Transaction, Value, Value]:
    """Decode the (app, tx, x, w) quadruple. Missing x / w decode to Empty."""

    def _do() -> Tuple[App, Transaction, Value, Value]:
        w = _validate(WireCheckInput, raw, what="check_input")
        return _app_from_wire(w.app), _tx_from_wire(w.tx), _value_from_wire(w.x), _value_from_wire(w.w)

    return _build(_do, what="check_input")


def encode_check_input(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> Json:
    return {"app": encode_app(app), "tx": encode_transaction(tx), "x": encode_value(x), "w": encode_value(w)}


def encode_report(report: Union[CheckReport, SpellCheckReport]) -> Json:
    return report.to_json()


def _build(fn, *, what: str):
    # Data-model constructors enforce invariants the wire models cannot express
    # (e.g. duplicate keys after normalization); surface those as decode errors.
    try:
        return fn()
    except (TypeError, ValueError) as e:
        raise SpellDecodeError("invalid_wire", f"{what}_invalid", {"error": str(e)}) from e
    except RecursionError as e:
        raise _too_deep() from e


__all__ = [
    "MAX_WIRE_DEPTH",
    "decode_app",
    "decode_check_input",
    "decode_spell",
    "decode_transaction",
    "decode_value",
    "dumps_canonical",
    "encode_app",
    "encode_charm_state",
    "encode_check_input",
    "encode_report",
    "encode_spell",
    "encode_transaction",
    "encode_value",
]
