# src/charms/runtime/builders.py
"""Transaction builders for fixtures and client tooling.

Builders only shape data; they never validate rules. Pass the result to
charms.runtime.dispatch.check_spell to get a verdict.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from charms.data.types import ZERO_HASH, App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.values import U64Value

DUST_VALUE = 546
P2WPKH_PREFIX = bytes.fromhex("0014")


def _u64_state(tag: str, amount: int) -> CharmState:
    return CharmState.of({tag: U64Value(int(amount))})


def build_token_tx(
    app_tag: str,
    input_amounts: Sequence[int],
    output_amounts: Sequence[int],
    *,
    vk_hash: bytes = ZERO_HASH,
    txid: bytes = ZERO_HASH,
) -> Tuple[App, Transaction]:
    """One input per input amount (vout = position), one dust output per output amount."""
    app = App(tag=app_tag, vk_hash=vk_hash)
    inputs = tuple(
        TxInput(utxo_ref=UtxoRef(ZERO_HASH, i), charm_state=_u64_state(app_tag, amount))
        for i, amount in enumerate(input_amounts)
    )
    outputs = tuple(
        TxOutput(index=i, value=DUST_VALUE, script_pubkey=P2WPKH_PREFIX, charm_state=_u64_state(app_tag, amount))
        for i, amount in enumerate(output_amounts)
    )
    return app, Transaction(txid=txid, inputs=inputs, outputs=outputs)


def build_contract_tx(
    app_tag: str,
    current_state: Optional[int],
    next_state: int,
    amount: int = DUST_VALUE,
    *,
    vk_hash: bytes = ZERO_HASH,
    txid: bytes = ZERO_HASH,
) -> Tuple[App, Transaction]:
    """Single-input/single-output contract transition; current_state=None builds a creation."""
    app = App(tag=app_tag, vk_hash=vk_hash)
    inputs: Tuple[TxInput, ...] = ()
    if current_state is not None:
        inputs = (TxInput(utxo_ref=UtxoRef(ZERO_HASH, 0), charm_state=_u64_state(app_tag, current_state)),)
    outputs = (
        TxOutput(
            index=0,
            value=int(amount),
            script_pubkey=P2WPKH_PREFIX,
            charm_state=_u64_state(app_tag, next_state),
        ),
    )
    return app, Transaction(txid=txid, inputs=inputs, outputs=outputs)


def build_escrow_tx(app_tag: str, current_state: Optional[int], next_state: int, amount: int = DUST_VALUE) -> Tuple[App, Transaction]:
    if not app_tag.startswith("escrow:"):
        raise ValueError(f"escrow app tag must start with 'escrow:': {app_tag!r}")
    return build_contract_tx(app_tag, current_state, next_state, amount)


def build_bounty_tx(app_tag: str, current_state: Optional[int], next_state: int, amount: int = DUST_VALUE) -> Tuple[App, Transaction]:
    if not app_tag.startswith("bounty:"):
        raise ValueError(f"bounty app tag must start with 'bounty:': {app_tag!r}")
    return build_contract_tx(app_tag, current_state, next_state, amount)


__all__ = [
    "DUST_VALUE",
    "build_bounty_tx",
    "build_contract_tx",
    "build_escrow_tx",
    "build_token_tx",
]
