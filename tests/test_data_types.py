# tests/test_data_types.py
from __future__ import annotations

import pytest

from charms.data.types import (
    ZERO_HASH,
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
from charms.data.values import EMPTY, U64Value


def test_app_requires_non_empty_tag_and_32_byte_vk_hash() -> None:
    app = App("token:TEST", bytes(32))
    assert app.params == EMPTY
    with pytest.raises(ValueError):
        App("", bytes(32))
    with pytest.raises(ValueError):
        App("token:TEST", bytes(31))


def test_utxo_ref_equality_uses_both_fields() -> None:
    a = UtxoRef(bytes(32), 0)
    assert a == UtxoRef(bytes(32), 0)
    assert a != UtxoRef(bytes(32), 1)
    assert a != UtxoRef(b"\x01" * 32, 0)
    assert len({a, UtxoRef(bytes(32), 0)}) == 1


def test_utxo_ref_vout_is_uint32() -> None:
    with pytest.raises(ValueError):
        UtxoRef(bytes(32), 2**32)


def test_charm_state_absent_tag_differs_from_empty_entry() -> None:
    st = CharmState.of({"token:A": EMPTY})
    assert st.get("token:A") == EMPTY
    assert st.get("token:B") is None
    assert "token:A" in st
    assert "token:B" not in st


def test_charm_state_with_app_returns_new_state() -> None:
    base = CharmState()
    st = base.with_app("token:A", U64Value(5))
    assert base.get("token:A") is None
    assert st.get("token:A") == U64Value(5)
    assert st.with_app("token:A", U64Value(6)).get("token:A") == U64Value(6)


def test_transaction_normalizes_sequences_to_tuples() -> None:
    tx = Transaction(
        txid=ZERO_HASH,
        inputs=[TxInput(UtxoRef(ZERO_HASH, 0))],
        outputs=[TxOutput(index=3, value=546)],
    )
    assert isinstance(tx.inputs, tuple)
    assert isinstance(tx.outputs, tuple)
    assert tx.output_by_index(3) is tx.outputs[0]
    assert tx.output_by_index(0) is None


def test_transaction_rejects_wrong_element_types() -> None:
    with pytest.raises(TypeError):
        Transaction(inputs=[object()])  # type: ignore[list-item]


def test_output_amount_is_uint64() -> None:
    with pytest.raises(ValueError):
        TxOutput(index=0, value=-1)
    with pytest.raises(ValueError):
        TxOutput(index=0, value=2**64)


def test_spell_verify_requires_version_inputs_and_outputs() -> None:
    ins = (SpellInput(UtxoRef(ZERO_HASH, 0)),)
    outs = (SpellOutput(index=0),)
    assert NormalizedSpell(1, ins, outs).verify()
    assert not NormalizedSpell(0, ins, outs).verify()
    assert not NormalizedSpell(1, (), outs).verify()
    assert not NormalizedSpell(1, ins, ()).verify()


def test_transaction_without_spell_has_no_charm_constraints() -> None:
    assert Transaction().verify_spell() is True
    bad = Transaction(spell=NormalizedSpell(1))
    assert bad.verify_spell() is False
