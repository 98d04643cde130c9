# tests/test_state_machine_transitions.py
from __future__ import annotations

import itertools

import pytest

from charms.data.types import ZERO_HASH, App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.values import EMPTY, BytesValue, StringValue, U64Value
from charms.runtime.builders import build_bounty_tx, build_escrow_tx
from charms.runtime.checks.state_machine import (
    BOUNTY,
    ESCROW,
    ContractState,
    StateMachine,
    check_bounty,
    check_escrow,
    check_state_machine,
    decode_state,
)
from charms.runtime.dispatch import check_spell

ESCROW_CODES = {"Created": 0, "Funded": 1, "Released": 2, "Disputed": 3, "Refunded": 4, "MilestoneCompleted": 101}
BOUNTY_CODES = {"Open": 0, "InProgress": 1, "Completed": 2, "Cancelled": 3, "Disputed": 4}


def _contract_tx(tag: str, ins, outs) -> Transaction:
    return Transaction(
        txid=ZERO_HASH,
        inputs=tuple(TxInput(UtxoRef(ZERO_HASH, i), CharmState.of({tag: v})) for i, v in enumerate(ins)),
        outputs=tuple(TxOutput(index=i, charm_state=CharmState.of({tag: v})) for i, v in enumerate(outs)),
    )


def _run(machine: StateMachine, codes: dict, src, dst):
    tag = f"{machine.family}:C1"
    app, tx = (build_escrow_tx if machine is ESCROW else build_bounty_tx)(
        tag, None if src is None else codes[src], codes[dst]
    )
    return check_state_machine(machine, app, tx)


def test_escrow_created_to_funded_is_accepted() -> None:
    app, tx = build_escrow_tx("escrow:CONTRACT1", 0, 1, 100_000)
    rep = check_escrow(app, tx)
    assert rep.valid
    assert rep.current_state == "Created"
    assert rep.next_state == "Funded"
    assert rep.state_transition_valid is True


def test_escrow_funded_to_refunded_is_rejected() -> None:
    app, tx = build_escrow_tx("escrow:CONTRACT1", 1, 4)
    rep = check_escrow(app, tx)
    assert not rep.valid
    assert rep.state_transition_valid is False
    assert rep.errors == ("Invalid escrow transition: Funded -> Refunded",)


@pytest.mark.parametrize("machine,codes", [(ESCROW, ESCROW_CODES), (BOUNTY, BOUNTY_CODES)])
def test_every_table_entry_is_accepted(machine: StateMachine, codes: dict) -> None:
    for src, dst in machine.transitions:
        rep = _run(machine, codes, src, dst)
        assert rep.valid, (src, dst, rep.errors)


@pytest.mark.parametrize("machine,codes", [(ESCROW, ESCROW_CODES), (BOUNTY, BOUNTY_CODES)])
def test_swapped_halves_of_table_entries_are_rejected(machine: StateMachine, codes: dict) -> None:
    entries = sorted(machine.transitions, key=lambda t: (str(t[0]), t[1]))
    for (a_src, _), (_, b_dst) in itertools.permutations(entries, 2):
        if (a_src, b_dst) in machine.transitions:
            continue
        rep = _run(machine, codes, a_src, b_dst)
        assert not rep.valid, (a_src, b_dst)
        assert rep.codes == ("invalid_transition",)


@pytest.mark.parametrize("machine,codes", [(ESCROW, ESCROW_CODES), (BOUNTY, BOUNTY_CODES)])
def test_terminal_states_have_no_outgoing_transition(machine: StateMachine, codes: dict) -> None:
    assert machine.terminal_states
    for term in machine.terminal_states:
        for dst in machine.state_names:
            assert not _run(machine, codes, term, dst).valid


def test_terminal_state_sets() -> None:
    assert ESCROW.terminal_states == frozenset({"Released", "Refunded"})
    assert BOUNTY.terminal_states == frozenset({"Completed", "Cancelled"})


def test_escrow_milestone_sub_state_is_decoded_before_index_table() -> None:
    assert decode_state(ESCROW, U64Value(100)) == ContractState("MilestoneCompleted", 0)
    assert decode_state(ESCROW, U64Value(107)) == ContractState("MilestoneCompleted", 7)
    assert decode_state(ESCROW, U64Value(4)) == ContractState("Refunded")
    assert decode_state(ESCROW, U64Value(5)) is None
    assert decode_state(ESCROW, U64Value(99)) is None
    assert decode_state(BOUNTY, U64Value(100)) is None
    assert decode_state(ESCROW, StringValue("0")) is None


def test_milestone_label_carries_number() -> None:
    app, tx = build_escrow_tx("escrow:M", 1, 103)
    rep = check_escrow(app, tx)
    assert rep.valid
    assert rep.next_state == "MilestoneCompleted(3)"


def test_missing_next_state_is_rejected() -> None:
    tag = "escrow:N"
    tx = Transaction(inputs=(TxInput(UtxoRef(ZERO_HASH, 0), CharmState.of({tag: U64Value(0)})),))
    rep = check_escrow(App(tag), tx)
    assert not rep.valid
    assert rep.next_state == "None"
    assert rep.errors == ("Invalid escrow transition: Created -> None",)


def test_creation_requires_no_prior_state() -> None:
    app, tx = build_bounty_tx("bounty:B", None, 0)
    rep = check_bounty(app, tx)
    assert rep.valid
    assert rep.current_state == "None"
    assert rep.next_state == "Open"

    app, tx = build_bounty_tx("bounty:B", 0, 0)
    assert not check_bounty(app, tx).valid


def test_first_decodable_state_per_side_is_used() -> None:
    tag = "escrow:F"
    tx = _contract_tx(tag, [U64Value(0), U64Value(3)], [U64Value(1), U64Value(4)])
    rep = check_escrow(App(tag), tx)
    assert rep.current_state == "Created"
    assert rep.next_state == "Funded"
    assert rep.valid


def test_strict_mode_rejects_conflicting_declarations() -> None:
    tag = "escrow:S"
    tx = _contract_tx(tag, [U64Value(0), U64Value(3)], [U64Value(1)])
    assert check_escrow(App(tag), tx).valid
    rep = check_escrow(App(tag), tx, strict=True)
    assert not rep.valid
    assert "ambiguous_state_declaration" in rep.codes


@pytest.mark.parametrize("bad", [U64Value(42), U64Value(99), BytesValue(b"\x03"), StringValue("Created"), EMPTY])
@pytest.mark.parametrize("strict", [False, True])
def test_undecodable_entry_is_rejected_in_every_mode(bad, strict: bool) -> None:
    tag = "escrow:U"
    tx = _contract_tx(tag, [bad], [U64Value(0)])
    rep = check_escrow(App(tag), tx, strict=strict)
    assert not rep.valid
    assert rep.codes == ("undecodable_state",)
    assert rep.rejections[0].details == {"tag": tag, "side": "inputs", "count": 1}


def test_undecodable_output_is_rejected_alongside_valid_state() -> None:
    tag = "escrow:V"
    tx = _contract_tx(tag, [U64Value(0)], [U64Value(1), U64Value(7)])
    rep = check_spell(App(tag), tx)
    assert rep.next_state == "Funded"
    assert rep.state_transition_valid is True
    assert rep.codes == ("undecodable_state",)


def test_bounty_and_escrow_tables_are_distinct() -> None:
    # Open -> Cancelled is a bounty move; escrow has no such state.
    app, tx = build_bounty_tx("bounty:X", BOUNTY_CODES["Open"], BOUNTY_CODES["Cancelled"])
    assert check_bounty(app, tx).valid
    # Same numeric pair (0 -> 3) under escrow is Created -> Disputed, which is illegal.
    app, tx = build_escrow_tx("escrow:X", 0, 3)
    rep = check_escrow(app, tx)
    assert not rep.valid
    assert rep.errors == ("Invalid escrow transition: Created -> Disputed",)
