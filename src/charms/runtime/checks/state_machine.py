# src/charms/runtime/checks/state_machine.py
"""Contract state transitions (escrow:* and bounty:*).

The contract state is the U64 stored under the app tag. It is decoded through a
fixed index -> name table; a family may also reserve values at or above an
offset for a parameterized sub-state (escrow: value >= 100 is
MilestoneCompleted with milestone = value - 100), which is tried first.

current_state is the first input, in input order, whose entry decodes; None
when there is none (only legal as the source of the creation transition).
next_state is the first output, in output order, whose entry decodes. The pair
must appear verbatim in the family's transition table.

An entry under the tag that does not decode is always rejected
(undecodable_state). With strict_state_declarations the checker also rejects
more than one decodable state-bearing input, or output, for the tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from charms.data.types import App, Transaction
from charms.data.values import EMPTY, Value
from charms.runtime.check_types import CheckReport, Rejection
from charms.runtime.checks import iter_tag_values

NONE_LABEL = "None"


@dataclass(frozen=True)
class ContractState:
    name: str
    param: Optional[int] = None

    @property
    def label(self) -> str:
        if self.param is None:
            return self.name
        return f"{self.name}({self.param})"


Transition = Tuple[Optional[str], str]


@dataclass(frozen=True)
class StateMachine:
    family: str
    names: Tuple[str, ...]
    transitions: FrozenSet[Transition]
    param_offset: Optional[int] = None
    param_name: Optional[str] = None

    def decode(self, value: Value) -> Optional[ContractState]:
        n = value.as_u64()
        if n is None:
            return None
        if self.param_offset is not None and self.param_name and n >= self.param_offset:
            return ContractState(self.param_name, n - self.param_offset)
        if n < len(self.names):
            return ContractState(self.names[n])
        return None

    def allows(self, current: Optional[ContractState], nxt: Optional[ContractState]) -> bool:
        if nxt is None:
            return False
        return ((current.name if current is not None else None), nxt.name) in self.transitions

    @property
    def state_names(self) -> Tuple[str, ...]:
        extra = (self.param_name,) if self.param_name else ()
        return self.names + extra

    @property
    def terminal_states(self) -> FrozenSet[str]:
        sources = {src for src, _ in self.transitions if src is not None}
        return frozenset(n for n in self.state_names if n not in sources)


ESCROW = StateMachine(
    family="escrow",
    names=("Created", "Funded", "Released", "Disputed", "Refunded"),
    param_offset=100,
    param_name="MilestoneCompleted",
    transitions=frozenset(
        {
            (None, "Created"),
            ("Created", "Funded"),
            ("Funded", "MilestoneCompleted"),
            ("MilestoneCompleted", "Released"),
            ("Funded", "Disputed"),
            ("Disputed", "Refunded"),
            ("Disputed", "Released"),
        }
    ),
)

BOUNTY = StateMachine(
    family="bounty",
    names=("Open", "InProgress", "Completed", "Cancelled", "Disputed"),
    transitions=frozenset(
        {
            (None, "Open"),
            ("Open", "InProgress"),
            ("InProgress", "Completed"),
            ("Open", "Cancelled"),
            ("InProgress", "Disputed"),
            ("Disputed", "Completed"),
            ("Disputed", "Cancelled"),
        }
    ),
)


def decode_state(machine: StateMachine, value: Value) -> Optional[ContractState]:
    return machine.decode(value)


def _scan(machine: StateMachine, entries: Iterable, tag: str) -> Tuple[List[ContractState], int]:
    """Return (decoded states in order, count of entries that did not decode)."""
    decoded: List[ContractState] = []
    undecodable = 0
    for v in iter_tag_values(entries, tag):
        st = machine.decode(v)
        if st is None:
            undecodable += 1
        else:
            decoded.append(st)
    return decoded, undecodable


def check_state_machine(
    machine: StateMachine,
    app: App,
    tx: Transaction,
    *,
    strict: bool = False,
) -> CheckReport:
    tag = app.tag
    rejections: List[Rejection] = []

    in_states, in_bad = _scan(machine, tx.inputs, tag)
    out_states, out_bad = _scan(machine, tx.outputs, tag)

    current = in_states[0] if in_states else None
    nxt = out_states[0] if out_states else None

    for side, states, bad in (("inputs", in_states, in_bad), ("outputs", out_states, out_bad)):
        if bad:
            rejections.append(
                Rejection.structural(
                    "undecodable_state",
                    f"Undecodable {machine.family} state in {side} for {tag}",
                    {"tag": tag, "side": side, "count": bad},
                )
            )
        if strict and len(states) > 1:
            rejections.append(
                Rejection.structural(
                    "ambiguous_state_declaration",
                    f"Ambiguous {machine.family} state: {len(states)} {side} declare a state for {tag}",
                    {"tag": tag, "side": side, "states": [s.label for s in states]},
                )
            )

    current_label = current.label if current is not None else NONE_LABEL
    next_label = nxt.label if nxt is not None else NONE_LABEL

    ok = machine.allows(current, nxt)
    if not ok:
        rejections.append(
            Rejection.rule(
                "invalid_transition",
                f"Invalid {machine.family} transition: {current_label} -> {next_label}",
                {"tag": tag, "current_state": current_label, "next_state": next_label},
            )
        )

    return CheckReport(
        spell_type=machine.family,
        rejections=tuple(rejections),
        current_state=current_label,
        next_state=next_label,
        state_transition_valid=ok,
        tag=tag,
    )


def check_escrow(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY, *, strict: bool = False) -> CheckReport:
    return check_state_machine(ESCROW, app, tx, strict=strict)


def check_bounty(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY, *, strict: bool = False) -> CheckReport:
    return check_state_machine(BOUNTY, app, tx, strict=strict)


__all__ = [
    "BOUNTY",
    "ESCROW",
    "ContractState",
    "StateMachine",
    "check_bounty",
    "check_escrow",
    "check_state_machine",
    "decode_state",
]
