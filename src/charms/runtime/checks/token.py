# src/charms/runtime/checks/token.py
"""Fungible amount conservation (token:* and bollar:*).

Rules for app tag T:
  - input_sum / output_sum are the sums of U64 values stored under T. Inputs or
    outputs without state, without a T entry, or with a non-U64 entry add 0.
  - input_sum must equal output_sum.
  - An explicit empty Bytes authorization is rejected. Absent/Empty/non-Bytes
    authorization imposes no constraint here.
  - Sums are uint64. A sum past 2**64-1 is rejected (amount_overflow) and
    reported saturated at the ceiling; it never wraps.

Minting is not exempt from conservation. A mint (input_sum == 0 and
output_sum > 0) is flagged is_mint=True and still rejected; callers that allow
issuance must check the issuance credential before invoking this checker.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from charms.data.types import App, Transaction
from charms.data.values import EMPTY, U64_MAX, Value
from charms.runtime.check_types import CheckReport, Rejection
from charms.runtime.checks import iter_tag_values


def sum_amounts(entries: Iterable, tag: str) -> Tuple[int, bool]:
    """Return (sum, overflowed). On overflow the sum is saturated at U64_MAX."""
    total = 0
    for v in iter_tag_values(entries, tag):
        amount = v.as_u64()
        if amount is None:
            continue
        total += amount
        if total > U64_MAX:
            return U64_MAX, True
    return total, False


def classify(input_sum: int, output_sum: int) -> Tuple[bool, bool]:
    """(is_mint, is_burn) as a pure function of the two sums."""
    is_mint = input_sum == 0 and output_sum > 0
    is_burn = input_sum > output_sum
    return is_mint, is_burn


def is_mint(app: App, tx: Transaction) -> bool:
    i, _ = sum_amounts(tx.inputs, app.tag)
    o, _ = sum_amounts(tx.outputs, app.tag)
    return classify(i, o)[0]


def is_burn(app: App, tx: Transaction) -> bool:
    i, _ = sum_amounts(tx.inputs, app.tag)
    o, _ = sum_amounts(tx.outputs, app.tag)
    return classify(i, o)[1]


def check_token(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckReport:
    tag = app.tag
    rejections: List[Rejection] = []

    input_sum, in_overflow = sum_amounts(tx.inputs, tag)
    output_sum, out_overflow = sum_amounts(tx.outputs, tag)

    for side, overflowed in (("inputs", in_overflow), ("outputs", out_overflow)):
        if overflowed:
            rejections.append(
                Rejection.rule(
                    "amount_overflow",
                    f"Token amount overflow in {side}: sum exceeds {U64_MAX}",
                    {"tag": tag, "side": side},
                )
            )

    if input_sum != output_sum:
        rejections.append(
            Rejection.rule(
                "conservation_failed",
                f"Token conservation failed: input={input_sum} != output={output_sum}",
                {"tag": tag, "input_sum": input_sum, "output_sum": output_sum},
            )
        )

    auth = x.as_bytes()
    if auth is not None and len(auth) == 0:
        rejections.append(Rejection.rule("empty_authorization", "Empty authorization data", {"tag": tag}))

    mint, burn = classify(input_sum, output_sum)

    return CheckReport(
        spell_type="token",
        rejections=tuple(rejections),
        input_sum=input_sum,
        output_sum=output_sum,
        is_mint=mint,
        is_burn=burn,
        tag=tag,
    )


def check_bollar(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckReport:
    # Same conservation algorithm; reported under its own family label.
    return check_token(app, tx, x, w).relabel("bollar")


__all__ = ["check_bollar", "check_token", "classify", "is_burn", "is_mint", "sum_amounts"]
