# src/charms/runtime/dispatch.py
from __future__ import annotations

import logging
from typing import Optional

from charms.data.types import App, Transaction
from charms.data.values import EMPTY, Value
from charms.runtime.check_types import CheckReport, Rejection, RejectionKind
from charms.runtime.checks.nft import check_nft
from charms.runtime.checks.state_machine import BOUNTY, ESCROW, check_state_machine
from charms.runtime.checks.token import check_bollar, check_token
from charms.runtime.config import CheckerConfig, default_checker_config
from charms.runtime.families import AppFamily, ParsedTag, parse_app_tag
from charms.runtime.spell_logging import log_event

log = logging.getLogger("charms.dispatch")


def _unknown_family(parsed: ParsedTag) -> CheckReport:
    return CheckReport(
        spell_type=AppFamily.UNKNOWN.value,
        rejections=(
            Rejection(
                "unknown_app_family",
                RejectionKind.UNKNOWN_FAMILY,
                f"Unknown app type: {parsed.tag}",
                {"tag": parsed.tag},
            ),
        ),
        tag=parsed.tag,
    )


def _run(parsed: ParsedTag, app: App, tx: Transaction, x: Value, w: Value, cfg: CheckerConfig) -> CheckReport:
    family = parsed.family
    if family is AppFamily.TOKEN:
        return check_token(app, tx, x, w)
    if family is AppFamily.BOLLAR:
        return check_bollar(app, tx, x, w)
    if family is AppFamily.NFT:
        return check_nft(app, tx, x, w)
    if family is AppFamily.ESCROW:
        return check_state_machine(ESCROW, app, tx, strict=cfg.strict_state_declarations)
    if family is AppFamily.BOUNTY:
        return check_state_machine(BOUNTY, app, tx, strict=cfg.strict_state_declarations)
    return _unknown_family(parsed)


def check_spell(
    app: App,
    tx: Transaction,
    x: Value = EMPTY,
    w: Value = EMPTY,
    *,
    config: Optional[CheckerConfig] = None,
) -> CheckReport:
    """Check one app's rules over a transaction and return the full diagnostic.

    x is the authorization value and w the witness value. An unrecognized tag
    is a reported outcome (spell_type="unknown"), not an exception.
    """
    cfg = config or default_checker_config()
    parsed = parse_app_tag(app.tag)
    report = _run(parsed, app, tx, x, w, cfg)

    log_event(
        log,
        "spell_checked",
        level=logging.DEBUG,
        tag=app.tag,
        family=report.spell_type,
        txid=tx.txid.hex(),
        valid=report.valid,
        codes=list(report.codes),
    )
    if cfg.log_verdicts and not report.valid:
        log_event(
            log,
            "spell_rejected",
            tag=app.tag,
            family=report.spell_type,
            txid=tx.txid.hex(),
            codes=list(report.codes),
            errors=list(report.errors),
        )
    return report


def is_correct(
    app: App,
    tx: Transaction,
    x: Value = EMPTY,
    w: Value = EMPTY,
    *,
    config: Optional[CheckerConfig] = None,
) -> bool:
    """Boolean verdict; a projection of check_spell(...).valid."""
    return check_spell(app, tx, x, w, config=config).valid


__all__ = ["check_spell", "is_correct"]
