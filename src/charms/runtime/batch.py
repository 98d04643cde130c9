# src/charms/runtime/batch.py
"""Batch verification.

Checks share no state, so a batch is verified in parallel across transactions
and only the result list is assembled in order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from charms.data.types import App, Transaction
from charms.data.values import Value
from charms.runtime.check_types import CheckReport
from charms.runtime.config import CheckerConfig, default_checker_config
from charms.runtime.dispatch import check_spell
from charms.runtime.spell_logging import log_event

log = logging.getLogger("charms.batch")

CheckInput = Tuple[App, Transaction, Value, Value]


def check_batch(items: Iterable[CheckInput], *, config: Optional[CheckerConfig] = None) -> List[CheckReport]:
    cfg = config or default_checker_config()
    work: Sequence[CheckInput] = list(items)
    if not work:
        return []

    workers = max(1, min(int(cfg.max_batch_workers), len(work)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        reports = list(pool.map(lambda it: check_spell(it[0], it[1], it[2], it[3], config=cfg), work))

    rejected = sum(1 for r in reports if not r.valid)
    log_event(log, "batch_checked", level=logging.DEBUG, count=len(reports), rejected=rejected, workers=workers)
    return reports


def all_correct(items: Iterable[CheckInput], *, config: Optional[CheckerConfig] = None) -> bool:
    return all(r.valid for r in check_batch(items, config=config))


__all__ = ["CheckInput", "all_correct", "check_batch"]
