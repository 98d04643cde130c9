# src/charms/runtime/spell_logging.py
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

Json = Dict[str, Any]


def _now_ms() -> int:
    return int(time.time() * 1000)


def configure_structured_logging(level: Optional[str] = None) -> None:
    """Configure stdlib logging for JSONL output (stdout).

    - Level from the `level` arg, else CHARMS_LOG_LEVEL (default INFO).
    - Safe to call multiple times.
    """
    level_name = (level or os.environ.get("CHARMS_LOG_LEVEL") or "INFO").strip().upper()
    lvl = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if getattr(root, "_charms_configured", False):  # type: ignore[attr-defined]
        root.setLevel(lvl)
        for h in root.handlers:
            h.setLevel(lvl)
        return

    handler = logging.StreamHandler()
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.handlers = [handler]
    root.setLevel(lvl)
    setattr(root, "_charms_configured", True)  # type: ignore[attr-defined]


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a single JSONL log event."""
    if not logger.isEnabledFor(level):
        return
    payload: Json = {"ts_ms": _now_ms(), "event": str(event)}
    payload.update(fields)
    try:
        logger.log(level, json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    except (TypeError, ValueError):
        parts = [f"event={event}"] + [f"{k}={fields.get(k)!r}" for k in sorted(fields.keys())]
        logger.log(level, " ".join(parts))


__all__ = ["configure_structured_logging", "log_event"]
