# src/charms/runtime/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

Json = Dict[str, Any]


def _as_int(v: Any, default: int) -> int:
    if v is None or isinstance(v, bool):
        return int(default)
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_bool(v: Any, default: bool) -> bool:
    if v is None:
        return bool(default)
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


@dataclass(frozen=True)
class CheckerConfig:
    # Reject when more than one input (or output) declares a decodable contract
    # state for the same tag, instead of using the first one.
    strict_state_declarations: bool

    # Emit a structured log event for every rejected verdict.
    log_verdicts: bool

    log_level: str

    max_batch_workers: int


_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def validate_checker_config(cfg: CheckerConfig) -> None:
    """Fail-fast validation for operator config."""

    level = str(cfg.log_level or "").strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}; got: {cfg.log_level!r}")

    if int(cfg.max_batch_workers) < 1 or int(cfg.max_batch_workers) > 64:
        raise ValueError(f"max_batch_workers must be 1..64; got: {cfg.max_batch_workers}")


def default_checker_config() -> CheckerConfig:
    return CheckerConfig(
        strict_state_declarations=False,
        log_verdicts=True,
        log_level="INFO",
        max_batch_workers=4,
    )


def _config_from_mapping(raw: Json, base: CheckerConfig) -> CheckerConfig:
    return CheckerConfig(
        strict_state_declarations=_as_bool(raw.get("strict_state_declarations"), base.strict_state_declarations),
        log_verdicts=_as_bool(raw.get("log_verdicts"), base.log_verdicts),
        log_level=_as_str(raw.get("log_level"), base.log_level).strip().upper(),
        max_batch_workers=_as_int(raw.get("max_batch_workers"), base.max_batch_workers),
    )


def read_checker_config_file(path: str) -> CheckerConfig:
    """Read a JSON config file (YAML when the suffix is .yaml/.yml)."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        raw = yaml.safe_load(text)
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("checker config must be a mapping/object")

    cfg = _config_from_mapping(raw, default_checker_config())
    validate_checker_config(cfg)
    return cfg


def _env_overrides() -> Json:
    out: Json = {}
    for key, env_name in (
        ("strict_state_declarations", "CHARMS_STRICT_STATE"),
        ("log_verdicts", "CHARMS_LOG_VERDICTS"),
        ("log_level", "CHARMS_LOG_LEVEL"),
        ("max_batch_workers", "CHARMS_MAX_BATCH_WORKERS"),
    ):
        v = os.environ.get(env_name)
        if v is not None and v.strip():
            out[key] = v.strip()
    return out


def load_checker_config(*, config_path: Optional[str] = None) -> CheckerConfig:
    p = config_path or os.environ.get("CHARMS_CONFIG_PATH")
    if p:
        return read_checker_config_file(p)

    cfg = _config_from_mapping(_env_overrides(), default_checker_config())
    validate_checker_config(cfg)
    return cfg


__all__ = [
    "CheckerConfig",
    "default_checker_config",
    "load_checker_config",
    "read_checker_config_file",
    "validate_checker_config",
]
