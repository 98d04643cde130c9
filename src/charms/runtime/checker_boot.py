# src/charms/runtime/checker_boot.py
from __future__ import annotations

from typing import Optional

from charms.env import load_dotenv_if_present
from charms.runtime.config import CheckerConfig, load_checker_config
from charms.runtime.spell_logging import configure_structured_logging


def boot_checker(*, config_path: Optional[str] = None, configure_logging: bool = True) -> CheckerConfig:
    """
    Prepare a process that embeds the checker (proof host, batch worker).

    Loads .env (if any), resolves CheckerConfig from the explicit path, the
    CHARMS_CONFIG_PATH file, or CHARMS_* variables, and configures JSONL
    logging at the configured level. Libraries that only call check_spell do
    not need this.
    """
    load_dotenv_if_present()
    cfg = load_checker_config(config_path=config_path)
    if configure_logging:
        configure_structured_logging(cfg.log_level)
    return cfg


__all__ = ["boot_checker"]
