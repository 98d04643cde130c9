# src/charms/runtime/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SpellError(Exception):
    """Canonical error type for boundary failures (decode, proof host).

    Rule violations are never raised; they are reported in a CheckReport.
    """

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


@dataclass
class SpellDecodeError(SpellError):
    """Wire data could not be built into the data model (caller precondition)."""


@dataclass
class ProofHostError(SpellError):
    """The proof host refused a proof or was handed unusable inputs."""


class SpellRejectedError(RuntimeError):
    """Raised by embedding runners when a verdict is unmet and must abort the run."""

    def __init__(self, report: Any) -> None:
        errors = list(getattr(report, "errors", ()) or ())
        super().__init__("spell verification failed: " + ("; ".join(errors) or "rejected"))
        self.report = report
