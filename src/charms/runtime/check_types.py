# src/charms/runtime/check_types.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

Json = Dict[str, Any]


class RejectionKind(str, Enum):
    STRUCTURAL = "structural"
    RULE_VIOLATION = "rule_violation"
    UNKNOWN_FAMILY = "unknown_family"


@dataclass(frozen=True)
class Rejection:
    code: str
    kind: RejectionKind
    message: str
    details: Optional[Dict[str, Any]] = None

    @staticmethod
    def rule(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "Rejection":
        return Rejection(code, RejectionKind.RULE_VIOLATION, message, details)

    @staticmethod
    def structural(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "Rejection":
        return Rejection(code, RejectionKind.STRUCTURAL, message, details)

    def to_json(self) -> Json:
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


@dataclass(frozen=True)
class CheckReport:
    """Diagnostic verdict for one (app, tx, x, w) check.

    Only the fields relevant to `spell_type` are populated; the rest stay None.
    `valid` is True iff there are no rejections.
    """

    spell_type: str
    rejections: Tuple[Rejection, ...] = ()

    # fungible
    input_sum: Optional[int] = None
    output_sum: Optional[int] = None
    is_mint: Optional[bool] = None
    is_burn: Optional[bool] = None

    # state machine
    current_state: Optional[str] = None
    next_state: Optional[str] = None
    state_transition_valid: Optional[bool] = None

    # non-fungible
    nft_ids: Optional[Tuple[str, ...]] = None
    duplicate_nfts: Optional[Tuple[str, ...]] = None

    tag: str = field(default="", compare=False)

    @property
    def valid(self) -> bool:
        return not self.rejections

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(r.message for r in self.rejections)

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(r.code for r in self.rejections)

    def __iter__(self) -> Iterator[Any]:
        """Allow `ok, rej = check_spell(...)` unpacking."""
        yield self.valid
        yield (self.rejections[0] if self.rejections else None)

    def relabel(self, spell_type: str) -> "CheckReport":
        return replace(self, spell_type=spell_type)

    def to_json(self) -> Json:
        out: Json = {
            "valid": self.valid,
            "spell_type": self.spell_type,
            "input_sum": self.input_sum,
            "output_sum": self.output_sum,
            "is_mint": self.is_mint,
            "is_burn": self.is_burn,
            "current_state": self.current_state,
            "next_state": self.next_state,
            "state_transition_valid": self.state_transition_valid,
            "nft_ids": None if self.nft_ids is None else list(self.nft_ids),
            "duplicate_nfts": None if self.duplicate_nfts is None else list(self.duplicate_nfts),
            "errors": list(self.errors),
            "rejections": [r.to_json() for r in self.rejections],
        }
        return out


@dataclass(frozen=True)
class SpellCheckReport:
    version: int
    input_count: int
    output_count: int
    rejections: Tuple[Rejection, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.rejections

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(r.message for r in self.rejections)

    def to_json(self) -> Json:
        return {
            "valid": self.valid,
            "version": self.version,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "errors": list(self.errors),
        }


__all__ = ["CheckReport", "Rejection", "RejectionKind", "SpellCheckReport"]
