# src/charms/proof/host.py
"""Proof-host boundary.

Two operations mirror what a proving host does around the checker:

  run_spell_checker(input_bytes, spell_vk=...)
      decode the (app, tx, x, w) quadruple, check it, and return the public
      values to commit. An unmet verdict raises SpellRejectedError, which the
      host treats as fatal to the proving run.

  verify_proof(vk, committed, proof, verifier)
      hash the committed public values and ask an injected verifier whether the
      proof attests them under `vk`.

The verification key is always a value passed in by the caller. Nothing here
holds a compiled-in key.
"""

from __future__ import annotations

import hashlib
import logging
import struct
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from charms.codec.json_mirror import decode_check_input, dumps_canonical, encode_spell
from charms.runtime.config import CheckerConfig
from charms.runtime.dispatch import check_spell
from charms.runtime.errors import ProofHostError, SpellRejectedError
from charms.runtime.spell_check import check_normalized_spell
from charms.runtime.spell_logging import log_event

log = logging.getLogger("charms.proof")

VK_WORDS = 8
_U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class VerificationKey:
    """Eight uint32 words identifying the program a proof attests."""

    words: Tuple[int, ...]

    def __post_init__(self) -> None:
        words = tuple(self.words)
        if len(words) != VK_WORDS:
            raise ValueError(f"verification key must have {VK_WORDS} words (got {len(words)})")
        for w in words:
            if isinstance(w, bool) or not isinstance(w, int) or w < 0 or w > _U32_MAX:
                raise ValueError(f"verification key word out of range: {w!r}")
        object.__setattr__(self, "words", words)

    def to_bytes(self) -> bytes:
        return struct.pack(f"<{VK_WORDS}I", *self.words)

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    @staticmethod
    def from_bytes(raw: bytes) -> "VerificationKey":
        if len(raw) != VK_WORDS * 4:
            raise ValueError(f"verification key must be {VK_WORDS * 4} bytes (got {len(raw)})")
        return VerificationKey(struct.unpack(f"<{VK_WORDS}I", raw))

    @staticmethod
    def from_hex(s: str) -> "VerificationKey":
        return VerificationKey.from_bytes(bytes.fromhex(s.strip()))


ProofVerifier = Callable[[VerificationKey, bytes, bytes], bool]


def public_values_digest(committed: bytes) -> bytes:
    return hashlib.sha256(committed).digest()


def run_spell_checker(input_bytes: bytes, *, spell_vk: str, config: Optional[CheckerConfig] = None) -> bytes:
    app, tx, x, w = decode_check_input(input_bytes)

    if tx.spell is not None:
        spell_report = check_normalized_spell(tx.spell)
        if not spell_report.valid:
            raise SpellRejectedError(spell_report)

    report = check_spell(app, tx, x, w, config=config)
    if not report.valid:
        raise SpellRejectedError(report)

    committed = dumps_canonical(
        {
            "spell_vk": spell_vk,
            "app_tag": app.tag,
            "txid": tx.txid.hex(),
            "spell": None if tx.spell is None else encode_spell(tx.spell),
            "report": report.to_json(),
        }
    )
    log_event(log, "spell_committed", level=logging.DEBUG, app_tag=app.tag, txid=tx.txid.hex(), size=len(committed))
    return committed


def verify_proof(vk: VerificationKey, committed: bytes, proof: bytes, verifier: ProofVerifier) -> bytes:
    """Return the committed bytes once the verifier accepts the proof."""
    if not isinstance(vk, VerificationKey):
        raise ProofHostError("invalid_input", "verification_key_required", {"type": type(vk).__name__})

    digest = public_values_digest(committed)
    if not verifier(vk, digest, proof):
        raise ProofHostError("proof_rejected", "verifier_rejected_proof", {"vk": vk.to_hex(), "digest": digest.hex()})

    log_event(log, "proof_verified", level=logging.DEBUG, vk=vk.to_hex(), digest=digest.hex())
    return committed


__all__ = [
    "ProofVerifier",
    "VerificationKey",
    "public_values_digest",
    "run_spell_checker",
    "verify_proof",
]
