# src/charms/runtime/spell_check.py
from __future__ import annotations

from typing import List

from charms.data.types import NormalizedSpell
from charms.runtime.check_types import Rejection, SpellCheckReport


def verify_spell(spell: NormalizedSpell) -> bool:
    return spell.verify()


def check_normalized_spell(spell: NormalizedSpell) -> SpellCheckReport:
    """Structural legality of a normalized spell (not an app-rule check)."""
    problems: List[Rejection] = []
    if spell.version <= 0:
        problems.append(Rejection.structural("invalid_version", f"Spell version must be > 0 (got {spell.version})"))
    if not spell.ins:
        problems.append(Rejection.structural("missing_spell_inputs", "Spell declares no inputs"))
    if not spell.outs:
        problems.append(Rejection.structural("missing_spell_outputs", "Spell declares no outputs"))

    if problems:
        problems.insert(0, Rejection.structural("invalid_spell_structure", "Invalid spell structure"))

    return SpellCheckReport(
        version=spell.version,
        input_count=len(spell.ins),
        output_count=len(spell.outs),
        rejections=tuple(problems),
    )


__all__ = ["check_normalized_spell", "verify_spell"]
