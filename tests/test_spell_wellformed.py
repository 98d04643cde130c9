from __future__ import annotations

import pytest

from charms.data.types import ZERO_HASH, NormalizedSpell, SpellInput, SpellOutput, UtxoRef
from charms.runtime.spell_check import check_normalized_spell, verify_spell

INS = (SpellInput(UtxoRef(ZERO_HASH, 0)),)
OUTS = (SpellOutput(index=0), SpellOutput(index=1))


def test_well_formed_spell_passes() -> None:
    spell = NormalizedSpell(1, INS, OUTS)
    assert verify_spell(spell)
    rep = check_normalized_spell(spell)
    assert rep.valid
    assert (rep.version, rep.input_count, rep.output_count) == (1, 1, 2)
    assert rep.to_json() == {"valid": True, "version": 1, "input_count": 1, "output_count": 2, "errors": []}


@pytest.mark.parametrize(
    "spell,code",
    [
        (NormalizedSpell(0, INS, OUTS), "invalid_version"),
        (NormalizedSpell(1, (), OUTS), "missing_spell_inputs"),
        (NormalizedSpell(1, INS, ()), "missing_spell_outputs"),
    ],
)
def test_each_structural_defect_is_named(spell: NormalizedSpell, code: str) -> None:
    assert not verify_spell(spell)
    rep = check_normalized_spell(spell)
    assert not rep.valid
    assert rep.errors[0] == "Invalid spell structure"
    assert [r.code for r in rep.rejections] == ["invalid_spell_structure", code]


def test_all_defects_are_reported_together() -> None:
    rep = check_normalized_spell(NormalizedSpell(0))
    assert [r.code for r in rep.rejections] == [
        "invalid_spell_structure",
        "invalid_version",
        "missing_spell_inputs",
        "missing_spell_outputs",
    ]
    assert (rep.input_count, rep.output_count) == (0, 0)
