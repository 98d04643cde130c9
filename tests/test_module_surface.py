# tests/test_module_surface.py
from __future__ import annotations

import importlib

import pytest

DOCUMENTED_MODULES = [
    "charms.codec",
    "charms.codec.wire_models",
    "charms.data",
    "charms.data.types",
    "charms.data.values",
    "charms.proof",
    "charms.proof.host",
    "charms.runtime.batch",
    "charms.runtime.builders",
    "charms.runtime.checks",
    "charms.runtime.checks.nft",
    "charms.runtime.checks.state_machine",
    "charms.runtime.checks.token",
    "charms.runtime.families",
]

EXPORTING_MODULES = DOCUMENTED_MODULES + [
    "charms.codec.json_mirror",
    "charms.runtime.check_types",
    "charms.runtime.config",
    "charms.runtime.dispatch",
    "charms.runtime.errors",
    "charms.runtime.spell_check",
    "charms.runtime.spell_logging",
]


@pytest.mark.parametrize("name", DOCUMENTED_MODULES)
def test_module_docstring_is_attached(name: str) -> None:
    mod = importlib.import_module(name)
    assert mod.__doc__ is not None
    assert mod.__doc__.strip()


@pytest.mark.parametrize("name", EXPORTING_MODULES)
def test_every_exported_name_resolves(name: str) -> None:
    mod = importlib.import_module(name)
    for attr in getattr(mod, "__all__", []):
        assert hasattr(mod, attr), f"{name}.{attr}"


def test_family_module_exports_only_resolution_api() -> None:
    families = importlib.import_module("charms.runtime.families")
    assert set(families.__all__) == {
        "AppFamily",
        "FAMILY_PREFIXES",
        "ParsedTag",
        "parse_app_tag",
        "supported_families",
    }
