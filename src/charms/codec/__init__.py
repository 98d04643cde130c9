# src/charms/codec/__init__.py
"""
JSON mirror of the Charms data model.

Non-Python callers (browser tooling, edge functions) hand the checker JSON:
  - wire_models: pydantic models describing the accepted shapes
  - json_mirror: encode/decode between those shapes and charms.data objects

The mirror adds no rules. Decoding failures raise SpellDecodeError and are the
caller's problem; they are never turned into a rejected verdict.
"""

from __future__ import annotations

__all__ = [
    "json_mirror",
    "wire_models",
]
