# src/charms/proof/__init__.py
"""
Proof-host boundary.

The checker itself knows nothing about proving systems. This package is the
thin seam a zero-knowledge host sits behind:
  - host: run the checker over opaque input bytes and produce committed public
    values; hand a proof plus an injected verification key to a verifier.
"""

from __future__ import annotations

__all__ = ["host"]
