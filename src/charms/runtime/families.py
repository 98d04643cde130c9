# src/charms/runtime/families.py
"""App tag -> checker family resolution.

A tag is `<namespace>:<instance>`. The namespace is resolved once, here, into an
AppFamily; dispatch then matches on the enum instead of re-testing prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class AppFamily(str, Enum):
    TOKEN = "token"
    NFT = "nft"
    ESCROW = "escrow"
    BOUNTY = "bounty"
    BOLLAR = "bollar"
    UNKNOWN = "unknown"


# Ordered; first match wins. Namespaces are disjoint because each ends in ':'.
FAMILY_PREFIXES: Tuple[Tuple[str, AppFamily], ...] = (
    ("token:", AppFamily.TOKEN),
    ("nft:", AppFamily.NFT),
    ("escrow:", AppFamily.ESCROW),
    ("bounty:", AppFamily.BOUNTY),
    ("bollar:", AppFamily.BOLLAR),
)


@dataclass(frozen=True)
class ParsedTag:
    family: AppFamily
    instance: str
    tag: str

    @property
    def known(self) -> bool:
        return self.family is not AppFamily.UNKNOWN


def parse_app_tag(tag: str) -> ParsedTag:
    t = str(tag or "")
    for prefix, family in FAMILY_PREFIXES:
        if t.startswith(prefix):
            return ParsedTag(family=family, instance=t[len(prefix):], tag=t)
    return ParsedTag(family=AppFamily.UNKNOWN, instance=t, tag=t)


def supported_families() -> Tuple[str, ...]:
    return tuple(f.value for _, f in FAMILY_PREFIXES)


__all__ = [
    "AppFamily",
    "FAMILY_PREFIXES",
    "ParsedTag",
    "parse_app_tag",
    "supported_families",
]
