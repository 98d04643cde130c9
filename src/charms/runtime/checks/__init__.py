# src/charms/runtime/checks/__init__.py
"""Per-family spell checkers.

Each module exposes `check_<family>(app, tx, x, w, ...) -> CheckReport` and is
called by charms.runtime.dispatch once the app tag has been resolved to a
family. Checkers are pure: they read the transaction and return a report.

NOTE: Keep this package import-safe (no imports of charms.runtime.dispatch).
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Protocol

from charms.data.values import Value


class _HasState(Protocol):
    def state_for(self, tag: str) -> Optional[Value]: ...


def iter_tag_values(entries: Iterable[_HasState], tag: str) -> Iterator[Value]:
    """Yield the Value stored under `tag` for every input/output that has one, in order."""
    for e in entries:
        v = e.state_for(tag)
        if v is not None:
            yield v


__all__ = [
    "iter_tag_values",
    "nft",
    "state_machine",
    "token",
]
