# src/charms/runtime/checks/nft.py
"""Non-fungible uniqueness (nft:*).

For app tag T the NFT id is the Bytes value stored under T (other variants are
ignored). Output ids are collected in output order with duplicates kept so that
every repeated occurrence can be reported. An output id that no input carries
is a new mint and needs a non-Empty authorization value; an id present on both
sides is a plain transfer.

Ids are reported as lowercase hex.
"""

from __future__ import annotations

from typing import List, Set

from charms.data.types import App, Transaction
from charms.data.values import EMPTY, Value
from charms.runtime.check_types import CheckReport, Rejection
from charms.runtime.checks import iter_tag_values


def collect_ids(entries, tag: str) -> List[bytes]:
    out: List[bytes] = []
    for v in iter_tag_values(entries, tag):
        b = v.as_bytes()
        if b is not None:
            out.append(b)
    return out


def check_nft(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckReport:
    tag = app.tag
    rejections: List[Rejection] = []

    input_ids: Set[bytes] = set(collect_ids(tx.inputs, tag))
    output_ids = collect_ids(tx.outputs, tag)

    duplicates: List[str] = []
    seen: Set[bytes] = set()
    for nft_id in output_ids:
        if nft_id in seen:
            duplicates.append(nft_id.hex())
            rejections.append(
                Rejection.rule(
                    "duplicate_nft",
                    f"Duplicate NFT in outputs: {nft_id.hex()}",
                    {"tag": tag, "nft_id": nft_id.hex()},
                )
            )
            continue
        seen.add(nft_id)

    for nft_id in output_ids:
        if nft_id in input_ids:
            continue
        if x.is_empty():
            rejections.append(
                Rejection.rule(
                    "unauthorized_mint",
                    f"NFT mint without authorization: {nft_id.hex()}",
                    {"tag": tag, "nft_id": nft_id.hex()},
                )
            )

    return CheckReport(
        spell_type="nft",
        rejections=tuple(rejections),
        nft_ids=tuple(i.hex() for i in output_ids),
        duplicate_nfts=tuple(duplicates),
        tag=tag,
    )


__all__ = ["check_nft", "collect_ids"]
