# tests/test_nft_uniqueness.py
from __future__ import annotations

from charms.data.types import ZERO_HASH, App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.values import EMPTY, BytesValue, StringValue, U64Value
from charms.runtime.checks.nft import check_nft

TAG = "nft:ART"
SIG = BytesValue(b"\x01\x02")


def _tx(ins, outs) -> Transaction:
    return Transaction(
        txid=ZERO_HASH,
        inputs=tuple(
            TxInput(UtxoRef(ZERO_HASH, i), CharmState.of({TAG: BytesValue(v)})) for i, v in enumerate(ins)
        ),
        outputs=tuple(
            TxOutput(index=i, value=546, charm_state=CharmState.of({TAG: BytesValue(v)})) for i, v in enumerate(outs)
        ),
    )


def test_duplicate_output_id_is_rejected_and_named() -> None:
    rep = check_nft(App(TAG), _tx([b"a"], [b"a", b"a"]), SIG)
    assert not rep.valid
    assert rep.duplicate_nfts == (b"a".hex(),)
    assert rep.nft_ids == (b"a".hex(), b"a".hex())
    assert rep.codes == ("duplicate_nft",)
    assert rep.errors == (f"Duplicate NFT in outputs: {b'a'.hex()}",)


def test_every_repeated_occurrence_is_reported() -> None:
    rep = check_nft(App(TAG), _tx([b"a", b"b"], [b"a", b"b", b"a", b"b", b"a"]), SIG)
    assert rep.duplicate_nfts == (b"a".hex(), b"b".hex(), b"a".hex())
    assert rep.codes.count("duplicate_nft") == 3


def test_transfer_of_existing_id_needs_no_authorization() -> None:
    rep = check_nft(App(TAG), _tx([b"a"], [b"a"]), EMPTY)
    assert rep.valid
    assert rep.duplicate_nfts == ()


def test_new_id_without_authorization_is_rejected() -> None:
    rep = check_nft(App(TAG), _tx([], [b"new"]), EMPTY)
    assert not rep.valid
    assert rep.codes == ("unauthorized_mint",)
    assert rep.errors == (f"NFT mint without authorization: {b'new'.hex()}",)


def test_new_id_with_any_non_empty_authorization_is_accepted() -> None:
    assert check_nft(App(TAG), _tx([], [b"new"]), SIG).valid
    assert check_nft(App(TAG), _tx([], [b"new"]), StringValue("creator")).valid
    assert check_nft(App(TAG), _tx([], [b"new"]), U64Value(0)).valid


def test_non_bytes_entries_are_not_ids() -> None:
    tx = Transaction(
        outputs=(
            TxOutput(index=0, charm_state=CharmState.of({TAG: U64Value(1)})),
            TxOutput(index=1, charm_state=CharmState.of({TAG: U64Value(1)})),
        )
    )
    rep = check_nft(App(TAG), tx, EMPTY)
    assert rep.valid
    assert rep.nft_ids == ()


def test_duplicate_mint_reports_both_problems() -> None:
    rep = check_nft(App(TAG), _tx([], [b"z", b"z"]), EMPTY)
    assert not rep.valid
    assert rep.codes.count("duplicate_nft") == 1
    assert rep.codes.count("unauthorized_mint") == 2
