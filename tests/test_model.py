import pytest
from pydantic import ValidationError

from app.fhevote import utils
from app.fhevote.engine.base import decode_clear_values, encode_clear_values
from app.fhevote.exceptions import (
    AlreadyVerified,
    EncryptionFailed,
    LedgerRevert,
    LedgerUnavailable,
    SigningRejected,
    classify_failure,
)
from app.fhevote.model.enums import FailureKindEnum
from app.fhevote.model.schemas import LoginIn, RawRecordData, VoteRecord
from app.fhevote.store import VoteStore


def raw(**fields):
    base = {"name": "T", "description": "D", "timestamp": 100, "creator": "0xabc"}
    base.update(fields)
    return RawRecordData(**base)


def test_record_carries_value_only_when_verified():
    verified = VoteRecord.from_raw("vote-1", raw(is_verified=True, decrypted_value=0))
    pending = VoteRecord.from_raw("vote-2", raw(is_verified=False, decrypted_value=7))

    assert verified.decrypted_value == 0
    assert pending.decrypted_value is None


def test_record_rejects_inconsistent_state():
    with pytest.raises(ValidationError):
        VoteRecord(id="vote-1", title="T", creator="0xabc", timestamp=1, is_verified=True)
    with pytest.raises(ValidationError):
        VoteRecord(id="vote-1", title="T", creator="0xabc", timestamp=1, decrypted_value=3)


def test_record_is_immutable():
    record = VoteRecord.from_raw("vote-1", raw())
    with pytest.raises(ValidationError):
        record.title = "changed"


def test_record_keeps_handle_separate_from_id():
    record = VoteRecord.from_raw("vote-1", raw(encrypted_handle="0xfeed"))
    assert record.id == "vote-1"
    assert record.encrypted_votes_handle == "0xfeed"


@pytest.mark.parametrize("value, expected", [
    ("5", 5),
    ("  42 ", 42),
    ("7abc", 7),
    ("abc", 0),
    ("", 0),
    ("-4", 0),
    ("3.9", 3),
    (11, 11),
    (-2, 0),
])
def test_coerce_count(value, expected):
    assert utils.coerce_count(value) == expected


def test_make_vote_id():
    assert utils.make_vote_id(1700000000123) == "vote-1700000000123"
    assert utils.make_vote_id().startswith("vote-")


@pytest.mark.parametrize("exc, kind", [
    (SigningRejected("nope"), FailureKindEnum.signing_rejected),
    (Exception("MetaMask: User rejected the request."), FailureKindEnum.signing_rejected),
    (AlreadyVerified("vote-1"), FailureKindEnum.already_verified),
    (LedgerRevert("Data already verified"), FailureKindEnum.already_verified),
    (LedgerUnavailable("timeout"), FailureKindEnum.ledger_unavailable),
    (EncryptionFailed("bad key"), FailureKindEnum.encryption_failed),
    (RuntimeError("anything else"), FailureKindEnum.decryption_failed),
])
def test_classify_failure(exc, kind):
    assert classify_failure(exc) == kind


def test_clear_values_encoding():
    assert decode_clear_values(encode_clear_values([5, 0])) == [5, 0]
    with pytest.raises(ValueError):
        decode_clear_values("not json")
    with pytest.raises(ValueError):
        decode_clear_values('["5"]')


def test_login_address_is_validated():
    assert LoginIn(address="0x" + "AB" * 20).address == "0x" + "ab" * 20
    with pytest.raises(ValidationError):
        LoginIn(address="alice")


def test_store_keeps_one_record_per_id():
    store = VoteStore(clock=lambda: 100)
    first = VoteRecord.from_raw("vote-1", raw(name="old"))
    second = VoteRecord.from_raw("vote-2", raw())
    newer = VoteRecord.from_raw("vote-1", raw(name="new", is_verified=True, decrypted_value=1))

    store.replace([first, second, newer])

    assert [r.id for r in store.records] == ["vote-1", "vote-2"]
    assert store.get("vote-1").title == "new"
    assert store.stats.total == 2
    assert store.stats.verified == 1
