import asyncio
import re

from app.fhevote.model.enums import TransactionStatusEnum
from app.fhevote.orchestrator import IdentitySession


def test_create_vote_encrypts_before_single_write(orchestrator, ledger, fhe_engine):
    vote_id = asyncio.run(orchestrator.create_vote("Budget", "2027 budget", "5"))

    assert re.fullmatch(r"vote-\d+", vote_id)
    assert len(ledger.writes) == 1
    assert ledger.writes[0][:2] == ("create_record", vote_id)

    methods = [c[0] for c in ledger.calls]
    assert methods.index("encrypt") < methods.index("create_record")
    assert fhe_engine.encrypted_values == [5]


def test_create_vote_sends_ciphertext_and_placeholders(orchestrator, ledger):
    asyncio.run(orchestrator.create_vote("Budget", "2027 budget", "7"))

    _, _, ciphertext, proof, pub1, pub2 = ledger.writes[0]
    assert ciphertext == "enc(7)"
    assert proof == "proof-7"
    assert (pub1, pub2) == (0, 0)


def test_create_vote_refreshes_from_ledger(orchestrator, ledger):
    vote_id = asyncio.run(orchestrator.create_vote("T", "D", "5"))

    record = orchestrator.store.get(vote_id)
    assert record.title == "T"
    assert record.description == "D"
    assert record.is_verified is False
    assert record.decrypted_value is None
    assert orchestrator.stats.total == 1
    assert orchestrator.status_value.status == TransactionStatusEnum.success
    assert orchestrator.status_value.message == "Vote created!"


def test_encryption_failure_writes_nothing(orchestrator, ledger, fhe_engine):
    fhe_engine.fail_encrypt = True

    assert asyncio.run(orchestrator.create_vote("T", "D", "5")) is None
    assert ledger.writes == []
    assert ledger.count("create_record") == 0
    assert orchestrator.records == ()
    assert orchestrator.status_value.status == TransactionStatusEnum.error
    assert orchestrator.status_value.message.startswith("Creation failed: ")


def test_engine_initialization_failure_writes_nothing(orchestrator, ledger, fhe_engine):
    async def broken_initialize():
        raise RuntimeError("wasm module missing")

    fhe_engine.initialize = broken_initialize

    assert asyncio.run(orchestrator.create_vote("T", "D", "5")) is None
    assert ledger.writes == []
    assert "wasm module missing" in orchestrator.status_value.message


def test_empty_title_never_reaches_engine(orchestrator, ledger, fhe_engine):
    assert asyncio.run(orchestrator.create_vote("", "D", "5")) is None
    assert asyncio.run(orchestrator.create_vote("   ", "D", "5")) is None

    assert fhe_engine.encrypted_values == []
    assert ledger.calls == []
    assert orchestrator.status_value.status == TransactionStatusEnum.error


def test_missing_description_or_count_is_rejected(orchestrator, ledger):
    assert asyncio.run(orchestrator.create_vote("T", "", "5")) is None
    assert asyncio.run(orchestrator.create_vote("T", "D", "")) is None
    assert asyncio.run(orchestrator.create_vote("T", "D", None)) is None
    assert ledger.calls == []


def test_signing_rejection_is_reported_distinctly(orchestrator, ledger):
    ledger.reject_signing = True

    assert asyncio.run(orchestrator.create_vote("T", "D", "5")) is None
    assert orchestrator.status_value.message == "Transaction rejected"
    assert orchestrator.records == ()


def test_confirmation_failure_leaves_no_record(orchestrator, ledger):
    ledger.fail_confirmation = True

    assert asyncio.run(orchestrator.create_vote("T", "D", "5")) is None
    assert ledger.records == {}
    assert orchestrator.records == ()
    assert orchestrator.status_value.message == "Creation failed: transaction dropped"


def test_create_vote_requires_identity(orchestrator, ledger):
    orchestrator.session = IdentitySession(None)

    assert asyncio.run(orchestrator.create_vote("T", "D", "5")) is None
    assert ledger.calls == []
    assert orchestrator.status_value.message == "Connect wallet first"


def test_vote_count_is_coerced(orchestrator, fhe_engine):
    for count in ("abc", "-3", "12 votes", 4):
        asyncio.run(orchestrator.create_vote("T", "D", count))

    assert fhe_engine.encrypted_values == [0, 0, 12, 4]


def test_creating_flag_is_raised_while_in_flight(orchestrator):
    seen = []
    orchestrator.store.subscribe(lambda store: seen.append(store.is_busy("creating")))

    asyncio.run(orchestrator.create_vote("T", "D", "1"))

    assert True in seen
    assert orchestrator.store.is_busy("creating") is False
