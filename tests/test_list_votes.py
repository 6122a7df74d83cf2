import asyncio

from fakes import NOW

from app.fhevote.model.enums import TransactionStatusEnum
from app.fhevote.orchestrator import IdentitySession


def test_per_record_failures_are_skipped(orchestrator, ledger):
    for i in range(10):
        ledger.add(f"vote-{i}", name=f"Vote {i}", is_verified=i < 3, decrypted_value=i if i < 3 else 0)
    ledger.failing_ids.update({"vote-4", "vote-7"})

    records = asyncio.run(orchestrator.list_votes())

    assert [r.id for r in records] == [f"vote-{i}" for i in range(10) if i not in (4, 7)]
    assert orchestrator.stats.total == 8
    assert orchestrator.stats.verified == 3


def test_stats_match_returned_records(orchestrator, ledger):
    for i in range(10):
        ledger.add(f"vote-{i}", is_verified=i % 3 == 0, decrypted_value=1 if i % 3 == 0 else 0)

    records = asyncio.run(orchestrator.list_votes())

    assert orchestrator.stats.total == len(records) == 10
    assert orchestrator.stats.verified == len([r for r in records if r.is_verified]) == 4


def test_active_counts_votes_from_last_day(orchestrator, ledger):
    ledger.add("vote-new", timestamp=NOW)
    ledger.add("vote-old", timestamp=NOW - 2 * 86400)
    ledger.add("vote-edge", timestamp=NOW + 60 - 86400)

    asyncio.run(orchestrator.list_votes())

    assert orchestrator.stats.active == 1


def test_listing_failure_keeps_previous_records(orchestrator, ledger):
    ledger.add("vote-1")
    asyncio.run(orchestrator.list_votes())
    before = orchestrator.records

    ledger.fail_listing = True
    ledger.add("vote-2")
    result = asyncio.run(orchestrator.list_votes())

    assert result == before
    assert orchestrator.records == before
    assert orchestrator.status_value.status == TransactionStatusEnum.error
    assert orchestrator.status_value.message == "Load failed"


def test_listing_replaces_stale_state(orchestrator, ledger):
    ledger.add("vote-1")
    ledger.add("vote-2")
    asyncio.run(orchestrator.list_votes())

    del ledger.records["vote-2"]
    ledger.records["vote-1"].update(is_verified=True, decrypted_value=8)
    asyncio.run(orchestrator.list_votes())

    assert [r.id for r in orchestrator.records] == ["vote-1"]
    assert orchestrator.store.get("vote-1").decrypted_value == 8


def test_unverified_placeholder_value_is_dropped(orchestrator, ledger):
    ledger.add("vote-1", is_verified=False, decrypted_value=0)

    record = asyncio.run(orchestrator.list_votes())[0]

    assert record.is_verified is False
    assert record.decrypted_value is None


def test_listing_without_identity_is_a_no_op(orchestrator, ledger):
    ledger.add("vote-1")
    orchestrator.session = IdentitySession(None)

    assert asyncio.run(orchestrator.list_votes()) == ()
    assert ledger.calls == []


def test_subscribers_see_wholesale_replacement(orchestrator, ledger):
    ledger.add("vote-1")
    ledger.add("vote-2")
    snapshots = []
    orchestrator.store.subscribe(lambda store: snapshots.append(len(store.records)))

    asyncio.run(orchestrator.list_votes())

    assert 2 in snapshots
    assert 1 not in snapshots


def test_filter_votes(orchestrator, ledger):
    ledger.add("vote-1", name="Park renovation", description="Budget line A")
    ledger.add("vote-2", name="School lunch", description="park-side canteen", is_verified=True, decrypted_value=3)
    ledger.add("vote-3", name="Library hours", description="")
    asyncio.run(orchestrator.list_votes())

    assert [r.id for r in orchestrator.filter_votes("PARK")] == ["vote-1", "vote-2"]
    assert [r.id for r in orchestrator.filter_votes("park", verified_only=True)] == ["vote-2"]
    assert len(orchestrator.filter_votes()) == 3


def test_check_availability(orchestrator, ledger):
    assert asyncio.run(orchestrator.check_availability()) is True
    assert orchestrator.status_value.message == "Service is available"

    orchestrator.status.clear()
    ledger.available = False
    assert asyncio.run(orchestrator.check_availability()) is False
    assert orchestrator.status_value.visible is False

    ledger.available = RuntimeError("rpc down")
    assert asyncio.run(orchestrator.check_availability()) is False
    assert orchestrator.status_value.message == "Check failed"
