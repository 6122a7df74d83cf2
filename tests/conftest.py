import asyncio
import os
import tempfile

# Point the application at a throwaway database before anything imports it
_db_dir = tempfile.mkdtemp(prefix="fhevote-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_db_dir, "fhevote.db")
os.environ.setdefault("SECRET_KEY", "fhevote-test-secret")
os.environ.setdefault("ENCRYPTION_KEY", "YWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWE=")

import pytest

from fakes import FakeEngine, FakeLedger, NOW

from app.database import Base, engine
from app.fhevote.model import models  # noqa: F401
from app.fhevote.orchestrator import IdentitySession, VoteOrchestrator
from app.fhevote.status import StatusChannel
from app.fhevote.store import VoteStore

ADDRESS = "0x" + "ab" * 20


@pytest.fixture
def database():
    async def reset():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(reset())
    yield engine


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def fhe_engine(ledger):
    return FakeEngine(ledger)


@pytest.fixture
def orchestrator(ledger, fhe_engine):
    return VoteOrchestrator(
        ledger=ledger,
        engine=fhe_engine,
        session=IdentitySession(ADDRESS),
        store=VoteStore(clock=lambda: NOW + 60),
        status=StatusChannel(),
    )
