from fastapi import Depends

from app.config import ENCRYPTION_KEY, LEDGER_CONTRACT_ADDRESS
from app.database import SessionLocal
from app.fhevote.engine.fernet_engine import FernetEngine
from app.fhevote.ledger.sql_ledger import SqlLedgerGateway
from app.fhevote.orchestrator import IdentitySession, VoteOrchestrator
from app.fhevote.status import StatusChannel
from app.fhevote.store import VoteStore
from app.fhevote_auth.auth_bearer import AuthWallet, signing_key
from app.logger import fhevote_logger

# Refuse to start without the token signing key
signing_key()

# Process-wide collaborators, shared by every request
ledger = SqlLedgerGateway(session_local=SessionLocal, address=LEDGER_CONTRACT_ADDRESS)
engine = FernetEngine(key=ENCRYPTION_KEY, resolve_ciphertext=ledger.get_ciphertext)
ledger.verifier = engine

vote_store = VoteStore()
status_channel = StatusChannel()


async def get_orchestrator(address: str | None = Depends(AuthWallet(required=False))) -> VoteOrchestrator:
    """
    Orchestrator dependency: one per request, bound to the caller's wallet.
    """
    return VoteOrchestrator(
        ledger=ledger,
        engine=engine,
        session=IdentitySession(address),
        store=vote_store,
        status=status_channel,
        event_logger=fhevote_logger,
    )
