from app.dependencies import ledger, engine, vote_store, status_channel
from app.fhevote.orchestrator import IdentitySession, VoteOrchestrator
from app.logger import fhevote_logger
import asyncio
import sys

def make_orchestrator(address: str) -> VoteOrchestrator:
    return VoteOrchestrator(
        ledger=ledger,
        engine=engine,
        session=IdentitySession(address),
        store=vote_store,
        status=status_channel,
        event_logger=fhevote_logger,
    )

async def run_command():
    method = sys.argv[1] if len(sys.argv) > 1 else None
    methods = {
        "list_votes": list_votes,
        "create_vote": create_vote,
        "decrypt_vote": decrypt_vote,
        "check": check,
    }
    if method not in methods:
        print(f"Unknown method: {method}. Available methods: {', '.join(methods.keys())}")
        return

    await methods[method](*sys.argv[2:])

async def list_votes(address: str):
    orchestrator = make_orchestrator(address)
    for vote in await orchestrator.list_votes():
        state = f"verified = {vote.decrypted_value}" if vote.is_verified else "encrypted"
        print(f"{vote.id}  {vote.title}  ({state})")
    stats = orchestrator.stats
    print(f"total: {stats.total}  verified: {stats.verified}  active: {stats.active}")

async def create_vote(address: str, title: str, description: str, count: str):
    orchestrator = make_orchestrator(address)
    vote_id = await orchestrator.create_vote(title, description, count)
    print(vote_id if vote_id else orchestrator.last_status.message)

async def decrypt_vote(address: str, vote_id: str):
    orchestrator = make_orchestrator(address)
    value = await orchestrator.decrypt_vote(vote_id)
    print(f"{vote_id} = {value}" if value is not None else orchestrator.last_status.message)

async def check(address: str = ""):
    orchestrator = make_orchestrator(address)
    available = await orchestrator.check_availability()
    print("Service is available" if available else orchestrator.last_status.message or "Service is unavailable")

if __name__ == "__main__":
    asyncio.run(run_command())
