from fastapi import Depends, HTTPException, APIRouter

from app.dependencies import get_orchestrator
from app.fhevote.model import schemas
from app.fhevote.orchestrator import VoteOrchestrator
from app.logger import logger

api_router = APIRouter(prefix="/fhevote/api")


def _raise_for_status(orchestrator: VoteOrchestrator):
    """
    Turns the status left by a failed operation into an HTTP error.
    """
    status_code = 401 if not orchestrator.is_connected else 400
    raise HTTPException(status_code=status_code, detail=orchestrator.last_status.message)


# ----- Vote Routes -----


@api_router.get("/votes", response_model=list[schemas.VoteRecord], status_code=200)
async def get_votes(
    search: str = "",
    verified_only: bool = False,
    orchestrator: VoteOrchestrator = Depends(get_orchestrator),
):
    """
    Route for listing the votes stored on the ledger
    """
    if not orchestrator.is_connected:
        raise HTTPException(status_code=401, detail="Connect wallet first")
    await orchestrator.list_votes()
    return orchestrator.filter_votes(search_term=search, verified_only=verified_only)


@api_router.get("/stats", response_model=schemas.VoteStats, status_code=200)
async def get_stats(orchestrator: VoteOrchestrator = Depends(get_orchestrator)):
    """
    Route for the aggregate statistics of the last loaded vote set
    """
    return orchestrator.stats


@api_router.get("/status", response_model=schemas.TransactionStatus, status_code=200)
async def get_status(orchestrator: VoteOrchestrator = Depends(get_orchestrator)):
    """
    Route for the status of the last mutating operation
    """
    return orchestrator.status_value


@api_router.post("/create-vote", response_model=schemas.VoteCreatedOut, status_code=201)
async def create_vote(
    vote_in: schemas.VoteIn,
    orchestrator: VoteOrchestrator = Depends(get_orchestrator),
):
    """
    Route for creating a vote with an encrypted count
    """
    vote_id = await orchestrator.create_vote(vote_in.title, vote_in.description, vote_in.vote_count)
    if vote_id is None:
        _raise_for_status(orchestrator)
    logger.info("Vote %s created through the API" % vote_id)
    return {"id": vote_id}


@api_router.post("/decrypt-vote/{vote_id}", response_model=schemas.VoteDecryptedOut, status_code=200)
async def decrypt_vote(vote_id: str, orchestrator: VoteOrchestrator = Depends(get_orchestrator)):
    """
    Route for revealing a vote's count and verifying it on the ledger
    """
    value = await orchestrator.decrypt_vote(vote_id)
    if value is None:
        _raise_for_status(orchestrator)
    return {"vote_id": vote_id, "value": value}


@api_router.get("/availability", response_model=schemas.AvailabilityOut, status_code=200)
async def get_availability(orchestrator: VoteOrchestrator = Depends(get_orchestrator)):
    """
    Route for checking whether the ledger accepts requests
    """
    return {"available": await orchestrator.check_availability()}
