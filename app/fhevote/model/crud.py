"""
CRUD utils for the FHE vote ledger
(Create - Read - Update - delete)

19/10/2026
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import db_handler
from app.fhevote.model import models

# ----- LedgerVote CRUD Utils -----


async def get_vote_ids(session: AsyncSession):
    query = select(models.LedgerVote.vote_id).order_by(models.LedgerVote.id)
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_vote_by_vote_id(session: AsyncSession, vote_id: str):
    query = select(models.LedgerVote).where(models.LedgerVote.vote_id == vote_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def get_vote_by_handle(session: AsyncSession, handle: str):
    query = select(models.LedgerVote).where(models.LedgerVote.handle == handle)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def create_vote(session: AsyncSession, fields: dict):
    db_vote = models.LedgerVote(**fields)
    db_handler.add(session, db_vote)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_vote)
    return db_vote


async def verify_vote(session: AsyncSession, vote_id: str, decrypted_value: int, decryption_proof: str):
    """
    Flips a vote to verified. The update only matches an unverified row,
    so the returned rowcount is 0 when someone else got there first.
    """
    query = update(models.LedgerVote).where(
        models.LedgerVote.vote_id == vote_id,
        models.LedgerVote.is_verified.is_(False),
    ).values(
        is_verified=True,
        decrypted_value=decrypted_value,
        decryption_proof=decryption_proof,
    )
    result = await db_handler.execute(session, query)
    await db_handler.commit(session)
    return result.rowcount


# --- VoteLog CRUD Utils ---


async def log_to_db(session: AsyncSession, vote_id: str | None, log_level: str, event: str, event_params: str):
    db_log = models.VoteLog(
        vote_id=vote_id,
        log_level=log_level,
        event=event,
        event_params=event_params,
    )
    db_handler.add(session, db_log)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_log)
    return db_log


async def get_logs_by_vote_id(session: AsyncSession, vote_id: str):
    query = select(models.VoteLog).where(
        models.VoteLog.vote_id == vote_id,
    ).order_by(models.VoteLog.id)
    result = await db_handler.execute(session, query)
    return result.scalars().all()
