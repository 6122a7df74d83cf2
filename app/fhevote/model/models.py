"""
SQLAlchemy Models for the FHE vote ledger.

19-10-2026
"""

from __future__ import annotations

from sqlalchemy import Column
from sqlalchemy.types import BigInteger, Boolean, DateTime, Integer, String, Text

from app.database import Base
from app.fhevote import utils


class LedgerVote(Base):
    """
    A vote as stored by the in-process ledger.

    encrypted_value holds the ciphertext; handle is the opaque reference
    handed out for decryption requests.
    """

    __tablename__ = "fhevote_votes"

    id = Column(Integer, primary_key=True, index=True)
    vote_id = Column(String(100), nullable=False, unique=True, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    creator = Column(String(100), nullable=False)
    timestamp = Column(BigInteger, nullable=False)

    public_value1 = Column(Integer, default=0, nullable=False)
    public_value2 = Column(Integer, default=0, nullable=False)

    encrypted_value = Column(Text, nullable=False)
    input_proof = Column(Text, nullable=False)
    handle = Column(String(200), nullable=False, unique=True)

    is_verified = Column(Boolean, default=False, nullable=False)
    decrypted_value = Column(Integer, default=0, nullable=False)
    decryption_proof = Column(Text, nullable=True)

    def to_raw(self) -> dict:
        return {
            "name": self.name,
            "description": self.description or "",
            "public_value1": self.public_value1 or 0,
            "public_value2": self.public_value2 or 0,
            "timestamp": self.timestamp,
            "creator": self.creator,
            "is_verified": self.is_verified,
            "decrypted_value": self.decrypted_value or 0,
            "encrypted_handle": self.handle,
        }


class VoteLog(Base):
    __tablename__ = "fhevote_logs"

    id = Column(Integer, primary_key=True, index=True)
    vote_id = Column(String(100), nullable=True, index=True)

    log_level = Column(String(200), nullable=False)

    event = Column(String(200), nullable=False)
    event_params = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utils.tz_now, nullable=False)
