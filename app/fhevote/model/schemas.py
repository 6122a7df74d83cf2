"""
Pydantic schemas for FHE votes.

19-10-2026


Records come in two shapes:

    - RawRecordData: exactly what the ledger answers for a vote id,
      placeholders included (an unverified vote still reports a
      decrypted value of 0 on most ledgers).

    - VoteRecord: the canonical local view built from a RawRecordData.
      It enforces that a decrypted value exists if and only if the
      vote has been verified on the ledger.

The *In schemas are the bodies accepted by the HTTP routes and the
*Out schemas what they answer.
"""

import re
from typing import NewType, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.fhevote.model.enums import TransactionStatusEnum

# Opaque reference to an encrypted value, distinct from a vote id
EncryptedHandle = NewType("EncryptedHandle", str)

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class FHEVoteSchema(BaseModel):
    """
    Base class for an FHE vote schema.
    """

    model_config = ConfigDict(from_attributes=True)


# ------------------ ledger-related schemas ------------------


class RawRecordData(FHEVoteSchema):
    """
    Vote data as persisted on the ledger.
    """

    name: str
    description: str = ""
    public_value1: int = 0
    public_value2: int = 0
    timestamp: int
    creator: str
    is_verified: bool = False
    decrypted_value: int = 0
    encrypted_handle: Optional[str] = None


class VoteRecord(FHEVoteSchema):
    """
    Canonical local representation of one vote.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    title: str
    description: str = ""
    creator: str
    timestamp: int
    public_value1: int = 0
    public_value2: int = 0
    is_verified: bool = False
    decrypted_value: Optional[int] = None
    encrypted_votes_handle: Optional[str] = None

    @model_validator(mode="after")
    def check_decrypted_value(self):
        if self.is_verified and self.decrypted_value is None:
            raise ValueError("a verified vote must carry its decrypted value")
        if not self.is_verified and self.decrypted_value is not None:
            raise ValueError("an unverified vote cannot carry a decrypted value")
        return self

    @classmethod
    def from_raw(cls, vote_id: str, raw: RawRecordData) -> "VoteRecord":
        return cls(
            id=vote_id,
            title=raw.name,
            description=raw.description,
            creator=raw.creator,
            timestamp=raw.timestamp,
            public_value1=raw.public_value1 or 0,
            public_value2=raw.public_value2 or 0,
            is_verified=raw.is_verified,
            decrypted_value=raw.decrypted_value if raw.is_verified else None,
            encrypted_votes_handle=raw.encrypted_handle,
        )


class VoteStats(FHEVoteSchema):
    total: int = 0
    verified: int = 0
    active: int = 0


class TransactionStatus(FHEVoteSchema):
    """
    Value of the status channel.
    """

    visible: bool = False
    status: TransactionStatusEnum = TransactionStatusEnum.pending
    message: str = ""


# ------------------ engine-related schemas ------------------


class EncryptedInput(FHEVoteSchema):
    """
    Ciphertext plus the validity proof the ledger checks on write.
    """

    ciphertext: str
    proof: str


class DecryptionResult(FHEVoteSchema):
    """
    Clear values keyed by the handle they were decrypted from.
    """

    clear_values: dict[str, int] = Field(default_factory=dict)
    clear_values_encoded: str = ""
    decryption_proof: str = ""


# ------------------ api-related schemas ------------------


class VoteIn(FHEVoteSchema):
    title: str = ""
    description: str = ""
    vote_count: str | int = ""


class LoginIn(FHEVoteSchema):
    address: str

    @field_validator("address")
    @classmethod
    def check_address(cls, value: str) -> str:
        if not ADDRESS_PATTERN.match(value):
            raise ValueError("address must be 0x followed by 40 hex digits")
        return value.lower()


class TokenOut(FHEVoteSchema):
    token: str


class VoteCreatedOut(FHEVoteSchema):
    id: str


class VoteDecryptedOut(FHEVoteSchema):
    vote_id: str
    value: int


class AvailabilityOut(FHEVoteSchema):
    available: bool


class TransactionReceipt(FHEVoteSchema):
    """
    What the ledger answers once a transaction is final.
    """

    tx_hash: str
    vote_id: str
    confirmed_at: int
