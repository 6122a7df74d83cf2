"""
Enums for the FHE vote model.

19-10-2026
"""

import enum


class TransactionStatusEnum(str, enum.Enum):
    pending = "pending"
    success = "success"
    error = "error"


class FailureKindEnum(str, enum.Enum):
    auth_required = "auth_required"
    invalid_input = "invalid_input"
    signing_rejected = "signing_rejected"
    encryption_failed = "encryption_failed"
    ledger_unavailable = "ledger_unavailable"
    already_verified = "already_verified"
    decryption_failed = "decryption_failed"


class VoteEventEnum(str, enum.Enum):
    """Base of the events written to the vote log"""


class VoteLifecycleEventEnum(VoteEventEnum):
    VOTE_CREATED = "vote_created"
    VOTE_CREATION_FAILED = "vote_creation_failed"
    VOTE_DECRYPTED = "vote_decrypted"
    VOTE_ALREADY_VERIFIED = "vote_already_verified"
    VOTE_DECRYPTION_FAILED = "vote_decryption_failed"
    VOTES_LOAD_FAILED = "votes_load_failed"
