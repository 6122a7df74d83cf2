"""
Custom Exceptions for FHE votes

19-10-2026
"""

from app.fhevote.model.enums import FailureKindEnum


class FHEVoteError(Exception):
    """Base class for FHE vote exceptions"""

    kind = None

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class AuthRequired(FHEVoteError):
    """Raised when an operation needs a connected wallet and there is none"""

    kind = FailureKindEnum.auth_required


class InvalidVoteInput(FHEVoteError):
    """
    Exception raised when a vote is submitted with a missing field

    Attributes:
        field_name -- the first field found blank
    """

    kind = FailureKindEnum.invalid_input

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"{field_name} is required")


class SigningRejected(FHEVoteError):
    """The identity holder declined to sign a transaction"""

    kind = FailureKindEnum.signing_rejected


class EncryptionFailed(FHEVoteError):
    kind = FailureKindEnum.encryption_failed


class LedgerUnavailable(FHEVoteError):
    """Read, write or connect failure against the ledger"""

    kind = FailureKindEnum.ledger_unavailable


class LedgerRevert(LedgerUnavailable):
    """
    The ledger refused a transaction

    Attributes:
        reason -- revert reason reported by the ledger
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"execution reverted: {reason}")


class AlreadyVerified(LedgerRevert):
    """The vote was verified before this transaction landed"""

    kind = FailureKindEnum.already_verified

    def __init__(self, vote_id: str) -> None:
        self.vote_id = vote_id
        super().__init__(f"vote {vote_id} already verified")


class DecryptionFailed(FHEVoteError):
    kind = FailureKindEnum.decryption_failed


class ConfigurationError(FHEVoteError):
    """A required setting is missing or unusable"""


class CallbackAlreadyUsed(FHEVoteError):
    """A single-use submission callback was invoked a second time"""


def classify_failure(exc: BaseException, default: FailureKindEnum = FailureKindEnum.decryption_failed) -> FailureKindEnum:
    """
    Maps an exception raised by a collaborator to a failure kind.

    Remote wallets and ledgers usually only report text, so their
    well-known messages are matched before the exception's own kind.
    """
    message = str(exc).lower()
    if "user rejected" in message or "user denied" in message:
        return FailureKindEnum.signing_rejected
    if "already verified" in message:
        return FailureKindEnum.already_verified

    if isinstance(exc, FHEVoteError) and exc.kind is not None:
        return exc.kind
    return default
