"""
Vote lifecycle orchestrator.

Coordinates the confidentiality engine and the ledger into one state
machine for creating votes with encrypted counts and resolving them
through proof-carrying decryption.

    - The ledger is the only source of truth. The local record set is
      rebuilt from it by list_votes() after every mutation; nothing is
      synthesized or patched locally.

    - No count reaches the ledger unencrypted: create_vote() does not
      write unless encryption succeeded.

    - decrypt_vote() is idempotent. An already verified vote is answered
      from the ledger without touching the engine, and a verification
      that loses a race against another party counts as settled.

Every failure is caught at the operation boundary, classified, logged
and posted to the status channel; operations then return None (or
False) and stay retryable.

19-10-2026
"""

from app.fhevote import utils
from app.fhevote.engine.base import ConfidentialityEngine, DecryptionSubmission
from app.fhevote.exceptions import (
    AuthRequired,
    DecryptionFailed,
    EncryptionFailed,
    InvalidVoteInput,
    classify_failure,
)
from app.fhevote.ledger.gateway import LedgerGateway, LedgerSigner
from app.fhevote.model.enums import FailureKindEnum, VoteLifecycleEventEnum
from app.fhevote.model.schemas import VoteRecord, VoteStats, TransactionStatus
from app.fhevote.status import StatusChannel
from app.fhevote.store import VoteStore
from app.logger import logger

CONNECT_WALLET_MESSAGE = "Connect wallet first"


class IdentitySession(object):
    """
    The connected identity: an address and its transaction signing
    capability. Without an explicit signer the ledger's own signing
    handle for the address is used.
    """

    def __init__(self, address: str | None, signer: LedgerSigner | None = None) -> None:
        self.address = address
        self.signer = signer

    @property
    def connected(self) -> bool:
        return bool(self.address)

    def signer_for(self, ledger: LedgerGateway) -> LedgerSigner:
        if not self.connected:
            raise AuthRequired(CONNECT_WALLET_MESSAGE)
        return self.signer or ledger.signer(self.address)


class VoteOrchestrator(object):

    def __init__(
        self,
        ledger: LedgerGateway,
        engine: ConfidentialityEngine,
        session: IdentitySession | None = None,
        store: VoteStore | None = None,
        status: StatusChannel | None = None,
        event_logger=None,
    ) -> None:
        self.ledger = ledger
        self.engine = engine
        self.session = session
        self.store = store if store is not None else VoteStore()
        self.status = status if status is not None else StatusChannel()
        self.event_logger = event_logger
        self._context_address = None
        # what this orchestrator itself last posted; the channel may be shared
        self.last_status = TransactionStatus()

    # -- read access for the presentation layer --

    @property
    def records(self) -> tuple[VoteRecord, ...]:
        return self.store.records

    @property
    def stats(self) -> VoteStats:
        return self.store.stats

    @property
    def status_value(self) -> TransactionStatus:
        return self.status.value

    def filter_votes(self, search_term: str = "", verified_only: bool = False) -> list[VoteRecord]:
        return self.store.filter(search_term=search_term, verified_only=verified_only)

    # -- helpers --

    @property
    def is_connected(self) -> bool:
        return self.session is not None and self.session.connected

    async def context_address(self) -> str:
        if self._context_address is None:
            self._context_address = await self.ledger.get_address()
        return self._context_address

    async def _ensure_engine(self, error_class):
        if self.engine.is_initialized:
            return
        try:
            await self.engine.initialize()
        except Exception as e:
            raise error_class("engine initialization failed: %s" % e) from e

    async def _record_event(self, level: str, vote_id, event: VoteLifecycleEventEnum, **kwargs):
        if self.event_logger is None:
            return
        try:
            await getattr(self.event_logger, level)(vote_id, event, **kwargs)
        except Exception as e:
            # the event log is best effort
            logger.warning("Could not record %s for %s: %s" % (event.value, vote_id, e))

    def _pending(self, message: str):
        self.last_status = self.status.pending(message)

    def _success(self, message: str):
        self.last_status = self.status.success(message)

    def _error(self, message: str):
        self.last_status = self.status.error(message)

    def _require_connection(self) -> bool:
        if self.is_connected:
            return True
        logger.warning("Operation refused: %s" % AuthRequired(CONNECT_WALLET_MESSAGE))
        self._error(CONNECT_WALLET_MESSAGE)
        return False

    # -- operations --

    async def list_votes(self) -> tuple[VoteRecord, ...]:
        """
        Rebuilds the local record set from the ledger.

        A record that fails to load is logged and left out; a failure to
        list the ids keeps the previous set untouched.
        """
        if not self.is_connected:
            return self.store.records

        with self.store.busy("refreshing"):
            try:
                vote_ids = await self.ledger.get_all_ids()
            except Exception as e:
                logger.error("Load failed: %s" % e)
                self._error("Load failed")
                await self._record_event("error", None, VoteLifecycleEventEnum.VOTES_LOAD_FAILED, reason=str(e))
                return self.store.records

            records = []
            for vote_id in vote_ids:
                try:
                    raw = await self.ledger.get_record(vote_id)
                    records.append(VoteRecord.from_raw(vote_id, raw))
                except Exception as e:
                    logger.error("Error loading vote %s: %s" % (vote_id, e))

            self.store.replace(records)
            return self.store.records

    @staticmethod
    def validate_vote_input(title, description, count):
        for field_name, value in (("title", title), ("description", description), ("vote count", count)):
            if utils.is_blank(value):
                raise InvalidVoteInput(field_name)

    async def create_vote(self, title: str, description: str, count) -> str | None:
        """
        Encrypts the count, writes the vote to the ledger, waits for the
        write to be final and refreshes. Returns the new vote id.
        """
        if not self._require_connection():
            return None

        try:
            self.validate_vote_input(title, description, count)
        except InvalidVoteInput as e:
            logger.warning("Vote rejected before submission: %s" % e)
            self._error("Invalid vote: %s" % e)
            return None

        value = utils.coerce_count(count)
        vote_id = utils.make_vote_id()

        with self.store.busy("creating"):
            self._pending("Creating vote with FHE...")
            try:
                signer = self.session.signer_for(self.ledger)
                context = await self.context_address()

                await self._ensure_engine(EncryptionFailed)
                try:
                    encrypted = await self.engine.encrypt(context, self.session.address, value)
                except EncryptionFailed:
                    raise
                except Exception as e:
                    raise EncryptionFailed(str(e) or "encryption failed") from e

                tx = await signer.create_record(
                    vote_id, title, encrypted.ciphertext, encrypted.proof, 0, 0, description
                )
                self._pending("Waiting for confirmation...")
                await tx.wait()

            except Exception as e:
                kind = classify_failure(e, default=FailureKindEnum.ledger_unavailable)
                if kind == FailureKindEnum.signing_rejected:
                    message = "Transaction rejected"
                else:
                    message = "Creation failed: " + (str(e) or "Unknown error")
                logger.error("Creation of %s failed (%s): %s" % (vote_id, kind.value, e))
                self._error(message)
                await self._record_event(
                    "error", vote_id, VoteLifecycleEventEnum.VOTE_CREATION_FAILED, kind=kind.value, reason=str(e)
                )
                return None

            logger.log("FHEVOTE", "Vote created: %s by %s (%s)" % (vote_id, self.session.address, tx.tx_hash))
            self._success("Vote created!")
            await self._record_event(
                "info", vote_id, VoteLifecycleEventEnum.VOTE_CREATED, creator=self.session.address, tx_hash=tx.tx_hash
            )

        await self.list_votes()
        return vote_id

    async def decrypt_vote(self, vote_id: str) -> int | None:
        """
        Reveals a vote's count through the engine and has the ledger
        verify it. Safe to call on an already verified vote.
        """
        if not self._require_connection():
            return None

        with self.store.busy("decrypting"):
            try:
                raw = await self.ledger.get_record(vote_id)
                if raw.is_verified:
                    self._success("Already verified")
                    await self._record_event("info", vote_id, VoteLifecycleEventEnum.VOTE_ALREADY_VERIFIED)
                    return raw.decrypted_value

                signer = self.session.signer_for(self.ledger)
                handle = await self.ledger.get_encrypted_value_handle(vote_id)
                context = await self.context_address()
                await self._ensure_engine(DecryptionFailed)

                async def submit(clear_values_encoded: str, decryption_proof: str):
                    tx = await signer.submit_decryption_proof(vote_id, clear_values_encoded, decryption_proof)
                    return await tx.wait()

                submission = DecryptionSubmission(submit)
                result = await self.engine.verify_decryption([handle], context, submission)
                if not submission.accepted:
                    raise DecryptionFailed("engine did not submit the decryption proof")
                if handle not in result.clear_values:
                    raise DecryptionFailed("no clear value returned for handle %s" % handle)
                clear_value = int(result.clear_values[handle])

            except Exception as e:
                kind = classify_failure(e)
                if kind == FailureKindEnum.already_verified:
                    return await self._settle_already_verified(vote_id)
                logger.error("Decryption of %s failed (%s): %s" % (vote_id, kind.value, e))
                self._error("Decryption failed")
                await self._record_event(
                    "error", vote_id, VoteLifecycleEventEnum.VOTE_DECRYPTION_FAILED, kind=kind.value, reason=str(e)
                )
                return None

            self._pending("Verifying...")

        await self.list_votes()
        logger.log("FHEVOTE", "Vote decrypted: %s = %s" % (vote_id, clear_value))
        self._success("Decrypted successfully!")
        await self._record_event("info", vote_id, VoteLifecycleEventEnum.VOTE_DECRYPTED, value=clear_value)
        return clear_value

    async def _settle_already_verified(self, vote_id: str) -> int | None:
        """
        Someone else verified the vote while we were decrypting it: take
        the ledger's value instead of reporting an error.
        """
        logger.info("Vote %s was verified concurrently" % vote_id)
        try:
            raw = await self.ledger.get_record(vote_id)
        except Exception as e:
            raw = None
            logger.error("Could not read settled vote %s: %s" % (vote_id, e))

        if raw is None or not raw.is_verified:
            self._error("Decryption failed")
            await self._record_event(
                "error", vote_id, VoteLifecycleEventEnum.VOTE_DECRYPTION_FAILED,
                kind=FailureKindEnum.already_verified.value, reason="settled value unreadable",
            )
            return None

        await self.list_votes()
        self._success("Already verified")
        await self._record_event("info", vote_id, VoteLifecycleEventEnum.VOTE_ALREADY_VERIFIED, concurrent=True)
        return raw.decrypted_value

    async def check_availability(self) -> bool:
        try:
            available = await self.ledger.check_availability()
        except Exception as e:
            logger.error("Availability check failed: %s" % e)
            self._error("Check failed")
            return False

        if available:
            self._success("Service is available")
        return bool(available)
