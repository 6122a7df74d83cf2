"""
In-process ledger backed by the SQLAlchemy database.

Used for local deployments and tests. It keeps the ledger's contract:
ciphertexts are stored opaquely, a write is two-phase (submit, then
confirm), and verification is an atomic one-way flip.

19-10-2026
"""

import hashlib

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.config import LEDGER_CONTRACT_ADDRESS
from app.database import SessionLocal
from app.fhevote import utils
from app.fhevote.engine.base import ProofVerifier, decode_clear_values
from app.fhevote.exceptions import AlreadyVerified, LedgerRevert, LedgerUnavailable, SigningRejected
from app.fhevote.ledger.gateway import LedgerGateway, LedgerSigner, PendingTransaction
from app.fhevote.model import crud
from app.fhevote.model.schemas import EncryptedHandle, RawRecordData, TransactionReceipt
from app.logger import logger


def handle_for(ciphertext: str) -> EncryptedHandle:
    return EncryptedHandle("0x" + hashlib.sha256(ciphertext.encode()).hexdigest())


def tx_hash_for(*parts) -> str:
    payload = "|".join(str(p) for p in parts)
    return "0x" + hashlib.sha256(payload.encode()).hexdigest()


class SqlLedgerSigner(LedgerSigner):
    """
    Signing handle of the SQL ledger.

    approve is asked before every submission, the way a wallet prompts
    its holder; a falsy answer rejects the transaction.
    """

    def __init__(self, address: str, ledger: "SqlLedgerGateway", approve=None) -> None:
        super(SqlLedgerSigner, self).__init__(address)
        self.ledger = ledger
        self.approve = approve

    def _ask(self, action: str, vote_id: str):
        if self.approve is not None and not self.approve(action, vote_id):
            raise SigningRejected("user rejected the transaction")

    async def create_record(self, vote_id, title, ciphertext, proof, public_value1, public_value2, description):
        self._ask("create_record", vote_id)

        if not vote_id:
            raise LedgerRevert("empty vote id")
        if await self.ledger._get_vote(vote_id) is not None:
            raise LedgerRevert(f"vote {vote_id} already exists")

        context = await self.ledger.get_address()
        verifier = self.ledger.verifier
        if verifier is not None and not verifier.check_input_proof(context, self.address, ciphertext, proof):
            raise LedgerRevert("invalid input proof")

        fields = {
            "vote_id": vote_id,
            "name": title,
            "description": description,
            "creator": self.address,
            "public_value1": public_value1,
            "public_value2": public_value2,
            "encrypted_value": ciphertext,
            "input_proof": proof,
            "handle": handle_for(ciphertext),
        }
        tx_hash = tx_hash_for("create_record", self.address, vote_id, utils.now_millis())

        async def confirm():
            fields["timestamp"] = utils.now_seconds()
            try:
                async with self.ledger.session_local() as session:
                    await crud.create_vote(session=session, fields=fields)
            except IntegrityError as e:
                raise LedgerRevert(f"vote {vote_id} already exists") from e
            except SQLAlchemyError as e:
                raise LedgerUnavailable(str(e)) from e
            logger.debug("Ledger confirmed %s for %s" % (tx_hash, vote_id))
            return TransactionReceipt(tx_hash=tx_hash, vote_id=vote_id, confirmed_at=fields["timestamp"])

        return PendingTransaction(tx_hash, confirm)

    async def submit_decryption_proof(self, vote_id, clear_values_encoded, proof):
        self._ask("submit_decryption_proof", vote_id)

        vote = await self.ledger._get_vote(vote_id)
        if vote is None:
            raise LedgerRevert(f"vote {vote_id} not found")
        if vote.is_verified:
            raise AlreadyVerified(vote_id)

        try:
            clear_values = decode_clear_values(clear_values_encoded)
        except ValueError as e:
            raise LedgerRevert("malformed clear values") from e
        if len(clear_values) != 1:
            raise LedgerRevert("expected exactly one clear value")

        verifier = self.ledger.verifier
        if verifier is not None and not verifier.check_decryption_proof([vote.handle], clear_values_encoded, proof):
            raise LedgerRevert("invalid decryption proof")

        tx_hash = tx_hash_for("verify_decryption", self.address, vote_id, utils.now_millis())

        async def confirm():
            try:
                async with self.ledger.session_local() as session:
                    updated = await crud.verify_vote(
                        session=session,
                        vote_id=vote_id,
                        decrypted_value=clear_values[0],
                        decryption_proof=proof,
                    )
            except SQLAlchemyError as e:
                raise LedgerUnavailable(str(e)) from e
            if updated == 0:
                raise AlreadyVerified(vote_id)
            logger.debug("Ledger confirmed %s for %s" % (tx_hash, vote_id))
            return TransactionReceipt(tx_hash=tx_hash, vote_id=vote_id, confirmed_at=utils.now_seconds())

        return PendingTransaction(tx_hash, confirm)


class SqlLedgerGateway(LedgerGateway):
    """
    Read-only handle of the SQL ledger.
    """

    def __init__(self, session_local=None, address: str = LEDGER_CONTRACT_ADDRESS, verifier: ProofVerifier | None = None, approve=None) -> None:
        self.session_local = session_local or SessionLocal
        self.address = address
        self.verifier = verifier
        self.approve = approve
        self.available = True

    async def _get_vote(self, vote_id: str):
        try:
            async with self.session_local() as session:
                return await crud.get_vote_by_vote_id(session=session, vote_id=vote_id)
        except SQLAlchemyError as e:
            raise LedgerUnavailable(str(e)) from e

    async def get_address(self) -> str:
        return self.address

    async def get_all_ids(self) -> list[str]:
        try:
            async with self.session_local() as session:
                return list(await crud.get_vote_ids(session=session))
        except SQLAlchemyError as e:
            raise LedgerUnavailable(str(e)) from e

    async def get_record(self, vote_id: str) -> RawRecordData:
        vote = await self._get_vote(vote_id)
        if vote is None:
            raise LedgerRevert(f"vote {vote_id} not found")
        return RawRecordData(**vote.to_raw())

    async def get_encrypted_value_handle(self, vote_id: str) -> EncryptedHandle:
        vote = await self._get_vote(vote_id)
        if vote is None:
            raise LedgerRevert(f"vote {vote_id} not found")
        return EncryptedHandle(vote.handle)

    async def get_ciphertext(self, handle: str) -> str:
        """
        Resolves a handle to the stored ciphertext, the lookup a
        decryption service performs before decrypting.
        """
        try:
            async with self.session_local() as session:
                vote = await crud.get_vote_by_handle(session=session, handle=handle)
        except SQLAlchemyError as e:
            raise LedgerUnavailable(str(e)) from e
        if vote is None:
            raise LedgerRevert(f"unknown handle {handle}")
        return vote.encrypted_value

    async def check_availability(self) -> bool:
        try:
            async with self.session_local() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise LedgerUnavailable(str(e)) from e
        return self.available

    def signer(self, address: str) -> SqlLedgerSigner:
        return SqlLedgerSigner(address, self, approve=self.approve)
