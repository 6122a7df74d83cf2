"""
Ledger gateway for FHE votes.

The read-only handle and the signing handle are distinct capabilities:
LedgerGateway answers reads and hands out a LedgerSigner bound to one
identity, and only the signer can write.

19-10-2026
"""

import asyncio
from typing import Awaitable, Callable

from app.fhevote.model.schemas import EncryptedHandle, RawRecordData, TransactionReceipt


class PendingTransaction(object):
    """
    A submitted transaction. wait() resolves once it is final.

    Confirmation runs as its own task: a caller that stops awaiting does
    not stop the transaction, and every waiter gets the same receipt.
    """

    def __init__(self, tx_hash: str, confirm: Callable[[], Awaitable[TransactionReceipt]]) -> None:
        self.tx_hash = tx_hash
        self._confirm = confirm
        self._task = None

    async def wait(self) -> TransactionReceipt:
        if self._task is None:
            self._task = asyncio.ensure_future(self._confirm())
        return await asyncio.shield(self._task)


class LedgerSigner(object):
    """
    Holds the common behaviour of a signing handle.
    """

    def __init__(self, address: str) -> None:
        self.address = address

    async def create_record(
        self,
        vote_id: str,
        title: str,
        ciphertext: str,
        proof: str,
        public_value1: int,
        public_value2: int,
        description: str,
    ) -> PendingTransaction:
        raise NotImplementedError

    async def submit_decryption_proof(self, vote_id: str, clear_values_encoded: str, proof: str) -> PendingTransaction:
        raise NotImplementedError


class LedgerGateway(object):
    """
    Holds the common behaviour of a read-only ledger handle.
    """

    async def get_address(self) -> str:
        raise NotImplementedError

    async def get_all_ids(self) -> list[str]:
        raise NotImplementedError

    async def get_record(self, vote_id: str) -> RawRecordData:
        raise NotImplementedError

    async def get_encrypted_value_handle(self, vote_id: str) -> EncryptedHandle:
        raise NotImplementedError

    async def check_availability(self) -> bool:
        raise NotImplementedError

    def signer(self, address: str) -> LedgerSigner:
        raise NotImplementedError
