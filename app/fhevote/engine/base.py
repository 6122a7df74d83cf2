"""
Confidentiality engine for FHE votes.

The engine encrypts plaintext counts client-side and, later, turns an
encrypted handle back into a clear value plus a decryption proof. How
either is done is the engine's business; the orchestrator only relies
on the shapes defined here.

19-10-2026
"""

import json
from typing import Awaitable, Callable

from app.fhevote.exceptions import CallbackAlreadyUsed
from app.fhevote.model.schemas import DecryptionResult, EncryptedInput


def encode_clear_values(values: list[int]) -> str:
    return json.dumps([int(v) for v in values])


def decode_clear_values(encoded: str) -> list[int]:
    try:
        values = json.loads(encoded)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError("clear values are not JSON") from e
    if not isinstance(values, list) or not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        raise ValueError("clear values must be a list of integers")
    return values


class DecryptionSubmission(object):
    """
    Single-use capability handed to the engine by the orchestrator.

    The engine calls it once, on its own schedule, with the encoded clear
    values and their proof; it forwards them to the ledger and resolves
    once the ledger has accepted them. receipt stays None until then.
    """

    def __init__(self, submit: Callable[[str, str], Awaitable]) -> None:
        self._submit = submit
        self.used = False
        self.receipt = None

    @property
    def accepted(self) -> bool:
        return self.used and self.receipt is not None

    async def __call__(self, clear_values_encoded: str, decryption_proof: str):
        if self.used:
            raise CallbackAlreadyUsed("decryption submission already used")
        self.used = True
        self.receipt = await self._submit(clear_values_encoded, decryption_proof)
        return self.receipt


class ProofVerifier(object):
    """
    What a ledger needs to check the proofs an engine produces.
    """

    def check_input_proof(self, context_address: str, identity_address: str, ciphertext: str, proof: str) -> bool:
        raise NotImplementedError

    def check_decryption_proof(self, handles: list[str], clear_values_encoded: str, proof: str) -> bool:
        raise NotImplementedError


class ConfidentialityEngine(object):
    """
    Holds the common behaviour of a confidentiality engine.
    """

    def __init__(self) -> None:
        self.is_initialized = False

    async def initialize(self) -> None:
        self.is_initialized = True

    async def encrypt(self, context_address: str, identity_address: str, value: int) -> EncryptedInput:
        raise NotImplementedError

    async def verify_decryption(
        self, handles: list[str], context_address: str, submit: DecryptionSubmission
    ) -> DecryptionResult:
        raise NotImplementedError
