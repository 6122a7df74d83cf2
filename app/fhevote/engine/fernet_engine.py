"""
Development confidentiality engine.

Stands in for an FHE coprocessor on local deployments: counts are
sealed with Fernet (cryptography) and proofs are HMAC-SHA256 tags under
a key derived from the same secret. It is not homomorphic.

19-10-2026
"""

import base64
import json

from cryptography.exceptions import InvalidSignature
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes, hmac

from app.fhevote.engine.base import ConfidentialityEngine, DecryptionSubmission, ProofVerifier, encode_clear_values
from app.fhevote.exceptions import ConfigurationError, DecryptionFailed, EncryptionFailed
from app.fhevote.model.schemas import DecryptionResult, EncryptedInput
from app.logger import logger


class FernetEngine(ConfidentialityEngine, ProofVerifier):
    """
    resolve_ciphertext is an async callable mapping a handle to the
    stored ciphertext, the lookup a decryption service performs.

    A key is required: ciphertexts outlive the process. Only throwaway
    setups should pass generate_key=True.
    """

    def __init__(self, key: str | bytes | None = None, resolve_ciphertext=None, generate_key: bool = False) -> None:
        super(FernetEngine, self).__init__()
        if not key:
            if not generate_key:
                raise ConfigurationError("ENCRYPTION_KEY is not set")
            key = Fernet.generate_key()
        self.key = key
        self.resolve_ciphertext = resolve_ciphertext
        self._fernet = None
        self._mac_key = None

    async def initialize(self) -> None:
        key = self.key.encode() if isinstance(self.key, str) else self.key
        self._fernet = Fernet(key)
        self._mac_key = base64.urlsafe_b64decode(key)
        await super(FernetEngine, self).initialize()
        logger.info("Fernet confidentiality engine initialized")

    def _tag(self, *parts: str) -> str:
        mac = hmac.HMAC(self._mac_key, hashes.SHA256())
        mac.update("|".join(parts).encode())
        return mac.finalize().hex()

    def _check(self, tag: str, *parts: str) -> bool:
        mac = hmac.HMAC(self._mac_key, hashes.SHA256())
        mac.update("|".join(parts).encode())
        try:
            mac.verify(bytes.fromhex(tag))
        except (InvalidSignature, ValueError):
            return False
        return True

    # -- ConfidentialityEngine --

    async def encrypt(self, context_address: str, identity_address: str, value: int) -> EncryptedInput:
        if not self.is_initialized:
            raise EncryptionFailed("engine not initialized")
        if not isinstance(value, int) or value < 0:
            raise EncryptionFailed("only non-negative integers can be encrypted")

        payload = json.dumps({"value": value, "context": context_address})
        ciphertext = self._fernet.encrypt(payload.encode()).decode()
        proof = self._tag("input", context_address, identity_address, ciphertext)
        return EncryptedInput(ciphertext=ciphertext, proof=proof)

    async def verify_decryption(self, handles, context_address, submit: DecryptionSubmission) -> DecryptionResult:
        if not self.is_initialized:
            raise DecryptionFailed("engine not initialized")
        if self.resolve_ciphertext is None:
            raise DecryptionFailed("no ciphertext resolver configured")

        clear_values = {}
        for handle in handles:
            ciphertext = await self.resolve_ciphertext(handle)
            try:
                payload = json.loads(self._fernet.decrypt(ciphertext.encode()))
            except InvalidToken as e:
                raise DecryptionFailed(f"cannot decrypt handle {handle}") from e
            if payload.get("context") != context_address:
                raise DecryptionFailed(f"handle {handle} belongs to another context")
            clear_values[handle] = payload["value"]

        encoded = encode_clear_values([clear_values[h] for h in handles])
        proof = self._tag("decryption", ",".join(handles), encoded)

        await submit(encoded, proof)

        return DecryptionResult(clear_values=clear_values, clear_values_encoded=encoded, decryption_proof=proof)

    # -- ProofVerifier --

    def check_input_proof(self, context_address, identity_address, ciphertext, proof) -> bool:
        return self._mac_key is not None and self._check(proof, "input", context_address, identity_address, ciphertext)

    def check_decryption_proof(self, handles, clear_values_encoded, proof) -> bool:
        return self._mac_key is not None and self._check(proof, "decryption", ",".join(handles), clear_values_encoded)
