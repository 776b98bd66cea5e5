from __future__ import annotations

import base64

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from miscreant.aes.siv import SIV
from miscreant.exceptions import IntegrityError

HKDF_SALT = bytes.fromhex("000000000000000000024bead8df69990852c202db0e0097c1a12ea637d7e96d")

NONCE_SIZE = 32
PUBKEY_SIZE = 32
SIV_TAG_SIZE = 16

# attributes the chain itself adds to wasm events, never encrypted
PLAINTEXT_KEYS = {"contract_address"}


class EncryptionUtils:
    """
    Secret Network transaction encryption, keyed by the wallet's seed.

    An encrypted contract message is `nonce(32) || sender_pubkey(32) || ciphertext`.
    Event attributes emitted while executing it are AES-SIV ciphertexts
    (base64) under the same per-tx key:

      key = HKDF-SHA256(X25519(seed, consensus_io_pubkey) || nonce, salt=HKDF_SALT)
    """

    def __init__(self, seed: bytes):
        if len(seed) != 32:
            raise ValueError("Encryption seed must be 32 bytes")
        self._privkey = X25519PrivateKey.from_private_bytes(seed)
        self.pubkey = self._privkey.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def tx_encryption_key(self, nonce: bytes, consensus_io_pubkey: bytes) -> bytes:
        shared = self._privkey.exchange(X25519PublicKey.from_public_bytes(consensus_io_pubkey))
        hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=HKDF_SALT, info=None)
        return hkdf.derive(shared + nonce)

    def decrypt(self, ciphertext: bytes, nonce: bytes, consensus_io_pubkey: bytes) -> bytes:
        siv = SIV(self.tx_encryption_key(nonce, consensus_io_pubkey))
        return siv.open(ciphertext, [b""])

    def nonce_of(self, encrypted_msg: bytes) -> bytes | None:
        """
        Nonce of a contract message encrypted by this wallet, None for
        messages sent by anyone else.
        """
        if len(encrypted_msg) < NONCE_SIZE + PUBKEY_SIZE:
            return None
        if encrypted_msg[NONCE_SIZE : NONCE_SIZE + PUBKEY_SIZE] != self.pubkey:
            return None
        return encrypted_msg[:NONCE_SIZE]

    def try_decrypt_text(self, text: str, nonce: bytes, consensus_io_pubkey: bytes) -> str:
        """
        Plaintext of a base64 attribute key/value, or `text` unchanged when it
        isn't a ciphertext under this nonce.
        """
        try:
            raw = base64.b64decode(text, validate=True)
        except ValueError:
            return text
        # SIV output is at least the 16-byte tag
        if len(raw) < SIV_TAG_SIZE:
            return text
        try:
            return self.decrypt(raw, nonce, consensus_io_pubkey).decode("utf-8")
        except (IntegrityError, ValueError):
            return text
