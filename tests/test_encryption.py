import base64

import pytest
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from miscreant.aes.siv import SIV

from secret_tx_notifier.chain.encryption import EncryptionUtils

SEED = bytes(range(1, 33))
NONCE = bytes([7]) * 32


def _io_pubkey() -> bytes:
    key = X25519PrivateKey.from_private_bytes(bytes([9]) * 32)
    return key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


def _seal(utils: EncryptionUtils, text: str, io_key: bytes, nonce: bytes = NONCE) -> str:
    siv = SIV(utils.tx_encryption_key(nonce, io_key))
    return base64.b64encode(siv.seal(text.encode("utf-8"), [b""])).decode("ascii")


def test_decrypts_attribute_text():
    utils = EncryptionUtils(SEED)
    io_key = _io_pubkey()

    ct = _seal(utils, "caller_share_amount", io_key)
    assert ct != "caller_share_amount"
    assert utils.try_decrypt_text(ct, NONCE, io_key) == "caller_share_amount"


def test_plain_or_foreign_text_is_left_alone():
    utils = EncryptionUtils(SEED)
    io_key = _io_pubkey()

    assert utils.try_decrypt_text("secret1t", NONCE, io_key) == "secret1t"
    assert utils.try_decrypt_text("not base64!", NONCE, io_key) == "not base64!"

    other_nonce = _seal(utils, "x", io_key, nonce=bytes(32))
    assert utils.try_decrypt_text(other_nonce, NONCE, io_key) == other_nonce


def test_nonce_only_for_own_messages():
    utils = EncryptionUtils(SEED)
    assert utils.nonce_of(NONCE + utils.pubkey + b"ct") == NONCE
    assert utils.nonce_of(NONCE + bytes(32) + b"ct") is None
    assert utils.nonce_of(b"short") is None


def test_seed_length_is_checked():
    with pytest.raises(ValueError):
        EncryptionUtils(bytes(16))
