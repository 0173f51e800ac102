"""AES-CFB encryption of base64-encoded payloads with a random IV prefix."""

from __future__ import annotations

import base64
import binascii
import os

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .config import SdkError

BLOCK_SIZE = 16
_KEY_SIZES = (16, 24, 32)


def _algorithm(key: bytes) -> algorithms.AES:
    if len(key) not in _KEY_SIZES:
        raise SdkError(f"invalid key size {len(key)}")
    return algorithms.AES(key)


def encrypt(key: bytes, text: bytes) -> bytes:
    """Encrypt text; the result is the IV followed by the ciphertext."""
    algorithm = _algorithm(key)
    encoded = base64.b64encode(text)
    iv = os.urandom(BLOCK_SIZE)
    encryptor = Cipher(algorithm, modes.CFB(iv)).encryptor()
    return iv + encryptor.update(encoded) + encryptor.finalize()


def decrypt(key: bytes, text: bytes) -> bytes:
    """Decrypt data produced by :func:`encrypt`."""
    algorithm = _algorithm(key)
    if len(text) < BLOCK_SIZE:
        raise SdkError("ciphertext too short")
    iv, body = text[:BLOCK_SIZE], text[BLOCK_SIZE:]
    decryptor = Cipher(algorithm, modes.CFB(iv)).decryptor()
    encoded = decryptor.update(body) + decryptor.finalize()
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as err:
        raise SdkError(f"illegal base64 data: {err}") from err


def encrypt_hex(key: str, text: str) -> str:
    """Encrypt a string with a string key and return the result hex-encoded."""
    return encrypt(key.encode(), text.encode()).hex()


def decrypt_hex(key: str, text: str) -> str:
    """Decrypt a hex string produced by :func:`encrypt_hex`."""
    try:
        data = bytes.fromhex(text)
    except ValueError as err:
        raise SdkError(f"invalid hex data: {err}") from err
    return decrypt(key.encode(), data).decode("utf-8", errors="replace")