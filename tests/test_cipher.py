import base64

import pytest

from zcnsdk.cipher import BLOCK_SIZE, decrypt, decrypt_hex, encrypt, encrypt_hex
from zcnsdk.config import SdkError

KEY16 = b"k" * 16
KEY24 = b"k" * 24
KEY32 = b"k" * 32


@pytest.mark.parametrize("key", [KEY16, KEY24, KEY32])
@pytest.mark.parametrize("text", [b"", b"hello", bytes(range(256))])
def test_round_trip(key, text):
    assert decrypt(key, encrypt(key, text)) == text


def test_ciphertext_length():
    text = b"some payload"
    sealed = encrypt(KEY16, text)
    assert len(sealed) == BLOCK_SIZE + len(base64.b64encode(text))


def test_random_iv_gives_different_ciphertexts():
    first = encrypt(KEY32, b"same")
    second = encrypt(KEY32, b"same")
    assert first[:BLOCK_SIZE] != second[:BLOCK_SIZE]
    assert decrypt(KEY32, first) == decrypt(KEY32, second)


def test_ciphertext_hides_plaintext():
    text = b"plaintext marker value"
    assert base64.b64encode(text) not in encrypt(KEY16, text)


@pytest.mark.parametrize("key", [b"", b"short", b"k" * 17, b"k" * 64])
def test_bad_key_size_encrypt(key):
    with pytest.raises(SdkError):
        encrypt(key, b"x")


def test_bad_key_size_decrypt():
    with pytest.raises(SdkError):
        decrypt(b"k" * 10, b"\x00" * 32)


def test_decrypt_too_short():
    with pytest.raises(SdkError, match="ciphertext too short"):
        decrypt(KEY16, b"\x00" * (BLOCK_SIZE - 1))


def test_hex_round_trip():
    key = "k" * 32
    sealed = encrypt_hex(key, "message text")
    assert all(c in "0123456789abcdef" for c in sealed)
    assert decrypt_hex(key, sealed) == "message text"


def test_hex_round_trip_unicode():
    key = "k" * 16
    assert decrypt_hex(key, encrypt_hex(key, "naïve ✓")) == "naïve ✓"


def test_decrypt_hex_invalid():
    with pytest.raises(SdkError):
        decrypt_hex("k" * 16, "zz-not-hex")