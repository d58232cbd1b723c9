"""
Primitive Helper Tests

Encoding, digest, key derivation and AEAD wrappers.
"""

import pytest
from cryptography.exceptions import InvalidTag

from schoolbook.errors import InvalidParameterError
from schoolbook.primitive import (
    DIGEST_SIZE,
    aead_decrypt,
    aead_encrypt,
    as_bytes,
    digest,
    digest_int,
    hkdf_sha256,
    int_to_key,
    int_to_text,
    text_to_int,
)


class TestEncoding:
    """Tests for byte and text helpers."""

    def test_as_bytes(self):
        assert as_bytes("é") == b"\xc3\xa9"
        assert as_bytes(b"x") == b"x"
        assert as_bytes(bytearray(b"y")) == b"y"

    def test_text_to_int(self):
        assert text_to_int("A") == 65
        assert text_to_int("AB") == 0x4142

    def test_int_to_text(self):
        assert int_to_text(0x4142) == "AB"
        assert int_to_text(text_to_int("héllo wörld")) == "héllo wörld"

    def test_invalid_text_values(self):
        with pytest.raises(InvalidParameterError):
            text_to_int("")
        with pytest.raises(InvalidParameterError):
            int_to_text(0)


class TestDigest:
    """Tests for SHA-256 helpers."""

    def test_known_value(self):
        assert digest(b"abc").hex() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )
        assert len(digest(b"")) == DIGEST_SIZE

    def test_digest_int(self):
        assert digest_int("abc") == int.from_bytes(digest(b"abc"), "big")
        assert digest_int("abc") == digest_int(b"abc")


class TestKeyDerivation:
    """Tests for HKDF wrappers."""

    def test_hkdf_length(self):
        assert len(hkdf_sha256(b"ikm", None, b"info", 48)) == 48

    def test_int_to_key(self):
        key = int_to_key(123456789, info=b"ctx")
        assert len(key) == 32
        assert key == int_to_key(123456789, info=b"ctx")
        assert key != int_to_key(123456789, info=b"other")
        assert len(int_to_key(0, info=b"ctx")) == 32


class TestAEAD:
    """Tests for AES-GCM wrapping."""

    def test_round_trip(self):
        key = b"\x01" * 32
        nonce, ct = aead_encrypt(key, b"secret", b"aad")
        assert len(nonce) == 12
        assert aead_decrypt(key, nonce, ct, b"aad") == b"secret"

    def test_tampering_detected(self):
        key = b"\x01" * 32
        nonce, ct = aead_encrypt(key, b"secret", b"aad")
        tampered = bytes([ct[0] ^ 1]) + ct[1:]
        with pytest.raises(InvalidTag):
            aead_decrypt(key, nonce, tampered, b"aad")
        with pytest.raises(InvalidTag):
            aead_decrypt(key, nonce, ct, b"other aad")
