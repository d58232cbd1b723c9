import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import InvalidParameterError

DIGEST_SIZE = 32
DIGEST_BLOCK_SIZE = 64


def rand_nonce(n: int = 12) -> bytes:
    return os.urandom(n)

def as_bytes(message) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)

def digest(data: bytes) -> bytes:
    """SHA-256 of data (32 bytes)."""
    h = hashes.Hash(hashes.SHA256())
    h.update(data)
    return h.finalize()

def digest_int(message) -> int:
    return int.from_bytes(digest(as_bytes(message)), "big")

def hkdf_sha256(ikm: bytes, salt: Optional[bytes], info: bytes, length: int) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=length, salt=salt, info=info).derive(ikm)

def int_to_key(secret: int, info: bytes, length: int = 32) -> bytes:
    """Derive a symmetric key from an integer shared secret."""
    raw = secret.to_bytes(max(1, (secret.bit_length() + 7) // 8), "big")
    return hkdf_sha256(ikm=raw, salt=None, info=info, length=length)

def aead_encrypt(key32: bytes, plaintext: bytes, aad: bytes) -> Tuple[bytes, bytes]:
    nonce = rand_nonce(12)
    ct = AESGCM(key32).encrypt(nonce, plaintext, aad)
    return nonce, ct

def aead_decrypt(key32: bytes, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
    return AESGCM(key32).decrypt(nonce, ciphertext, aad)

def text_to_int(text: str) -> int:
    """Big-endian integer representation of the UTF-8 bytes of text."""
    if not text:
        raise InvalidParameterError("text must not be empty")
    return int.from_bytes(text.encode("utf-8"), "big")

def int_to_text(value: int) -> str:
    if value <= 0:
        raise InvalidParameterError(f"value must be positive, got {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big").decode("utf-8")
