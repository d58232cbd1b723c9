"""
Message authentication codes.

- HMAC-SHA256 assembled by hand from the digest function:
      HMAC(K, m) = H((K' ^ opad) || H((K' ^ ipad) || m))
  where K' is the key padded (or hashed) to the digest block size.
- CBC-MAC over AES-128: the message is PKCS7-padded, chained through AES in
  CBC mode starting from a random 16-byte nonce, and the last block is the tag.
  Plain CBC-MAC is only sound for messages of a fixed length.
"""

import hmac
from typing import Optional, Tuple

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import InvalidParameterError
from .primitive import DIGEST_BLOCK_SIZE, as_bytes, digest, rand_nonce

IPAD = 0x36
OPAD = 0x5C

AES_BLOCK_SIZE = 16
CBC_MAC_KEY_SIZE = 16


# ============================================
# HMAC
# ============================================

def _normalize_key(key: bytes) -> bytes:
    if len(key) > DIGEST_BLOCK_SIZE:
        key = digest(key)
    return key.ljust(DIGEST_BLOCK_SIZE, b"\x00")


def hmac_sha256(key, message) -> bytes:
    key = as_bytes(key)
    if not key:
        raise InvalidParameterError("HMAC key must not be empty")

    key = _normalize_key(key)
    inner_key = bytes(b ^ IPAD for b in key)
    outer_key = bytes(b ^ OPAD for b in key)

    inner = digest(inner_key + as_bytes(message))
    return digest(outer_key + inner)


def hmac_verify(key, message, tag: bytes) -> bool:
    return hmac.compare_digest(hmac_sha256(key, message), tag)


# ============================================
# CBC-MAC
# ============================================

def cbc_mac(message, key: bytes, nonce: bytes) -> bytes:
    """
    Args:
        message: Non-empty str or bytes
        key: 16-byte AES-128 key
        nonce: 16-byte initial chaining value

    Returns:
        16-byte tag
    """
    data = as_bytes(message)
    if not data:
        raise InvalidParameterError("message must not be empty")
    if len(key) != CBC_MAC_KEY_SIZE:
        raise InvalidParameterError(f"key must be {CBC_MAC_KEY_SIZE} bytes long, got {len(key)}")
    if len(nonce) != AES_BLOCK_SIZE:
        raise InvalidParameterError(f"nonce must be {AES_BLOCK_SIZE} bytes long, got {len(nonce)}")

    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(nonce)).encryptor()
    chained = encryptor.update(padded) + encryptor.finalize()
    return chained[-AES_BLOCK_SIZE:]


def cbc_mac_sign(message, key: bytes, nonce: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    """Returns (tag, nonce); a random nonce is drawn when none is given."""
    if nonce is None:
        nonce = rand_nonce(AES_BLOCK_SIZE)
    return cbc_mac(message, key, nonce), nonce


def cbc_mac_verify(message, key: bytes, nonce: bytes, tag: bytes) -> bool:
    return hmac.compare_digest(cbc_mac(message, key, nonce), tag)
