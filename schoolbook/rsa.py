"""
Schoolbook RSA.

Key generation, raw encryption/decryption and hash-then-sign signatures,
all routed through power_mod. No padding scheme is applied: this is the
textbook construction, meant for study rather than protection.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidParameterError, SearchExhaustedError
from .modular import gcd, generate_prime, modular_inverse, power_mod
from .primitive import digest_int, int_to_text, text_to_int

logger = logging.getLogger(__name__)

# Any prime with gcd(e, p-1) = gcd(e, q-1) = 1 works; few set bits keep encryption cheap.
DEFAULT_E = 17

MIN_MODULUS_BITS = 16
MAX_MODULUS_BITS = 4096

# A SHA-256 digest must fit under the modulus with room to spare.
MIN_SIGNING_MODULUS_BITS = 512

MAX_KEYGEN_ATTEMPTS = 1000


@dataclass(frozen=True)
class RSAPublicKey:
    e: int
    n: int

    def to_dict(self) -> dict:
        return {"e": self.e, "n": self.n}

    @staticmethod
    def from_dict(d: dict) -> "RSAPublicKey":
        return RSAPublicKey(e=int(d["e"]), n=int(d["n"]))


@dataclass(frozen=True)
class RSAPrivateKey:
    d: int
    n: int

    def to_dict(self) -> dict:
        return {"d": self.d, "n": self.n}

    @staticmethod
    def from_dict(d: dict) -> "RSAPrivateKey":
        return RSAPrivateKey(d=int(d["d"]), n=int(d["n"]))


def validate_modulus_bits(modulus_bits: int) -> bool:
    return (
        MIN_MODULUS_BITS <= modulus_bits <= MAX_MODULUS_BITS
        and modulus_bits % 8 == 0
    )


def _generate_factor(bits: int, e: int, other_than: Optional[int], rng) -> int:
    for _ in range(MAX_KEYGEN_ATTEMPTS):
        candidate = generate_prime(bits, rng=rng)
        if candidate != other_than and gcd(e, candidate - 1) == 1:
            return candidate
    raise SearchExhaustedError(f"no {bits}-bit prime coprime with e={e} - 1")


def generate_keypair(
    modulus_bits: int = 1024,
    e: int = DEFAULT_E,
    rng: Optional[random.Random] = None,
) -> Tuple[RSAPublicKey, RSAPrivateKey]:
    """
    Generate an RSA key pair with a modulus of exactly modulus_bits bits.

    Args:
        modulus_bits: Size of n, a multiple of 8 in [16, 4096]
        e: Public exponent
        rng: Randomness source for prime generation

    Returns:
        (public key, private key)

    Raises:
        InvalidParameterError: If modulus_bits is out of range
    """
    if not validate_modulus_bits(modulus_bits):
        raise InvalidParameterError(
            f"modulus_bits must be a multiple of 8 in [{MIN_MODULUS_BITS}, {MAX_MODULUS_BITS}], got {modulus_bits}"
        )

    half = modulus_bits // 2
    for _ in range(MAX_KEYGEN_ATTEMPTS):
        p = _generate_factor(half, e, None, rng)
        q = _generate_factor(half, e, p, rng)
        n = p * q
        if n.bit_length() != modulus_bits:
            continue

        totient = (p - 1) * (q - 1)
        d = modular_inverse(e, totient)
        if d is None:
            continue

        logger.debug("generated %d-bit RSA modulus", modulus_bits)
        return RSAPublicKey(e=e, n=n), RSAPrivateKey(d=d, n=n)

    raise SearchExhaustedError(f"could not build a {modulus_bits}-bit RSA modulus")


def encrypt_int(m: int, public_key: RSAPublicKey) -> int:
    if not 0 <= m < public_key.n:
        raise InvalidParameterError("plaintext must be in [0, n); try a larger modulus")
    return power_mod(m, public_key.e, public_key.n)


def decrypt_int(c: int, private_key: RSAPrivateKey) -> int:
    if not 0 <= c < private_key.n:
        raise InvalidParameterError("ciphertext must be in [0, n)")
    return power_mod(c, private_key.d, private_key.n)


def encrypt_text(plaintext: str, public_key: RSAPublicKey) -> str:
    """Encrypt UTF-8 text; returns the ciphertext as a hex string."""
    return format(encrypt_int(text_to_int(plaintext), public_key), "x")


def decrypt_text(ciphertext_hex: str, private_key: RSAPrivateKey) -> str:
    return int_to_text(decrypt_int(int(ciphertext_hex, 16), private_key))


def sign(message, private_key: RSAPrivateKey) -> int:
    """
    Sign the SHA-256 digest of message: s = H(m)^d mod n.

    Raises:
        InvalidParameterError: If n is shorter than 512 bits
    """
    if private_key.n.bit_length() < MIN_SIGNING_MODULUS_BITS:
        raise InvalidParameterError(f"signing needs a modulus of at least {MIN_SIGNING_MODULUS_BITS} bits")
    return power_mod(digest_int(message), private_key.d, private_key.n)


def verify(message, signature: int, public_key: RSAPublicKey) -> bool:
    if not 0 < signature < public_key.n:
        return False
    return power_mod(signature, public_key.e, public_key.n) == digest_int(message)
