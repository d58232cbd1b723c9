"""
ElGamal encryption and ElGamal signatures over Z_p*.

Encryption masks the message with k_M = beta^i mod p for a fresh ephemeral
exponent i and ships k_E = g^i along with the masked value; the receiver
recomputes k_M = k_E^d and multiplies by its inverse.

Signatures use an ephemeral k_E coprime to p-1:
    r = g^k_E mod p
    s = (z - d*r) * k_E^-1 mod (p-1)
and verify with beta^r * r^s == g^z (mod p), z being the message digest.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidParameterError, SearchExhaustedError
from .modular import (
    find_group_generator,
    gcd,
    generate_prime,
    modular_inverse,
    power_mod,
    sample_uniform,
)
from .primitive import digest_int

MAX_SIGN_ATTEMPTS = 1000


@dataclass(frozen=True)
class ElGamalPublicKey:
    p: int
    generator: int
    beta: int

    def to_dict(self) -> dict:
        return {"p": self.p, "generator": self.generator, "beta": self.beta}

    @staticmethod
    def from_dict(d: dict) -> "ElGamalPublicKey":
        return ElGamalPublicKey(p=int(d["p"]), generator=int(d["generator"]), beta=int(d["beta"]))


def generate_keypair(
    total_bits: int = 64,
    rng: Optional[random.Random] = None,
    window: Optional[int] = None,
) -> Tuple[int, ElGamalPublicKey]:
    """
    Generate (private key d, public key (p, g, beta = g^d mod p)).

    Args:
        total_bits: Bit length of the prime p
        rng: Randomness source
        window: Generator search window, see find_group_generator
    """
    p = generate_prime(total_bits, rng=rng)
    g = find_group_generator(p, window=window)
    d = sample_uniform(2, p - 1, rng)
    return d, ElGamalPublicKey(p=p, generator=g, beta=power_mod(g, d, p))


# ============================================
# Encryption
# ============================================

def encrypt(m: int, public_key: ElGamalPublicKey, rng: Optional[random.Random] = None) -> Tuple[int, int]:
    """
    Returns:
        (ephemeral key k_E, masked message y)

    Raises:
        InvalidParameterError: If m is not in [1, p)
    """
    p = public_key.p
    if not 0 < m < p:
        raise InvalidParameterError(f"message too big for this key (max bits: {p.bit_length() - 1})")

    i = sample_uniform(2, p - 1, rng)
    ephemeral = power_mod(public_key.generator, i, p)
    masking_key = power_mod(public_key.beta, i, p)
    return ephemeral, (m * masking_key) % p


def decrypt(ephemeral: int, masked: int, private_key: int, public_key: ElGamalPublicKey) -> int:
    p = public_key.p
    masking_key = power_mod(ephemeral, private_key, p)
    inverse = modular_inverse(masking_key, p)
    if inverse is None:
        raise InvalidParameterError("ephemeral key has no inverse modulo p")
    return (masked * inverse) % p


# ============================================
# Signatures
# ============================================

def _digest_mod(message, modulus: int) -> int:
    return digest_int(message) % modulus


def sign(
    message,
    private_key: int,
    public_key: ElGamalPublicKey,
    rng: Optional[random.Random] = None,
) -> Tuple[int, int]:
    """Sign message; returns (r, s)."""
    p = public_key.p
    order = p - 1
    z = _digest_mod(message, order)

    for _ in range(MAX_SIGN_ATTEMPTS):
        k = sample_uniform(2, order, rng)
        if gcd(k, order) != 1:
            continue
        r = power_mod(public_key.generator, k, p)
        s = ((z - private_key * r) * modular_inverse(k, order)) % order
        if s != 0:
            return r, s

    raise SearchExhaustedError("could not find an ephemeral key for the signature")


def verify(message, signature: Tuple[int, int], public_key: ElGamalPublicKey) -> bool:
    r, s = signature
    p = public_key.p
    if not 0 < r < p or not 0 < s < p - 1:
        return False

    z = _digest_mod(message, p - 1)
    lhs = (power_mod(public_key.beta, r, p) * power_mod(r, s, p)) % p
    return lhs == power_mod(public_key.generator, z, p)
