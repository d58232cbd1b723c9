"""
Digital Signature Algorithm.

Domain parameters: primes p and q with q | p-1, and g of order q in Z_p*.
The signer holds d in [1, q) and publishes y = g^d mod p.

    sign:   r = (g^k mod p) mod q,  s = k^-1 * (z + d*r) mod q
    verify: w = s^-1,  u1 = z*w,  u2 = r*w  (mod q)
            v = (g^u1 * y^u2 mod p) mod q  ==  r

z is the SHA-256 digest of the message truncated to the bit length of q.
Default sizes are far below anything secure.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidParameterError, SearchExhaustedError
from .modular import (
    find_subgroup_generator,
    generate_prime,
    is_prime,
    modular_inverse,
    power_mod,
    sample_uniform,
)
from .primitive import DIGEST_SIZE, digest_int

logger = logging.getLogger(__name__)

DEFAULT_P_BITS = 128
DEFAULT_Q_BITS = 64

MAX_P_ATTEMPTS = 4096
MAX_SIGN_ATTEMPTS = 1000


@dataclass(frozen=True)
class DSAParameters:
    p: int
    q: int
    generator: int
    public_key: int

    def to_dict(self) -> dict:
        return {"p": self.p, "q": self.q, "generator": self.generator, "public_key": self.public_key}

    @staticmethod
    def from_dict(d: dict) -> "DSAParameters":
        return DSAParameters(
            p=int(d["p"]),
            q=int(d["q"]),
            generator=int(d["generator"]),
            public_key=int(d["public_key"]),
        )


def _find_p(q: int, p_bits: int, rng) -> Optional[int]:
    """Look for a p_bits prime p with p = 1 (mod 2q)."""
    two_q = 2 * q
    low, high = 1 << (p_bits - 1), 1 << p_bits
    for _ in range(MAX_P_ATTEMPTS):
        m = sample_uniform(low, high, rng)
        p = m - (m % two_q) + 1
        if low <= p < high and is_prime(p, rng=rng):
            return p
    return None


def setup(
    p_bits: int = DEFAULT_P_BITS,
    q_bits: int = DEFAULT_Q_BITS,
    rng: Optional[random.Random] = None,
    max_rounds: int = 16,
) -> Tuple[int, DSAParameters]:
    """
    Generate domain parameters and a key pair.

    Returns:
        (private key d, DSAParameters with the public key y)

    Raises:
        InvalidParameterError: If q_bits is not smaller than p_bits
        SearchExhaustedError: If no suitable p is found
    """
    if q_bits >= p_bits:
        raise InvalidParameterError(f"q_bits ({q_bits}) must be smaller than p_bits ({p_bits})")

    for _ in range(max_rounds):
        q = generate_prime(q_bits, rng=rng)
        p = _find_p(q, p_bits, rng)
        if p is not None:
            break
    else:
        raise SearchExhaustedError(f"no {p_bits}-bit p found for a {q_bits}-bit q")

    # g != 1 and g^q = 1, so ord(g) = q because q is prime.
    g = find_subgroup_generator(p, q)
    d = sample_uniform(1, q, rng)
    logger.debug("DSA parameters ready (p: %d bits, q: %d bits)", p.bit_length(), q.bit_length())
    return d, DSAParameters(p=p, q=q, generator=g, public_key=power_mod(g, d, p))


def _message_representative(message, q: int) -> int:
    z = digest_int(message)
    excess = DIGEST_SIZE * 8 - q.bit_length()
    return z >> excess if excess > 0 else z


def sign(
    message,
    private_key: int,
    params: DSAParameters,
    rng: Optional[random.Random] = None,
) -> Tuple[int, int]:
    p, q = params.p, params.q
    z = _message_representative(message, q)

    for _ in range(MAX_SIGN_ATTEMPTS):
        k = sample_uniform(1, q, rng)
        k_inverse = modular_inverse(k, q)
        if k_inverse is None:
            raise InvalidParameterError(f"q={q} is not prime; nonce {k} has no inverse")
        r = power_mod(params.generator, k, p) % q
        s = (k_inverse * (z + private_key * r)) % q
        if r != 0 and s != 0:
            return r, s

    raise SearchExhaustedError("could not produce a DSA signature")


def verify(message, params: DSAParameters, signature: Tuple[int, int]) -> bool:
    r, s = signature
    p, q = params.p, params.q
    if not 0 < r < q or not 0 < s < q:
        return False

    z = _message_representative(message, q)
    w = modular_inverse(s, q)
    if w is None:
        return False
    u1 = (z * w) % q
    u2 = (r * w) % q
    v = (power_mod(params.generator, u1, p) * power_mod(params.public_key, u2, p)) % p % q
    return v == r
