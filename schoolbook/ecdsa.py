"""
Elliptic Curve Digital Signature Algorithm.

Domain parameters: curve, base point G and its prime order n.
    key pair: d in [1, n), Y = d*G
    sign:     k in [1, n), r = (k*G).x mod n, s = k^-1 * (z + d*r) mod n
    verify:   w = s^-1, u1 = z*w, u2 = r*w (mod n)
              (x, y) = u1*G + u2*Y, valid iff x = r (mod n)

z is the SHA-256 digest of the message truncated to the bit length of n.
"""

import random
from typing import Optional, Tuple

from .curve import AffinePoint, ECDomainParameters, Point
from .errors import InvalidParameterError, SearchExhaustedError
from .modular import modular_inverse, sample_uniform
from .primitive import DIGEST_SIZE, digest_int

MAX_SIGN_ATTEMPTS = 1000


def generate_keypair(
    params: ECDomainParameters,
    rng: Optional[random.Random] = None,
) -> Tuple[int, AffinePoint]:
    private_key = sample_uniform(1, params.order, rng)
    return private_key, params.curve.scalar_multiply(private_key, params.generator)


def _message_representative(message, n: int) -> int:
    z = digest_int(message)
    excess = DIGEST_SIZE * 8 - n.bit_length()
    return z >> excess if excess > 0 else z


def sign(
    message,
    private_key: int,
    params: ECDomainParameters,
    rng: Optional[random.Random] = None,
) -> Tuple[int, int]:
    """
    Sign message with the private scalar.

    Args:
        message: str or bytes
        private_key: Scalar d in [1, n)
        params: Curve domain parameters
        rng: Randomness source for the per-signature nonce k

    Returns:
        Signature (r, s)
    """
    n = params.order
    z = _message_representative(message, n)

    for _ in range(MAX_SIGN_ATTEMPTS):
        k = sample_uniform(1, n, rng)
        point = params.curve.scalar_multiply(k, params.generator)
        if point.is_infinity:
            continue
        r = point.x % n
        if r == 0:
            continue
        k_inverse = modular_inverse(k, n)
        if k_inverse is None:
            raise InvalidParameterError(f"order {n} is not prime; nonce {k} has no inverse")
        s = (k_inverse * (z + r * private_key)) % n
        if s != 0:
            return r, s

    raise SearchExhaustedError("could not produce an ECDSA signature")


def verify(
    message,
    signature: Tuple[int, int],
    params: ECDomainParameters,
    public_key: Point,
) -> bool:
    r, s = signature
    n = params.order
    if not 0 < r < n or not 0 < s < n:
        return False
    if public_key.is_infinity or not params.curve.is_on_curve(public_key):
        return False

    z = _message_representative(message, n)
    w = modular_inverse(s, n)
    if w is None:
        return False

    curve = params.curve
    point = curve.add(
        curve.scalar_multiply((z * w) % n, params.generator),
        curve.scalar_multiply((r * w) % n, public_key),
    )
    if point.is_infinity:
        return False
    return point.x % n == r
