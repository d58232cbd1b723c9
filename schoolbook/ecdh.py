"""
Elliptic-curve Diffie-Hellman.

Each party picks d in [2, n) and publishes Q = d*G. The shared point is
d_A * Q_B = d_B * Q_A; its x-coordinate is run through HKDF to obtain a
symmetric key.
"""

import random
from typing import Optional, Tuple

from .curve import AffinePoint, ECDomainParameters, Point
from .errors import InvalidParameterError
from .modular import sample_uniform
from .primitive import int_to_key

KEY_INFO = b"schoolbook-ecdh"


def generate_keypair(
    params: ECDomainParameters,
    rng: Optional[random.Random] = None,
) -> Tuple[int, AffinePoint]:
    """Returns (private scalar, public point)."""
    private_key = sample_uniform(2, params.order, rng)
    return private_key, params.curve.scalar_multiply(private_key, params.generator)


def shared_point(private_key: int, other_public_key: Point, params: ECDomainParameters) -> AffinePoint:
    """
    Raises:
        PointNotOnCurveError: If the peer key is not on the curve
        InvalidParameterError: If the result is the point at infinity
    """
    point = params.curve.scalar_multiply(private_key, other_public_key)
    if point.is_infinity:
        raise InvalidParameterError("shared point is the point at infinity")
    return point


def derive_key(point: AffinePoint, length: int = 32) -> bytes:
    return int_to_key(point.x, info=KEY_INFO, length=length)
