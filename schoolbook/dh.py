"""
Finite-field Diffie-Hellman key exchange.

Domain parameters are a prime p and a generator g of Z_p*. Each party picks
a private exponent a in [2, p-1), publishes g^a mod p, and raises the other
party's public value to its own exponent to reach the shared secret
g^(ab) mod p. The secret is turned into a symmetric key with HKDF.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidParameterError
from .modular import find_group_generator, generate_prime, power_mod, sample_uniform
from .primitive import int_to_key

KEY_INFO = b"schoolbook-dh"


@dataclass(frozen=True)
class DHParameters:
    p: int
    generator: int

    def to_dict(self) -> dict:
        return {"p": self.p, "generator": self.generator}

    @staticmethod
    def from_dict(d: dict) -> "DHParameters":
        return DHParameters(p=int(d["p"]), generator=int(d["generator"]))


def setup(total_bits: int = 64, rng: Optional[random.Random] = None) -> DHParameters:
    """Generate a prime of total_bits bits and a generator of its multiplicative group."""
    p = generate_prime(total_bits, rng=rng)
    return DHParameters(p=p, generator=find_group_generator(p))


def generate_private_key(p: int, rng: Optional[random.Random] = None) -> int:
    """Private exponent in [2, p-1)."""
    if p <= 3:
        raise InvalidParameterError(f"p must be greater than 3, got {p}")
    return sample_uniform(2, p - 1, rng)


def public_key(private_key: int, params: DHParameters) -> int:
    return power_mod(params.generator, private_key, params.p)


def generate_keypair(params: DHParameters, rng: Optional[random.Random] = None) -> Tuple[int, int]:
    """Returns (private_key, public_key)."""
    private_key = generate_private_key(params.p, rng)
    return private_key, public_key(private_key, params)


def shared_secret(private_key: int, other_public_key: int, params: DHParameters) -> int:
    if not 1 < other_public_key < params.p - 1:
        raise InvalidParameterError("peer public key must lie in [2, p-2]")
    return power_mod(other_public_key, private_key, params.p)


def derive_key(secret: int, length: int = 32) -> bytes:
    return int_to_key(secret, info=KEY_INFO, length=length)
