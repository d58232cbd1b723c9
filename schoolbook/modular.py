"""
Modular Arithmetic Library.

Exact number-theoretic primitives over arbitrary-precision integers:
- gcd and modular inverse (extended Euclid)
- modular exponentiation (square-and-multiply)
- Miller-Rabin primality testing
- prime generation and bounded generator search
- uniform sampling from an injected randomness source

Every randomized function takes an optional `rng` (a `random.Random`
instance). When omitted, a fresh `secrets.SystemRandom()` is used for the
call, so tests can substitute `random.Random(seed)` for reproducibility.
"""

import logging
import random
import secrets
from typing import Optional

from .config import get_settings
from .errors import InvalidParameterError, SearchExhaustedError

logger = logging.getLogger(__name__)

MIN_PRIME_BITS = 8


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else secrets.SystemRandom()


# ============================================
# Euclid
# ============================================

def gcd(a: int, b: int) -> int:
    """Greatest common divisor by the iterative Euclidean algorithm."""
    if b < 0:
        raise InvalidParameterError(f"gcd requires b >= 0, got {b}")
    while b:
        a, b = b, a % b
    return abs(a)


def modular_inverse(a: int, m: int) -> Optional[int]:
    """
    Compute x such that a*x = 1 (mod m) with the extended Euclidean algorithm.

    Args:
        a: Value to invert (any integer, reduced modulo m first)
        m: Modulus, must be positive

    Returns:
        The inverse normalized into [0, m), or None when gcd(a, m) != 1.
        None is a normal outcome; callers that need an inverse must check it.

    Raises:
        InvalidParameterError: If m <= 0
    """
    if m <= 0:
        raise InvalidParameterError(f"modulus must be positive, got {m}")
    if m == 1:
        return 0

    t, new_t = 0, 1
    r, new_r = m, a % m
    while new_r != 0:
        quotient = r // new_r
        t, new_t = new_t, t - quotient * new_t
        r, new_r = new_r, r - quotient * new_r

    if r != 1:
        return None
    return t % m


# ============================================
# Exponentiation
# ============================================

def power_mod(base: int, exponent: int, modulus: int) -> int:
    """
    Modular exponentiation by repeated squaring.

    The exponent is scanned from its least-significant bit; every product is
    reduced immediately so intermediates never exceed modulus**2.

    Raises:
        InvalidParameterError: If exponent < 0 or modulus <= 0
    """
    if modulus <= 0:
        raise InvalidParameterError(f"modulus must be positive, got {modulus}")
    if exponent < 0:
        raise InvalidParameterError(f"exponent must be non-negative, got {exponent}")
    if modulus == 1:
        return 0

    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


# ============================================
# Randomness
# ============================================

def sample_uniform(low: int, high: int, rng: Optional[random.Random] = None) -> int:
    """
    Draw a value uniformly from [low, high).

    Uses rejection sampling on raw bits from the randomness source, so no
    modulo bias is introduced on top of the source's own.
    """
    if low < 0 or low >= high:
        raise InvalidParameterError(f"need 0 <= low < high, got [{low}, {high})")

    rng = _rng(rng)
    span = high - low
    bits = span.bit_length()
    while True:
        candidate = rng.getrandbits(bits)
        if candidate < span:
            return low + candidate


# ============================================
# Primality
# ============================================

def _split_even_part(value: int) -> tuple:
    """Write value as 2**q * k with k odd; returns (q, k)."""
    q = 0
    while value & 1 == 0:
        value >>= 1
        q += 1
    return q, value


def is_prime(n: int, rounds: Optional[int] = None, rng: Optional[random.Random] = None) -> bool:
    """
    Miller-Rabin probabilistic primality test.

    A composite survives all rounds with probability at most 4**-rounds.
    Witnesses are drawn from the supplied randomness source, never derived
    from n, so repeated tests of the same n use fresh witnesses.

    Args:
        n: Candidate
        rounds: Number of random witnesses (default: settings.miller_rabin_rounds)
        rng: Randomness source for the witnesses

    Returns:
        True if n is probably prime, False if it is certainly composite
    """
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n & 1 == 0:
        return False

    if rounds is None:
        rounds = get_settings().miller_rabin_rounds
    rng = _rng(rng)

    n_minus_one = n - 1
    q, k = _split_even_part(n_minus_one)

    for _ in range(rounds):
        witness = sample_uniform(2, n_minus_one, rng)
        x = power_mod(witness, k, n)
        if x == 1 or x == n_minus_one:
            continue
        for _ in range(q - 1):
            x = (x * x) % n
            if x == n_minus_one:
                break
        else:
            return False
    return True


def generate_prime(
    total_bits: int,
    rng: Optional[random.Random] = None,
    max_probes: Optional[int] = None,
) -> int:
    """
    Generate a prime whose bit length is exactly total_bits.

    The top and bottom bits of a random candidate are forced to 1, then the
    candidate is probed upward in steps of 2. When probing runs past
    total_bits a fresh candidate is drawn.

    Args:
        total_bits: Bit length of the result (>= 8; byte alignment not required)
        rng: Randomness source
        max_probes: Upper bound on primality tests (default: settings.max_prime_probes)

    Raises:
        InvalidParameterError: If total_bits < 8
        SearchExhaustedError: If no prime is found within max_probes tests
    """
    if total_bits < MIN_PRIME_BITS:
        raise InvalidParameterError(f"total_bits must be >= {MIN_PRIME_BITS}, got {total_bits}")
    if max_probes is None:
        max_probes = get_settings().max_prime_probes
    rng = _rng(rng)

    top_bit = 1 << (total_bits - 1)
    probes = 0
    while probes < max_probes:
        candidate = rng.getrandbits(total_bits) | top_bit | 1
        while candidate.bit_length() == total_bits and probes < max_probes:
            probes += 1
            if is_prime(candidate, rng=rng):
                logger.debug("found %d-bit prime after %d probes", total_bits, probes)
                return candidate
            candidate += 2

    logger.warning("no %d-bit prime found in %d probes", total_bits, max_probes)
    raise SearchExhaustedError(f"no {total_bits}-bit prime found in {max_probes} probes")


def generate_prime_in_range(
    low: int,
    high: int,
    rng: Optional[random.Random] = None,
    max_probes: Optional[int] = None,
) -> int:
    """Generate a prime in [low, high) by testing random candidates."""
    if low < 2 or low >= high:
        raise InvalidParameterError(f"need 2 <= low < high, got [{low}, {high})")
    if max_probes is None:
        max_probes = get_settings().max_prime_probes
    rng = _rng(rng)

    for _ in range(max_probes):
        candidate = sample_uniform(low, high, rng)
        if candidate != 2:
            candidate |= 1
        if candidate < high and is_prime(candidate, rng=rng):
            return candidate

    logger.warning("no prime found in [%d, %d) after %d probes", low, high, max_probes)
    raise SearchExhaustedError(f"no prime found in [{low}, {high}) after {max_probes} probes")


# ============================================
# Generators
# ============================================

def find_group_generator(
    p: int,
    window: Optional[int] = None,
    max_candidates: Optional[int] = None,
) -> int:
    """
    Find an element of Z_p* whose first min(p-1, window) powers are distinct.

    This is a bounded heuristic, not a primitive-root proof: for p - 1 <= window
    the check is exhaustive, for larger p only the first `window` powers are
    compared. Candidates are tried in increasing order starting at 2.

    Args:
        p: Odd prime modulus
        window: Number of powers to compare (default: settings.generator_window)
        max_candidates: Upper bound on candidates tried

    Raises:
        InvalidParameterError: If p is 2 or not prime
        SearchExhaustedError: If every candidate collides
    """
    if p <= 2 or not is_prime(p):
        raise InvalidParameterError(f"p must be an odd prime, got {p}")

    settings = get_settings()
    if window is None:
        window = settings.generator_window
    if max_candidates is None:
        max_candidates = settings.max_generator_candidates

    limit = min(p - 1, window)
    for candidate in range(2, min(p, 2 + max_candidates)):
        seen = set()
        value = 1
        for _ in range(limit):
            value = (value * candidate) % p
            if value in seen:
                break
            seen.add(value)
        else:
            logger.debug("generator %d found for p=%d (window %d)", candidate, p, limit)
            return candidate

    logger.warning("no generator found for p=%d", p)
    raise SearchExhaustedError(f"no generator found for p={p}")


def find_subgroup_generator(p: int, q: int, max_candidates: Optional[int] = None) -> int:
    """
    Find an element of order q in Z_p*, where q is a prime dividing p - 1.

    Tries h = 2, 3, ... and returns the first h**((p-1)/q) mod p that is not 1.
    """
    if q <= 1 or (p - 1) % q != 0:
        raise InvalidParameterError(f"q={q} must be > 1 and divide p-1={p - 1}")
    if max_candidates is None:
        max_candidates = get_settings().max_generator_candidates

    cofactor = (p - 1) // q
    for h in range(2, min(p - 1, 2 + max_candidates)):
        g = power_mod(h, cofactor, p)
        if g != 1:
            return g

    logger.warning("no element of order %d found modulo %d", q, p)
    raise SearchExhaustedError(f"no element of order {q} found modulo {p}")
