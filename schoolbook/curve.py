"""
Elliptic Curve Group Engine.

Group arithmetic on a short Weierstrass curve y^2 = x^3 + a*x + b over the
prime field F_p. Points are immutable values of one of two variants:
- AffinePoint(x, y): a coordinate pair on the curve
- PointAtInfinity(): the additive identity (canonical instance INFINITY)

The curve object holds no state beyond its parameters; every operation is a
pure function of its arguments.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import InvalidCurveError, InvalidParameterError, PointNotOnCurveError
from .modular import is_prime, modular_inverse

logger = logging.getLogger(__name__)


# ============================================
# Points
# ============================================

class Point:
    """Common base of the two point variants."""

    __slots__ = ()

    @staticmethod
    def of(x: int, y: int) -> "AffinePoint":
        return AffinePoint(x, y)

    @property
    def is_infinity(self) -> bool:
        return isinstance(self, PointAtInfinity)


@dataclass(frozen=True)
class AffinePoint(Point):
    x: int
    y: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    def __repr__(self) -> str:
        return f"Point[x={self.x}, y={self.y}]"


@dataclass(frozen=True)
class PointAtInfinity(Point):

    def to_dict(self) -> dict:
        return {"infinity": True}

    def __repr__(self) -> str:
        return "Point[Infinity]"


INFINITY = PointAtInfinity()


def point_from_dict(d: dict) -> Point:
    if d.get("infinity"):
        return INFINITY
    return AffinePoint(int(d["x"]), int(d["y"]))


# ============================================
# Curve
# ============================================

class Curve:
    """
    Short Weierstrass curve y^2 = x^3 + a*x + b (mod p).

    The field modulus must be a prime greater than 3. The discriminant is not
    checked, so singular curves are accepted.
    """

    def __init__(self, a: int, b: Optional[int], p: int):
        if a is None or p is None or p <= 3 or not is_prime(p):
            raise InvalidCurveError(f"invalid curve parameters: a={a}, b={b}, p={p}")
        # TODO: reject singular curves once 4a^3 + 27b^2 = 0 (mod p) is checked here
        self.p = p
        self.a = a % p
        self.b = (b if b is not None else 0) % p

    def __eq__(self, other) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        return (self.a, self.b, self.p) == (other.a, other.b, other.p)

    def __hash__(self) -> int:
        return hash((self.a, self.b, self.p))

    def __repr__(self) -> str:
        return f"Curve(a={self.a}, b={self.b}, p={self.p})"

    def _rhs(self, x: int) -> int:
        return (x * x * x + self.a * x + self.b) % self.p

    def is_on_curve(self, point: Point) -> bool:
        if point.is_infinity:
            return True
        return (point.y * point.y) % self.p == self._rhs(point.x)

    def _require_on_curve(self, point: Point) -> None:
        if not self.is_on_curve(point):
            raise PointNotOnCurveError(f"{point!r} is not on {self!r}")

    def _reduce(self, point: Point) -> Point:
        if point.is_infinity:
            return INFINITY
        return AffinePoint(point.x % self.p, point.y % self.p)

    def negate(self, point: Point) -> Point:
        self._require_on_curve(point)
        if point.is_infinity:
            return INFINITY
        return AffinePoint(point.x % self.p, (-point.y) % self.p)

    def add(self, p1: Point, p2: Point) -> Point:
        """
        Group law P + Q.

        Args:
            p1: First operand (must satisfy the curve equation)
            p2: Second operand (must satisfy the curve equation)

        Returns:
            The sum, or INFINITY for mirrored operands

        Raises:
            PointNotOnCurveError: If either operand is off the curve
        """
        self._require_on_curve(p1)
        self._require_on_curve(p2)
        return self._add(self._reduce(p1), self._reduce(p2))

    def _add(self, p1: Point, p2: Point) -> Point:
        # Operands are on the curve with coordinates in [0, p).
        if p1.is_infinity:
            return p2
        if p2.is_infinity:
            return p1

        p = self.p
        # Mirrored points, including doubling a point with y = 0.
        if p1.x == p2.x and (p1.y + p2.y) % p == 0:
            return INFINITY

        if p1 == p2:
            numerator = 3 * p1.x * p1.x + self.a
            denominator = 2 * p1.y
        else:
            numerator = p2.y - p1.y
            denominator = p2.x - p1.x

        inverse = modular_inverse(denominator, p)
        if inverse is None:
            logger.warning("no slope inverse while adding %r and %r on %r", p1, p2, self)
            return INFINITY
        s = (numerator * inverse) % p

        x3 = (s * s - p1.x - p2.x) % p
        y3 = (s * (p1.x - x3) - p1.y) % p
        result = AffinePoint(x3, y3)

        # Safety net for a numerically unexpected result; not part of the group law.
        if not self.is_on_curve(result):
            logger.warning("sum of %r and %r left %r; returning infinity", p1, p2, self)
            return INFINITY
        return result

    def scalar_multiply(self, k: int, generator: Point) -> Point:
        """
        Compute k * G by double-and-add, most-significant bit first.

        Raises:
            InvalidParameterError: If k < 0
            PointNotOnCurveError: If G is off the curve
        """
        if k < 0:
            raise InvalidParameterError(f"scalar must be non-negative, got {k}")
        self._require_on_curve(generator)
        if k == 0 or generator.is_infinity:
            return INFINITY
        generator = self._reduce(generator)

        result = generator
        for i in range(k.bit_length() - 2, -1, -1):
            result = self._add(result, result)
            if (k >> i) & 1:
                result = self._add(result, generator)
        return result

    def enumerate_points(self) -> List[Point]:
        """
        List every point of the group by brute force: INFINITY first, then
        affine points by increasing x. Only practical for small fields.
        """
        p = self.p
        roots: Dict[int, Optional[int]] = {}
        points: List[Point] = [INFINITY]

        for x in range(p):
            r = self._rhs(x)
            if r == 0:
                points.append(AffinePoint(x, 0))
                continue
            if r not in roots:
                roots[r] = next((y for y in range(1, p) if (y * y) % p == r), None)
            y = roots[r]
            if y is not None:
                points.append(AffinePoint(x, y))
                points.append(AffinePoint(x, p - y))
        return points


# ============================================
# Domain parameters
# ============================================

@dataclass(frozen=True)
class ECDomainParameters:
    """Curve, base point G and the (prime) order n of G."""
    curve: Curve
    generator: AffinePoint
    order: int

    def __post_init__(self):
        if not self.curve.is_on_curve(self.generator):
            raise PointNotOnCurveError(f"generator {self.generator!r} is not on {self.curve!r}")
        if self.order < 2:
            raise InvalidParameterError(f"order must be >= 2, got {self.order}")


# y^2 = x^3 + 2x + 2 over F_17, the usual classroom curve; (5, 1) generates all 19 points.
TEXTBOOK_CURVE = ECDomainParameters(
    curve=Curve(2, 2, 17),
    generator=AffinePoint(5, 1),
    order=19,
)

# NIST P-192 (FIPS 186-3, D.1.2.1)
P192 = ECDomainParameters(
    curve=Curve(
        -3,
        0x64210519E59C80E70FA7E9AB72243049FEB8DEECC146B9B1,
        6277101735386680763835789423207666416083908700390324961279,
    ),
    generator=AffinePoint(
        0x188DA80EB03090F67CBF20EB43A18800F4FF0AFD82FF1012,
        0x07192B95FFC8DA78631011ED6B24CDD573F977A11E794811,
    ),
    order=6277101735386680763835789423176059013767194773182842284081,
)
