"""Schoolbook number theory, elliptic curves and the public-key protocols built on them."""

from .errors import (
    SchoolbookError,
    InvalidParameterError,
    InvalidCurveError,
    PointNotOnCurveError,
    SearchExhaustedError,
)

from .config import (
    Settings,
    get_settings,
    reset_settings,
    configure_logging,
)

from .modular import (
    gcd,
    modular_inverse,
    power_mod,
    sample_uniform,
    is_prime,
    generate_prime,
    generate_prime_in_range,
    find_group_generator,
    find_subgroup_generator,
)

from .curve import (
    Point,
    AffinePoint,
    PointAtInfinity,
    INFINITY,
    point_from_dict,
    Curve,
    ECDomainParameters,
    TEXTBOOK_CURVE,
    P192,
)

from . import dh, dsa, ecdh, ecdsa, elgamal, mac, rsa

__all__ = [
    # Errors
    "SchoolbookError",
    "InvalidParameterError",
    "InvalidCurveError",
    "PointNotOnCurveError",
    "SearchExhaustedError",
    # Settings
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    # Modular arithmetic
    "gcd",
    "modular_inverse",
    "power_mod",
    "sample_uniform",
    "is_prime",
    "generate_prime",
    "generate_prime_in_range",
    "find_group_generator",
    "find_subgroup_generator",
    # Elliptic curves
    "Point",
    "AffinePoint",
    "PointAtInfinity",
    "INFINITY",
    "point_from_dict",
    "Curve",
    "ECDomainParameters",
    "TEXTBOOK_CURVE",
    "P192",
    # Protocols
    "dh",
    "dsa",
    "ecdh",
    "ecdsa",
    "elgamal",
    "mac",
    "rsa",
]
