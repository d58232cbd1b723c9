"""
Exception types raised by the number-theoretic engine and the protocols built on it.
"""


class SchoolbookError(Exception):
    """Base class for every error raised by this package."""
    pass


class InvalidParameterError(SchoolbookError, ValueError):
    """
    Raised when an argument violates a precondition at the call boundary.

    Examples: a non-positive modulus, a negative exponent, a bit length that
    is too small, or a plaintext that does not fit under the modulus.
    """
    pass


class InvalidCurveError(InvalidParameterError):
    """Raised when curve parameters are rejected (non-prime or too small field)."""
    pass


class PointNotOnCurveError(InvalidParameterError):
    """Raised when a group operation receives a point that fails the curve equation."""
    pass


class SearchExhaustedError(SchoolbookError):
    """
    Raised when a bounded search loop (prime probing, generator search)
    runs out of attempts without finding a result.
    """
    pass
