"""Exceptions raised by the account, fare and location services."""


class FareCompareError(Exception):
    """Base class for all service errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FareCompareError):
    """Malformed input caught before any store or upstream call."""


class ConflictError(FareCompareError):
    """Email or phone already registered."""


class NotFoundError(FareCompareError):
    """No account matches the given id or email."""


class AuthError(FareCompareError):
    """Password does not match the stored hash."""


class UpstreamError(FareCompareError):
    """Geocoding or routing service failed or answered with something unusable."""
