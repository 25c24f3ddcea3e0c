"""Error taxonomy shared by the engine, the store and the service layer.

``ValidationError`` and ``ConflictError`` mean "could not save configuration";
``NotFoundError`` means "could not load pricing".  The API layer maps them to
422 / 409 / 404.
"""

from __future__ import annotations


class PricingError(Exception):
    """Base class for every error raised by the pricing engine."""

    code = "pricing_error"


class ValidationError(PricingError):
    """A rate, multiplier or time window is out of range, or a field is missing."""

    code = "validation_error"


class NotFoundError(PricingError):
    """Unknown hierarchy node, location or discount reference."""

    code = "not_found"


class ConflictError(PricingError):
    """The configuration contradicts itself, e.g. a vehicle type listed twice."""

    code = "conflict"
