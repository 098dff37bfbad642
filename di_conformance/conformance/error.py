"""Conformance check exceptions."""

from ..core.error import BaseError


class ValidationFailure(BaseError):
    """A conformance assertion does not hold."""
