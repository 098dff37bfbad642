"""Fixture generation exceptions."""

from typing import Optional

from ..core.error import BaseError


class GenerationFailure(BaseError):
    """A fixture could not be signed, issued or verified."""

    def __init__(self, *args, generator_id: Optional[str] = None, **kwargs):
        """Initialize a GenerationFailure, optionally naming the generator."""
        super().__init__(*args, **kwargs)
        self.generator_id = generator_id
