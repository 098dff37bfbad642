"""Drive one generator output to a storable fixture."""

import inspect
import logging
from copy import deepcopy
from typing import Any, Awaitable, Optional, Union

from ..core.error import BaseError
from .error import GenerationFailure

LOGGER = logging.getLogger(__name__)


class IssuanceResult:
    """Either an issued fixture or the failure that prevented it."""

    def __init__(
        self,
        artifact: Any = None,
        failure: Optional[GenerationFailure] = None,
    ):
        """Initialize the result; use `ok` or `failed` instead."""
        self.artifact = artifact
        self.failure = failure

    @classmethod
    def ok(cls, artifact: Any) -> "IssuanceResult":
        """Build a successful result."""
        return cls(artifact=artifact)

    @classmethod
    def failed(cls, failure: GenerationFailure) -> "IssuanceResult":
        """Build a failed result."""
        return cls(failure=failure)

    @property
    def is_ok(self) -> bool:
        """Whether a fixture was produced."""
        return self.failure is None

    def unwrap(self) -> Any:
        """Return the fixture, re-raising the failure if there is one."""
        if self.failure is not None:
            raise self.failure
        return self.artifact

    def __repr__(self) -> str:
        """Return a human readable representation of the result."""
        if self.is_ok:
            return "<IssuanceResult(ok)>"
        return f"<IssuanceResult(failed={self.failure.roll_up!r})>"


async def issue_cloned(
    generator_output: Union[Any, Awaitable[Any]],
    generator_id: Optional[str] = None,
) -> IssuanceResult:
    """Await a possibly asynchronous generator output and clone it out."""
    try:
        artifact = (
            await generator_output
            if inspect.isawaitable(generator_output)
            else generator_output
        )
    except GenerationFailure as err:
        if err.generator_id is None:
            err.generator_id = generator_id
        return IssuanceResult.failed(err)
    except BaseError as err:
        failure = GenerationFailure(
            f"Generator {generator_id or '(unnamed)'} failed",
            generator_id=generator_id,
        )
        failure.__cause__ = err
        return IssuanceResult.failed(failure)
    return IssuanceResult.ok(deepcopy(artifact))
