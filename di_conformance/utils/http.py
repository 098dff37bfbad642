"""HTTP utility methods."""

import asyncio
import json as jsonlib
import logging
from typing import Any, NamedTuple, Optional

from aiohttp import BaseConnector, ClientError, ClientResponse, ClientSession, ClientTimeout

from ..core.error import BaseError

LOGGER = logging.getLogger(__name__)


class NetworkFailure(BaseError):
    """Error raised when a vendor endpoint is unreachable or answers garbage."""


class HttpResponse(NamedTuple):
    """Status and decoded body of an endpoint response."""

    status: int
    data: Any

    @property
    def ok(self) -> bool:
        """Whether the response carries a 2xx status."""
        return 200 <= self.status < 300


async def _read_body(response: ClientResponse) -> Any:
    text = await response.text()
    if not text:
        return None
    try:
        return jsonlib.loads(text)
    except ValueError as err:
        if 200 <= response.status < 300:
            raise NetworkFailure(
                f"Malformed response from {response.url}: expected JSON body"
            ) from err
        return text


async def post_json(
    url: str,
    body: Any,
    *,
    headers: Optional[dict] = None,
    request_timeout: float = 30.0,
    connector: Optional[BaseConnector] = None,
    session: Optional[ClientSession] = None,
) -> HttpResponse:
    """Post a JSON body to an endpoint, once.

    Non-2xx statuses are returned to the caller, only transport problems and
    undecodable success bodies raise.

    Args:
        url: the address to post to
        body: the JSON-compatible request body
        headers: an optional dict of headers to send
        request_timeout: the HTTP request timeout, in seconds
        connector: an optional existing BaseConnector
        session: a shared ClientSession, left open after the call

    """
    owned = session is None
    if owned:
        session = ClientSession(
            connector=connector, connector_owner=(not connector), trust_env=True
        )
    try:
        LOGGER.debug("POST %s", url)
        async with session.post(
            url,
            json=body,
            headers=headers,
            timeout=ClientTimeout(total=request_timeout),
        ) as response:
            data = await _read_body(response)
            LOGGER.debug("POST %s -> %s", url, response.status)
            return HttpResponse(response.status, data)
    except (ClientError, asyncio.TimeoutError) as err:
        raise NetworkFailure(f"Request to {url} failed") from err
    finally:
        if owned:
            await session.close()
