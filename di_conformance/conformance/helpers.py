"""Helpers shared by the scenario groups."""

import logging
from copy import deepcopy
from uuid import uuid4

from .error import ValidationFailure
from .implementations import Endpoint

LOGGER = logging.getLogger(__name__)

MALFORMED_STATUS = 400


async def create_initial_vc(*, issuer: Endpoint, vc: dict) -> dict:
    """Issue a fresh copy of a credential through a vendor issuer.

    The copy gets a new `urn:uuid` id and the issuer id of the endpoint
    settings when one is configured.
    """
    credential = deepcopy(vc)
    credential["id"] = f"urn:uuid:{uuid4()}"
    issuer_id = issuer.settings.get("id")
    if issuer_id:
        credential["issuer"] = issuer_id
    return await issuer.issue(credential)


async def verification_fail(*, credential: dict, verifier: Endpoint):
    """Expect a verifier to reject a credential as malformed.

    Raises:
        ValidationFailure: when the verifier answers anything but a 400

    """
    response = await verifier.verify(credential, {"checks": ["proof"]})
    if response.ok:
        raise ValidationFailure("Expected verifier to reject the credential.")
    if response.status != MALFORMED_STATUS:
        raise ValidationFailure(
            f"Expected status code {MALFORMED_STATUS}, got {response.status}."
        )
    LOGGER.debug("Verifier %s rejected the credential", verifier.endpoint)
