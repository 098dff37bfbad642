"""Vendor implementations and their tagged issuer and verifier endpoints."""

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml
from marshmallow import EXCLUDE, fields

from ..config.base import ConfigurationError
from ..messaging.models.base import BaseModel, BaseModelError, BaseModelSchema
from ..messaging.valid import ABSOLUTE_URL_EXAMPLE, ABSOLUTE_URL_VALIDATE
from ..utils.http import HttpResponse, NetworkFailure, post_json

LOGGER = logging.getLogger(__name__)

ENDPOINT_PROPERTIES = ("issuers", "verifiers")


class Endpoint(BaseModel):
    """A VC API issuer or verifier endpoint of a vendor."""

    class Meta:
        """Endpoint metadata."""

        schema_class = "EndpointSchema"

    def __init__(
        self,
        *,
        endpoint: str,
        id: Optional[str] = None,
        tags: Optional[List[str]] = None,
        headers: Optional[Dict[str, str]] = None,
        options: Optional[dict] = None,
    ):
        """Initialize an Endpoint instance."""
        super().__init__()
        self.id = id
        self.endpoint = endpoint
        self.tags = list(tags or [])
        self.headers = dict(headers or {})
        self.options = options

    @property
    def settings(self) -> dict:
        """Accessor for the endpoint settings."""
        return {"id": self.id, "tags": self.tags, "options": self.options}

    async def post(self, body: dict) -> HttpResponse:
        """Post a JSON body to the endpoint."""
        return await post_json(self.endpoint, body, headers=self.headers or None)

    async def issue(self, credential: dict) -> dict:
        """Issue a credential, returning the verifiable credential.

        Raises:
            NetworkFailure: on any non-2xx status or non-object body

        """
        body = {"credential": credential}
        if self.options is not None:
            body["options"] = self.options
        response = await self.post(body)
        if not response.ok:
            raise NetworkFailure(
                f"Issuer {self.endpoint} answered with status {response.status}"
            )
        data = response.data
        if isinstance(data, dict):
            data = data.get("verifiableCredential", data)
        if not isinstance(data, dict):
            raise NetworkFailure(
                f"Issuer {self.endpoint} did not return a verifiable credential"
            )
        return data

    async def verify(self, verifiable_credential: dict, options=None) -> HttpResponse:
        """Post a verifiable credential for verification."""
        return await self.post(
            {"verifiableCredential": verifiable_credential, "options": options or {}}
        )

    def __eq__(self, other) -> bool:
        """Compare endpoints by their settings and address."""
        if type(other) is not type(self):
            return False
        return self.serialize() == other.serialize()


class EndpointSchema(BaseModelSchema):
    """Endpoint schema."""

    class Meta:
        """EndpointSchema metadata."""

        model_class = Endpoint
        unknown = EXCLUDE

    id = fields.Str(required=False, metadata={"description": "Endpoint identifier"})
    endpoint = fields.Str(
        required=True,
        validate=ABSOLUTE_URL_VALIDATE,
        metadata={"description": "VC API route", "example": ABSOLUTE_URL_EXAMPLE},
    )
    tags = fields.List(fields.Str(), required=False, load_default=list)
    headers = fields.Dict(
        keys=fields.Str(), values=fields.Str(), required=False, load_default=dict
    )
    options = fields.Dict(required=False)


class Implementation:
    """A vendor with its issuer and verifier endpoints."""

    def __init__(
        self,
        name: str,
        issuers: Optional[List[Endpoint]] = None,
        verifiers: Optional[List[Endpoint]] = None,
    ):
        """Initialize an Implementation."""
        self.name = name
        self.issuers = list(issuers or [])
        self.verifiers = list(verifiers or [])

    @classmethod
    def deserialize(cls, entry: Mapping) -> "Implementation":
        """Build an implementation from its registry entry."""
        if not isinstance(entry, Mapping) or not entry.get("name"):
            raise ConfigurationError(f"Implementation entry without a name: {entry!r}")
        name = entry["name"]
        endpoints = {}
        for prop in ENDPOINT_PROPERTIES:
            items = entry.get(prop) or []
            if not isinstance(items, list):
                raise ConfigurationError(f"Expected {name} {prop} to be a list.")
            try:
                endpoints[prop] = [Endpoint.deserialize(item) for item in items]
            except BaseModelError as err:
                raise ConfigurationError(
                    f"Invalid {prop} endpoint for {name}"
                ) from err
        return cls(name, **endpoints)

    def __repr__(self) -> str:
        """Return a human readable representation of the implementation."""
        return (
            f"<Implementation({self.name!r}, issuers={len(self.issuers)}, "
            f"verifiers={len(self.verifiers)})>"
        )


class VendorEndpoints:
    """The endpoints of one vendor selected for a scenario group.

    `endpoints` is `None` when the vendor has no endpoint list at all, which
    is a configuration error for the groups using it.
    """

    def __init__(self, name: str, endpoints: Optional[List[Endpoint]]):
        """Initialize the selection."""
        self.name = name
        self.endpoints = endpoints

    def __repr__(self) -> str:
        """Return a human readable representation of the selection."""
        return f"<VendorEndpoints({self.name!r}, {self.endpoints!r})>"


Match = Dict[str, VendorEndpoints]


class ImplementationRegistry:
    """Ordered collection of vendor implementations."""

    def __init__(self, implementations: Iterable[Implementation] = ()):
        """Initialize the registry."""
        self._implementations: Dict[str, Implementation] = {}
        for implementation in implementations:
            if implementation.name in self._implementations:
                raise ConfigurationError(
                    f"Duplicate implementation: {implementation.name}"
                )
            self._implementations[implementation.name] = implementation

    @classmethod
    def from_dict(cls, document: Mapping) -> "ImplementationRegistry":
        """Load the registry from a parsed document."""
        if not isinstance(document, Mapping):
            raise ConfigurationError("Implementations document must be a mapping")
        entries = document.get("implementations") or []
        if not isinstance(entries, list):
            raise ConfigurationError("Expected implementations to be a list.")
        return cls(Implementation.deserialize(entry) for entry in entries)

    @classmethod
    def from_file(cls, path: str) -> "ImplementationRegistry":
        """Load the registry from a YAML or JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as stream:
                document = yaml.safe_load(stream)
        except (OSError, yaml.YAMLError) as err:
            raise ConfigurationError(
                f"Cannot load implementations from {path}"
            ) from err
        registry = cls.from_dict(document or {})
        LOGGER.debug("Loaded %d implementations from %s", len(registry), path)
        return registry

    def get(self, name: str) -> Optional[Implementation]:
        """Get an implementation by vendor name."""
        return self._implementations.get(name)

    def filter(
        self, predicate: Callable[[Implementation], bool]
    ) -> Tuple[Dict[str, Implementation], Dict[str, Implementation]]:
        """Split the implementations by a predicate."""
        match, non_match = {}, {}
        for name, implementation in self._implementations.items():
            (match if predicate(implementation) else non_match)[name] = implementation
        return match, non_match

    def filter_by_tag(
        self,
        tags: Iterable[str],
        property: str = "issuers",
        implementations: Optional[Mapping[str, Implementation]] = None,
    ) -> Tuple[Match, Match]:
        """Select the endpoints carrying any of the tags.

        Args:
            tags: the endpoint tags to match
            property: which endpoints to look at, `issuers` or `verifiers`
            implementations: the candidates, every implementation when omitted

        Returns:
            A tuple of matching and non-matching vendors, each mapping the
            vendor name to its `VendorEndpoints`

        """
        if property not in ENDPOINT_PROPERTIES:
            raise ConfigurationError(f"Unknown endpoint property: {property}")
        tags = set(tags)
        if implementations is None:
            implementations = self._implementations
        match, non_match = {}, {}
        for name, implementation in implementations.items():
            endpoints = [
                endpoint
                for endpoint in getattr(implementation, property)
                if tags.intersection(endpoint.tags)
            ]
            if endpoints:
                match[name] = VendorEndpoints(name, endpoints)
            else:
                non_match[name] = VendorEndpoints(name, [])
        return match, non_match

    def __iter__(self):
        """Iterate the implementations in registration order."""
        return iter(self._implementations.values())

    def __len__(self) -> int:
        """Count the implementations."""
        return len(self._implementations)
