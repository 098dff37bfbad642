import os
from tempfile import NamedTemporaryFile
from unittest import TestCase

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from ...config.base import ConfigurationError
from ...utils.http import NetworkFailure
from ..implementations import Endpoint, Implementation, ImplementationRegistry

IMPLEMENTATIONS_YAML = """
implementations:
  - name: Digital Bazaar
    issuers:
      - id: did:key:z6MkptjaoxjyKQFSqf1dHXswP6EayYhPQBYzprVCPmGBHz9S
        endpoint: https://issuer.example/credentials/issue
        tags: [eddsa-2022, Ed25519Signature2020]
        options:
          type: DataIntegrityProof
    verifiers:
      - endpoint: https://verifier.example/credentials/verify
        tags: [eddsa-2022]
  - name: Vendor B
    issuers:
      - endpoint: https://b.example/issue
        tags: [ecdsa-2019]
        headers:
          Authorization: Bearer abc
"""


class TestImplementationRegistry(TestCase):
    def setUp(self):
        with NamedTemporaryFile("w", suffix=".yml", delete=False) as stream:
            stream.write(IMPLEMENTATIONS_YAML)
        self.addCleanup(os.remove, stream.name)
        self.registry = ImplementationRegistry.from_file(stream.name)

    def test_from_file(self):
        assert len(self.registry) == 2
        assert [impl.name for impl in self.registry] == ["Digital Bazaar", "Vendor B"]
        reference = self.registry.get("Digital Bazaar")
        issuer = reference.issuers[0]
        assert issuer.tags == ["eddsa-2022", "Ed25519Signature2020"]
        assert issuer.settings["id"].startswith("did:key:")
        assert issuer.options == {"type": "DataIntegrityProof"}
        assert reference.verifiers[0].headers == {}
        assert self.registry.get("Vendor B").issuers[0].headers == {
            "Authorization": "Bearer abc"
        }
        assert self.registry.get("Vendor B").verifiers == []
        assert self.registry.get("Vendor C") is None

    def test_from_file_errors(self):
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_file("/nonexistent/implementations.yml")
        with NamedTemporaryFile("w", suffix=".yml", delete=False) as stream:
            stream.write("implementations: [\n")
        self.addCleanup(os.remove, stream.name)
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_file(stream.name)

    def test_from_dict_errors(self):
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_dict(["not", "a", "mapping"])
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_dict({"implementations": [{"issuers": []}]})
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_dict(
                {"implementations": [{"name": "X", "issuers": [{"tags": []}]}]}
            )
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_dict(
                {"implementations": [{"name": "X", "issuers": [{"endpoint": "x"}]}]}
            )
        with self.assertRaises(ConfigurationError):
            ImplementationRegistry.from_dict(
                {"implementations": [{"name": "X"}, {"name": "X"}]}
            )

    def test_filter(self):
        match, non_match = self.registry.filter(
            lambda implementation: implementation.name == "Digital Bazaar"
        )
        assert list(match) == ["Digital Bazaar"]
        assert list(non_match) == ["Vendor B"]
        assert isinstance(match["Digital Bazaar"], Implementation)

    def test_filter_by_tag(self):
        match, non_match = self.registry.filter_by_tag(["eddsa-2022"])
        assert list(match) == ["Digital Bazaar"]
        assert [ep.endpoint for ep in match["Digital Bazaar"].endpoints] == [
            "https://issuer.example/credentials/issue"
        ]
        assert non_match["Vendor B"].endpoints == []

        match, _ = self.registry.filter_by_tag(
            ["ecdsa-2019", "Ed25519Signature2020"]
        )
        assert list(match) == ["Digital Bazaar", "Vendor B"]

        match, non_match = self.registry.filter_by_tag(
            ["eddsa-2022"], property="verifiers"
        )
        assert list(match) == ["Digital Bazaar"]
        assert list(non_match) == ["Vendor B"]

    def test_filter_by_tag_restricted(self):
        subset, _ = self.registry.filter(lambda impl: impl.name == "Vendor B")
        match, non_match = self.registry.filter_by_tag(
            ["eddsa-2022"], implementations=subset
        )
        assert match == {}
        assert list(non_match) == ["Vendor B"]
        with self.assertRaises(ConfigurationError):
            self.registry.filter_by_tag(["eddsa-2022"], property="holders")


class TestEndpoint(AioHTTPTestCase):
    async def asyncSetUp(self):
        self.received = []
        await super().asyncSetUp()

    async def get_application(self):
        app = web.Application()
        app.add_routes(
            [
                web.post("/issue", self.issue_route),
                web.post("/issue-bare", self.issue_bare_route),
                web.post("/issue-list", self.issue_list_route),
                web.post("/fail", self.fail_route),
                web.post("/verify", self.verify_route),
            ]
        )
        return app

    async def issue_route(self, request):
        body = await request.json()
        self.received.append((dict(request.headers), body))
        credential = dict(body["credential"], proof={"type": "DataIntegrityProof"})
        return web.json_response({"verifiableCredential": credential}, status=201)

    async def issue_bare_route(self, request):
        body = await request.json()
        return web.json_response(dict(body["credential"], proof={}))

    async def issue_list_route(self, request):
        await request.read()
        return web.json_response([1, 2])

    async def fail_route(self, request):
        await request.read()
        return web.json_response({"message": "no"}, status=500)

    async def verify_route(self, request):
        self.received.append((dict(request.headers), await request.json()))
        return web.json_response({"errors": ["MALFORMED_PROOF_ERROR"]}, status=400)

    def endpoint(self, path, **kwargs):
        return Endpoint(endpoint=str(self.client.make_url(path)), **kwargs)

    async def test_issue(self):
        issuer = self.endpoint(
            "/issue", headers={"X-Vendor": "test"}, options={"mandatoryPointers": []}
        )
        issued = await issuer.issue({"issuer": "did:example:1"})
        assert issued == {"issuer": "did:example:1", "proof": {"type": "DataIntegrityProof"}}
        headers, body = self.received[0]
        assert headers["X-Vendor"] == "test"
        assert body == {
            "credential": {"issuer": "did:example:1"},
            "options": {"mandatoryPointers": []},
        }

    async def test_issue_bare_credential(self):
        issued = await self.endpoint("/issue-bare").issue({"issuer": "did:example:1"})
        assert issued == {"issuer": "did:example:1", "proof": {}}

    async def test_issue_failures(self):
        with self.assertRaises(NetworkFailure):
            await self.endpoint("/fail").issue({})
        with self.assertRaises(NetworkFailure):
            await self.endpoint("/issue-list").issue({})

    async def test_verify(self):
        response = await self.endpoint("/verify").verify(
            {"issuer": "did:example:1"}, {"checks": ["proof"]}
        )
        assert response.status == 400
        assert self.received[0][1] == {
            "verifiableCredential": {"issuer": "did:example:1"},
            "options": {"checks": ["proof"]},
        }

    async def test_serialize(self):
        endpoint = Endpoint.deserialize(
            {"endpoint": "https://a.example/issue", "tags": ["eddsa-2022"]}
        )
        assert endpoint.serialize() == {
            "endpoint": "https://a.example/issue",
            "tags": ["eddsa-2022"],
            "headers": {},
        }
        assert endpoint == Endpoint(
            endpoint="https://a.example/issue", tags=["eddsa-2022"]
        )
