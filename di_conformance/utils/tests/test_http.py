from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from ..http import NetworkFailure, post_json


class TestPostJson(AioHTTPTestCase):
    async def asyncSetUp(self):
        self.received = []
        await super().asyncSetUp()

    async def get_application(self):
        app = web.Application()
        app.add_routes(
            [
                web.post("/issue", self.issue_route),
                web.post("/reject", self.reject_route),
                web.post("/garbage", self.garbage_route),
            ]
        )
        return app

    async def issue_route(self, request):
        self.received.append(await request.json())
        return web.json_response({"verifiableCredential": {"id": "urn:uuid:1"}}, status=201)

    async def reject_route(self, request):
        await request.read()
        return web.Response(status=400, text="MALFORMED_PROOF_ERROR")

    async def garbage_route(self, request):
        await request.read()
        return web.Response(status=200, text="<html>oops</html>")

    async def test_post_ok(self):
        response = await post_json(
            self.client.make_url("/issue"), {"credential": {"issuer": "did:ex:1"}}
        )
        assert response.ok
        assert response.status == 201
        assert response.data == {"verifiableCredential": {"id": "urn:uuid:1"}}
        assert self.received == [{"credential": {"issuer": "did:ex:1"}}]

    async def test_post_client_error_status(self):
        response = await post_json(self.client.make_url("/reject"), {})
        assert not response.ok
        assert response.status == 400
        assert response.data == "MALFORMED_PROOF_ERROR"

    async def test_post_malformed_success(self):
        with self.assertRaises(NetworkFailure):
            await post_json(self.client.make_url("/garbage"), {})

    async def test_post_shared_session(self):
        response = await post_json(
            self.client.make_url("/issue"), {}, session=self.client.session
        )
        assert response.ok
        assert not self.client.session.closed

    async def test_post_unreachable(self):
        with self.assertRaises(NetworkFailure):
            await post_json("http://127.0.0.1:9/issue", {}, request_timeout=2)
