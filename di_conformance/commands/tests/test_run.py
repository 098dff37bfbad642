import json
from tempfile import NamedTemporaryFile
from unittest import TestCase, mock

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from ...config.base import ArgsParseError, ConfigurationError
from ...config.settings import Settings
from ...conformance.implementations import ImplementationRegistry
from ...vc_generator.cache import FixtureCache
from .. import run as test_module

ISSUER_ID = "did:key:z6MkgKA7yrw5kYSiDuQFcye4bMaJpcfHFry3Bx45pdWh3s8i"

PROOF = {
    "type": "DataIntegrityProof",
    "cryptosuite": "eddsa-rdfc-2022",
    "created": "2023-05-01T12:00:00Z",
    "verificationMethod": f"{ISSUER_ID}#z6MkgKA7yrw5kYSiDuQFcye4bMaJpcfHFry3Bx45pdWh3s8i",
    "proofPurpose": "assertionMethod",
    "proofValue": "z2NEpo7TZRRrLZSi2U",
}


class TestRunConformance(AioHTTPTestCase):
    async def asyncSetUp(self):
        self.issued = []
        await super().asyncSetUp()

    async def get_application(self):
        app = web.Application()
        app.add_routes(
            [
                web.post("/db/issue", self.db_issue),
                web.post("/db/verify", self.db_verify),
                web.post("/b/issue", self.b_issue),
                web.post("/b/verify", self.b_verify),
            ]
        )
        return app

    async def db_issue(self, request):
        credential = (await request.json())["credential"]
        self.issued.append(credential)
        return web.json_response({"verifiableCredential": dict(credential, proof=PROOF)})

    async def db_verify(self, request):
        await request.json()
        return web.json_response({"errors": ["MALFORMED_PROOF_ERROR"]}, status=400)

    async def b_issue(self, request):
        credential = (await request.json())["credential"]
        return web.json_response(
            {"verifiableCredential": dict(credential, proof=dict(PROOF, proofValue=1))}
        )

    async def b_verify(self, request):
        await request.json()
        return web.json_response({"verified": True})

    def registry(self):
        def endpoint(path, **kwargs):
            return dict(kwargs, endpoint=str(self.client.make_url(path)))

        return ImplementationRegistry.from_dict(
            {
                "implementations": [
                    {
                        "name": "Digital Bazaar",
                        "issuers": [endpoint("/db/issue", id=ISSUER_ID, tags=["eddsa-2022"])],
                        "verifiers": [endpoint("/db/verify", tags=["eddsa-2022"])],
                    },
                    {
                        "name": "Vendor B",
                        "issuers": [endpoint("/b/issue", tags=["eddsa-2022"])],
                        "verifiers": [endpoint("/b/verify", tags=["eddsa-2022"])],
                    },
                    {
                        "name": "Vendor C",
                        "issuers": [endpoint("/c/issue", tags=["ecdsa-2019"])],
                    },
                ]
            }
        )

    async def test_run_conformance(self):
        settings = Settings(
            {"implementations.tags": ["eddsa-2022"], "suite.optional_tests": ["dates"]}
        )
        issuer_report, verifier_report = await test_module.run_conformance(
            settings, registry=self.registry(), cache=FixtureCache()
        )

        assert issuer_report.not_implemented == ["Vendor C"]
        assert issuer_report.columns() == ["Digital Bazaar", "Vendor B"]
        assert not any(cell.column == "Digital Bazaar" for cell in issuer_report.failures())
        assert {cell.row for cell in issuer_report.failures()} == {
            '"proof.proofValue" field MUST exist and be a string.',
            'The "proof.proofValue" field MUST be a multibase-encoded '
            "base58-btc encoded value.",
        }

        assert verifier_report.not_implemented == ["Vendor C"]
        assert len(verifier_report.rows()) == 9
        assert not any(
            cell.column == "Digital Bazaar" for cell in verifier_report.failures()
        )
        assert {cell.column for cell in verifier_report.failures()} == {"Vendor B"}
        # one issuance for the issuer group, one per verifier column
        assert len(self.issued) == 3
        assert all(credential["issuer"] == ISSUER_ID for credential in self.issued)

    async def test_run_conformance_without_reference_vendor(self):
        settings = Settings({"implementations.reference_vendor": "Vendor Z"})
        _, verifier_report = await test_module.run_conformance(
            settings, registry=self.registry(), cache=FixtureCache()
        )
        assert len(verifier_report.rows()) == 7
        # the valid credential comes from the generated fixtures
        assert len(self.issued) == 1

    async def test_run_conformance_missing_file(self):
        settings = Settings({"implementations.file": "/nonexistent.yml"})
        with self.assertRaises(ConfigurationError):
            await test_module.run_conformance(settings, cache=FixtureCache())


class TestExecute(TestCase):
    def reports(self, passed=True):
        report = mock.MagicMock(passed=passed, as_dict={"title": "Data Integrity"})
        report.render.return_value = "matrix"
        return [report]

    def execute(self, argv, reports):
        with mock.patch.object(
            test_module, "LoggingConfigurator", mock.MagicMock()
        ) as mock_logging, mock.patch.object(
            test_module, "run_conformance", mock.MagicMock()
        ) as mock_run, mock.patch.object(
            test_module, "asyncio", mock.MagicMock()
        ) as mock_asyncio, mock.patch(
            "builtins.print", mock.MagicMock()
        ):
            mock_asyncio.run.return_value = reports
            test_module.execute(argv)
        return mock_logging, mock_run

    def test_execute_passed(self):
        mock_logging, mock_run = self.execute(
            ["--implementations", "implementations.yml", "--log-level", "debug"],
            self.reports(),
        )
        mock_logging.configure.assert_called_once_with(
            log_config_path=None, log_level="debug", log_file=None, log_json=False
        )
        settings = mock_run.call_args[0][0]
        assert settings["implementations.file"] == "implementations.yml"
        assert settings["implementations.tags"] == ["eddsa-2022"]

    def test_execute_failed(self):
        with self.assertRaises(SystemExit) as ctx:
            self.execute(["--implementations", "x.yml"], self.reports(passed=False))
        assert ctx.exception.code == 1

    def test_execute_error(self):
        with mock.patch.object(
            test_module, "LoggingConfigurator", mock.MagicMock()
        ), mock.patch.object(
            test_module,
            "run_conformance",
            mock.MagicMock(side_effect=ConfigurationError("Cannot load")),
        ), mock.patch.object(test_module, "asyncio", mock.MagicMock()) as mock_asyncio:
            mock_asyncio.run.side_effect = lambda coro: coro
            with self.assertRaises(SystemExit) as ctx:
                test_module.execute(["--implementations", "x.yml"])
        assert ctx.exception.code == 2

    def test_execute_missing_implementations(self):
        with mock.patch.object(
            test_module.ArgumentParser, "print_help", mock.MagicMock()
        ):
            with self.assertRaises(ArgsParseError):
                test_module.execute([])

    def test_execute_report_file(self):
        with NamedTemporaryFile("r", suffix=".json") as stream:
            self.execute(
                ["--implementations", "x.yml", "--report-file", stream.name],
                self.reports(),
            )
            assert json.load(stream) == [{"title": "Data Integrity"}]
