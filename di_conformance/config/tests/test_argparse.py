from unittest import TestCase, mock

import pytest

from .. import argparse
from ..base import ArgsParseError


class TestArgParse(TestCase):
    def parse(self, argv):
        parser = argparse.create_argument_parser()
        get_settings = argparse.load_argument_groups(
            parser, *argparse.group.get_registered(argparse.CAT_RUN)
        )
        with mock.patch.dict("os.environ", {}, clear=True):
            return get_settings(parser.parse_args(argv))

    def test_groups(self):
        registered = list(argparse.group.get_registered(argparse.CAT_RUN))
        assert argparse.LoggingGroup in registered
        assert argparse.LoggingGroup.CATEGORIES == (argparse.CAT_RUN,)
        assert list(argparse.group.get_registered("other")) == []

    def test_defaults(self):
        settings = self.parse(["--implementations", "implementations.yml"])
        assert settings == {
            "implementations.file": "implementations.yml",
            "implementations.tags": ["eddsa-2022"],
            "implementations.reference_vendor": "Digital Bazaar",
            "suite.name": "eddsa-2022",
            "expected.crypto_suite": True,
            "expected.profile": "set-membership",
            "suite.verify": False,
        }

    def test_suite_settings(self):
        settings = self.parse(
            [
                "--implementations",
                "implementations.yml",
                "--tag",
                "eddsa-rdfc-2022,eddsa-jcs-2022",
                "--tag",
                "ecdsa-2019",
                "--expected-proof-type",
                "DataIntegrityProof",
                "--expected-proof-type",
                "Ed25519Signature2020",
                "--no-cryptosuite",
                "--legacy-type-match",
                "--optional-test",
                "dates",
                "--optional-test",
                "proof_sets",
                "--mandatory-pointer",
                "/issuer",
                "--selective-pointer",
                "/credentialSubject/driverLicense/dateOfBirth",
                "--verify",
                "--key-seed",
                "testseed000000000000000000000001",
            ]
        )
        assert settings["implementations.tags"] == [
            "eddsa-rdfc-2022",
            "eddsa-jcs-2022",
            "ecdsa-2019",
        ]
        assert settings["expected.proof_types"] == [
            "DataIntegrityProof",
            "Ed25519Signature2020",
        ]
        assert settings["expected.crypto_suite"] is False
        assert settings["expected.profile"] == "legacy-exact-match"
        assert settings["suite.optional_tests"] == ["dates", "proof_sets"]
        assert settings["suite.mandatory_pointers"] == ["/issuer"]
        assert settings["suite.selective_pointers"] == [
            "/credentialSubject/driverLicense/dateOfBirth"
        ]
        assert settings["suite.verify"] is True
        assert settings["key.seed"] == "testseed000000000000000000000001"

    def test_logging_settings(self):
        settings = self.parse(
            [
                "--implementations",
                "implementations.yml",
                "--log-config",
                "logging.ini",
                "--log-file",
                "run.log",
                "--log-level",
                "info",
                "--log-json",
            ]
        )
        assert settings["log.config"] == "logging.ini"
        assert settings["log.file"] == "run.log"
        assert settings["log.level"] == "info"
        assert settings["log.json"] is True

    def test_env_vars(self):
        parser = argparse.create_argument_parser()
        get_settings = argparse.load_argument_groups(
            parser, *argparse.group.get_registered(argparse.CAT_RUN)
        )
        with mock.patch.dict(
            "os.environ",
            {
                "DI_CONFORMANCE_IMPLEMENTATIONS": "vendors.yml",
                "DI_CONFORMANCE_KEY_SEED": "testseed000000000000000000000001",
            },
            clear=True,
        ):
            settings = get_settings(parser.parse_args([]))
        assert settings["implementations.file"] == "vendors.yml"
        assert settings["key.seed"] == "testseed000000000000000000000001"

    def test_missing_implementations(self):
        with mock.patch.object(
            argparse.ArgumentParser, "print_help"
        ) as mock_print_help:
            with pytest.raises(ArgsParseError):
                self.parse([])
            mock_print_help.assert_called_once()

    def test_unknown_optional_test(self):
        with pytest.raises(SystemExit):
            self.parse(["--implementations", "x.yml", "--optional-test", "jwt"])
