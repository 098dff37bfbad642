"""Entrypoint for running the conformance scenarios."""

import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

from configargparse import ArgumentParser

from ..config import argparse as arg
from ..config.base import BaseSettings
from ..config.logging import LoggingConfigurator
from ..config.settings import Settings
from ..conformance.implementations import ImplementationRegistry
from ..conformance.rules import ValidationProfile
from ..conformance.scenario import ScenarioReport
from ..conformance.suites import (
    check_data_integrity_proof_format,
    check_data_integrity_proof_verify_errors,
)
from ..core.error import BaseError
from ..vc_generator.cache import FixtureCache
from ..vc_generator.generate import generate_test_data
from ..wallet.secret import get_default_key
from . import PROG

LOGGER = logging.getLogger(__name__)


async def run_conformance(
    settings: BaseSettings,
    *,
    registry: Optional[ImplementationRegistry] = None,
    cache: Optional[FixtureCache] = None,
) -> List[ScenarioReport]:
    """Generate the fixtures, then run the issuer and verifier groups."""
    if registry is None:
        registry = ImplementationRegistry.from_file(settings["implementations.file"])
    tags = settings.get_list("implementations.tags", default=[arg.DEFAULT_TAG])
    reference_vendor = settings.get_str(
        "implementations.reference_vendor", default=arg.DEFAULT_REFERENCE_VENDOR
    )

    test_data = await generate_test_data(
        suite_name=settings.get_str("suite.name", default=arg.DEFAULT_SUITE_NAME),
        key=await get_default_key(settings=settings),
        mandatory_pointers=settings.get_list("suite.mandatory_pointers"),
        selective_pointers=settings.get_list("suite.selective_pointers"),
        verify=settings.get_bool("suite.verify", default=False),
        optional_tests=settings.get_list("suite.optional_tests"),
        cache=cache,
    )

    issuers, no_issuers = registry.filter_by_tag(tags, property="issuers")
    verifiers, no_verifiers = registry.filter_by_tag(tags, property="verifiers")
    groups = [
        check_data_integrity_proof_format(
            implemented=issuers,
            not_implemented=no_issuers,
            expected_proof_types=settings.get_list("expected.proof_types"),
            expected_crypto_suite=settings.get_bool(
                "expected.crypto_suite", default=True
            ),
            profile=ValidationProfile(
                settings.get_str("expected.profile", default="set-membership")
            ),
        ),
        check_data_integrity_proof_verify_errors(
            implemented=verifiers,
            not_implemented=no_verifiers,
            tag=tags[0] if tags else arg.DEFAULT_TAG,
            test_data=test_data,
            registry=registry if registry.get(reference_vendor) else None,
            reference_vendor=reference_vendor,
        ),
    ]
    return [await group.run() for group in groups]


def write_report(path: str, reports: Sequence[ScenarioReport]):
    """Write the interop matrices as JSON."""
    with open(path, "w", encoding="utf-8") as stream:
        json.dump([report.as_dict for report in reports], stream, indent=2)


def init_argument_parser(parser: ArgumentParser):
    """Initialize an argument parser with the module's arguments."""
    return arg.load_argument_groups(parser, *arg.group.get_registered(arg.CAT_RUN))


def execute(argv: Optional[Sequence[str]] = None):
    """Entrypoint."""
    parser = arg.create_argument_parser(prog=PROG)
    parser.prog += " run"
    get_settings = init_argument_parser(parser)
    args = parser.parse_args(argv)
    settings = Settings(get_settings(args))

    LoggingConfigurator.configure(
        log_config_path=settings.get("log.config"),
        log_level=settings.get("log.level"),
        log_file=settings.get("log.file"),
        log_json=settings.get_bool("log.json", default=False),
    )

    try:
        reports = asyncio.run(run_conformance(settings))
    except BaseError as err:
        LOGGER.error("Conformance run failed: %s", err.roll_up)
        sys.exit(2)

    for report in reports:
        print(report.render())
        print()
    if settings.get("report.file"):
        write_report(settings["report.file"], reports)
    if not all(report.passed for report in reports):
        sys.exit(1)


if __name__ == "__main__":
    execute()
