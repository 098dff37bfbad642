"""Data Integrity scenario groups run against vendor endpoints."""

import logging
from copy import deepcopy
from typing import Mapping, Optional, Sequence, Tuple

from ..config.base import ConfigurationError
from ..vc_generator.data import VALID_VC
from ..vc_generator.generate import TestData
from .error import ValidationFailure
from .helpers import create_initial_vc, verification_fail
from .implementations import Endpoint, ImplementationRegistry, VendorEndpoints
from .rules import DEFAULT_PROOF_TYPES, ValidationProfile, build_format_rules
from .scenario import ScenarioCase, ScenarioGroup

LOGGER = logging.getLogger(__name__)

REFERENCE_VENDOR = "Digital Bazaar"

MISSING_PROOF_TITLE = (
    'If the "proof" field is missing, a MALFORMED error MUST be returned.'
)

MALFORMED_FIXTURES: Tuple[Tuple[str, str], ...] = (
    (
        "noProofTypeVc",
        'If the "proof.type" field is missing, a MALFORMED error MUST be returned.',
    ),
    (
        "noVerificationMethodVc",
        'If the "proof.verificationMethod" field is missing, a MALFORMED error '
        "MUST be returned.",
    ),
    (
        "invalidVerificationMethodVc",
        'If the "proof.verificationMethod" field is not a URL, a MALFORMED error '
        "MUST be returned.",
    ),
    (
        "noProofPurposeVc",
        'If the "proof.proofPurpose" field is missing, a MALFORMED error '
        "MUST be returned.",
    ),
    (
        "noProofValueVc",
        'If the "proof.proofValue" field is missing, a MALFORMED error '
        "MUST be returned.",
    ),
    (
        "invalidProofValueVc",
        'If the "proof.proofValue" field is not a multibase-encoded base58-btc '
        "value, a MALFORMED error MUST be returned.",
    ),
    (
        "invalidCreatedVc",
        'If the "proof.created" field is not an XMLSCHEMA-11 datetime, '
        "a MALFORMED error MUST be returned.",
    ),
    (
        "twoDigitYearCreatedVc",
        'If the "proof.created" field has a two digit year, a MALFORMED error '
        "MUST be returned.",
    ),
)


def _require_endpoints(name: str, vendor: VendorEndpoints):
    if vendor.endpoints is None:
        raise ConfigurationError(f"Expected {name} to have endpoints.")
    return vendor.endpoints


def check_data_integrity_proof_format(
    *,
    implemented: Mapping[str, VendorEndpoints],
    not_implemented: Mapping[str, VendorEndpoints],
    expected_proof_types: Optional[Sequence[str]] = None,
    expected_crypto_suite: bool = True,
    profile: ValidationProfile = ValidationProfile.SET_MEMBERSHIP,
    vc: Optional[dict] = None,
) -> ScenarioGroup:
    """Build the group validating the proofs of vendor-issued credentials.

    Each vendor issues the canonical credential through its first endpoint,
    and every format rule becomes one test case of the vendor's column.

    Raises:
        ConfigurationError: if a vendor has no endpoint list

    """
    group = ScenarioGroup(
        "Data Integrity (issuer)",
        "Issuer",
        implemented=list(implemented),
        not_implemented=list(not_implemented),
    )
    rules = build_format_rules(
        expected_proof_types or DEFAULT_PROOF_TYPES, expected_crypto_suite, profile
    )
    cases = [ScenarioCase(rule.title, rule.check) for rule in rules]
    for name, vendor in implemented.items():
        endpoints = _require_endpoints(name, vendor)
        group.add_vendor(name, _issue_setup(name, endpoints, vc or VALID_VC), cases)
    return group


def _issue_setup(name: str, endpoints: Sequence[Endpoint], vc: dict):
    async def setup() -> dict:
        if not endpoints:
            raise ValidationFailure(f"Expected {name} to have an issuer.")
        return await create_initial_vc(issuer=endpoints[0], vc=vc)

    return setup


def _reference_issuer(
    registry: ImplementationRegistry, vendor: str, tag: str
) -> Endpoint:
    match, _ = registry.filter(lambda implementation: implementation.name == vendor)
    matching_issuer, _ = registry.filter_by_tag(
        [tag], property="issuers", implementations=match
    )
    if vendor not in matching_issuer:
        raise ConfigurationError(f"Expected {vendor} to have an issuer tagged {tag}.")
    return matching_issuer[vendor].endpoints[0]


def check_data_integrity_proof_verify_errors(
    *,
    implemented: Mapping[str, VendorEndpoints],
    not_implemented: Mapping[str, VendorEndpoints],
    tag: str = "eddsa-2022",
    issuer: Optional[Endpoint] = None,
    test_data: Optional[TestData] = None,
    registry: Optional[ImplementationRegistry] = None,
    reference_vendor: str = REFERENCE_VENDOR,
    vc: Optional[dict] = None,
) -> ScenarioGroup:
    """Build the group checking that verifiers reject malformed proofs.

    The valid credential is issued by `issuer`, or by the reference vendor's
    issuer tagged `tag` in `registry`. Without either, `issuedVc` is taken
    from `test_data`, whose malformed fixtures also become test cases.

    Raises:
        ConfigurationError: if a vendor has no endpoint list, or no source of
            a valid credential is given

    """
    if test_data is None and issuer is None and registry is None:
        raise ConfigurationError(
            "Expected test data, a reference issuer or an implementations registry."
        )
    group = ScenarioGroup(
        "Data Integrity (verifier)",
        "Verifier",
        implemented=list(implemented),
        not_implemented=list(not_implemented),
    )

    async def issued_vc() -> dict:
        if issuer is None and registry is None:
            return test_data.clone("issuedVc")
        reference = issuer or _reference_issuer(registry, reference_vendor, tag)
        return await create_initial_vc(issuer=reference, vc=vc or VALID_VC)

    async def missing_proof(state):
        verifier, credential = state
        credential = deepcopy(credential)
        credential.pop("proof", None)
        await verification_fail(credential=credential, verifier=verifier)

    cases = [ScenarioCase(MISSING_PROOF_TITLE, missing_proof)]
    if test_data is not None:
        available = set(test_data.ids())
        cases.extend(
            ScenarioCase(title, _malformed_case(test_data, generator_id))
            for generator_id, title in MALFORMED_FIXTURES
            if generator_id in available
        )

    for name, vendor in implemented.items():
        endpoints = _require_endpoints(name, vendor)
        group.add_vendor(name, _verify_setup(name, endpoints, issued_vc), cases)
    return group


def _verify_setup(name: str, endpoints: Sequence[Endpoint], issued_vc):
    async def setup():
        if not endpoints:
            raise ValidationFailure(f"Expected {name} to have a verifier.")
        return endpoints[0], await issued_vc()

    return setup


def _malformed_case(test_data: TestData, generator_id: str):
    async def case(state):
        verifier, _ = state
        await verification_fail(
            credential=test_data.clone(generator_id), verifier=verifier
        )

    return case
