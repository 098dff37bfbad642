"""Registry of credential fixture generators.

Every generator receives a `GeneratorContext` holding a fresh clone of the
credential and returns a credential, or an awaitable of one. Malformed
variants are produced from a valid signature whose proof is then altered, so
a verifier sees exactly one defect per fixture.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import (
    Awaitable,
    Callable,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from ..config.base import ConfigurationError
from ..vc.data_integrity.suites import SelectiveSuite, StandardSuite
from .error import GenerationFailure

LOGGER = logging.getLogger(__name__)

DOMAIN = "domain.example"
CHALLENGE = "1235abcd6789"


class OptionalTestCategory(Enum):
    """Optional fixture groups an implementation may opt into."""

    DATES = "dates"
    DOMAIN_CHALLENGE = "domain_challenge"
    PROOF_SETS = "proof_sets"
    SELECTIVE_DISCLOSURE = "selective_disclosure"

    @classmethod
    def get(cls, name: Union[str, "OptionalTestCategory"]) -> "OptionalTestCategory":
        """Look a category up by member, value or member name."""
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            normalized = name.strip().lower().replace("-", "_")
            for category in cls:
                if normalized in (category.value, category.name.lower()):
                    return category
        raise ConfigurationError(f"Unknown optional test category: {name!r}")

    @classmethod
    def parse(
        cls, value: Union[None, Iterable, Mapping[str, bool]]
    ) -> List["OptionalTestCategory"]:
        """Normalize optional test flags to the enabled categories in enum order.

        Accepts `None`, an iterable of names or members, or a mapping of name
        to boolean flag.
        """
        if value is None:
            return []
        if isinstance(value, Mapping):
            flags = {cls.get(name): flag for name, flag in value.items()}
            enabled = {category for category, flag in flags.items() if flag}
        elif isinstance(value, (str, cls)):
            enabled = {cls.get(value)}
        else:
            enabled = {cls.get(name) for name in value}
        return [category for category in cls if category in enabled]


class GeneratorContext(NamedTuple):
    """Inputs handed to one generator invocation."""

    suite: StandardSuite
    selective_suite: Optional[SelectiveSuite]
    credential: dict
    selective_pointers: Optional[Sequence[str]] = None


Generator = Callable[[GeneratorContext], Union[dict, Awaitable[dict]]]


async def _signed_with(ctx: GeneratorContext, alter: Callable[[dict], None]) -> dict:
    signed = await ctx.suite.sign(ctx.credential)
    alter(signed["proof"])
    return signed


async def issued_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(ctx.credential)


def no_proof_vc(ctx: GeneratorContext) -> dict:
    credential = ctx.credential
    credential.pop("proof", None)
    return credential


async def no_proof_type_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, lambda proof: proof.pop("type"))


async def no_created_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(ctx.credential, proof={"created": None})


async def no_verification_method_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, lambda proof: proof.pop("verificationMethod"))


def _relative_verification_method(proof: dict):
    # the bare fragment is not an absolute URL
    proof["verificationMethod"] = proof["verificationMethod"].split("#")[-1]


async def invalid_verification_method_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, _relative_verification_method)


async def no_proof_purpose_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, lambda proof: proof.pop("proofPurpose"))


async def no_proof_value_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, lambda proof: proof.pop("proofValue"))


def _base64url_prefix(proof: dict):
    proof["proofValue"] = "u" + proof["proofValue"][1:]


async def invalid_proof_value_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(ctx, _base64url_prefix)


async def invalid_created_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(
        ctx, lambda proof: proof.update(created="2023-05-01 12:00:00")
    )


async def two_digit_year_created_vc(ctx: GeneratorContext) -> dict:
    return await _signed_with(
        ctx, lambda proof: proof.update(created="23-05-01T12:00:00Z")
    )


async def domain_challenge_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(
        ctx.credential, proof={"domain": DOMAIN, "challenge": CHALLENGE}
    )


async def challenge_without_domain_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(ctx.credential, proof={"challenge": CHALLENGE})


async def proof_set_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(await ctx.suite.sign(ctx.credential))


async def proof_chain_vc(ctx: GeneratorContext) -> dict:
    return await ctx.suite.sign(await ctx.suite.sign(ctx.credential), chain=True)


def _selective_suite(ctx: GeneratorContext) -> SelectiveSuite:
    if not isinstance(ctx.selective_suite, SelectiveSuite):
        raise GenerationFailure("Selective disclosure needs selective pointers")
    return ctx.selective_suite


async def selective_base_vc(ctx: GeneratorContext) -> dict:
    return await _selective_suite(ctx).sign(ctx.credential)


async def selective_derived_vc(ctx: GeneratorContext) -> dict:
    suite = _selective_suite(ctx)
    return await suite.derive(
        await suite.sign(ctx.credential), ctx.selective_pointers
    )


GENERATORS: Mapping[str, Generator] = MappingProxyType(
    {
        "issuedVc": issued_vc,
        "noProofVc": no_proof_vc,
        "noProofTypeVc": no_proof_type_vc,
        "noCreatedVc": no_created_vc,
        "noVerificationMethodVc": no_verification_method_vc,
        "invalidVerificationMethodVc": invalid_verification_method_vc,
        "noProofPurposeVc": no_proof_purpose_vc,
        "noProofValueVc": no_proof_value_vc,
        "invalidProofValueVc": invalid_proof_value_vc,
        "invalidCreatedVc": invalid_created_vc,
        "twoDigitYearCreatedVc": two_digit_year_created_vc,
        "domainChallengeVc": domain_challenge_vc,
        "challengeWithoutDomainVc": challenge_without_domain_vc,
        "proofSetVc": proof_set_vc,
        "proofChainVc": proof_chain_vc,
        "selectiveBaseVc": selective_base_vc,
        "selectiveDerivedVc": selective_derived_vc,
    }
)

BASE_GENERATORS: Tuple[str, ...] = (
    "issuedVc",
    "noProofVc",
    "noProofTypeVc",
    "noCreatedVc",
    "noVerificationMethodVc",
    "invalidVerificationMethodVc",
    "noProofPurposeVc",
    "noProofValueVc",
    "invalidProofValueVc",
)

OPTIONAL_GENERATORS: Mapping[OptionalTestCategory, Tuple[str, ...]] = (
    MappingProxyType(
        {
            OptionalTestCategory.DATES: ("invalidCreatedVc", "twoDigitYearCreatedVc"),
            OptionalTestCategory.DOMAIN_CHALLENGE: (
                "domainChallengeVc",
                "challengeWithoutDomainVc",
            ),
            OptionalTestCategory.PROOF_SETS: ("proofSetVc", "proofChainVc"),
            OptionalTestCategory.SELECTIVE_DISCLOSURE: (
                "selectiveBaseVc",
                "selectiveDerivedVc",
            ),
        }
    )
)


def get_generators(optional_tests=None) -> List[Tuple[str, Generator]]:
    """List the generators to run: the base ones, then each enabled category."""
    ids = list(BASE_GENERATORS)
    for category in OptionalTestCategory.parse(optional_tests):
        ids.extend(OPTIONAL_GENERATORS[category])
    return [(generator_id, GENERATORS[generator_id]) for generator_id in ids]
