"""Field rules applied to the proofs of vendor-issued credentials.

Rules are stateless: `check` raises `ValidationFailure` with a reason specific
to the rule, and `evaluate` runs each rule in isolation so one failing
assertion never hides another.
"""

import warnings
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Sequence

from marshmallow import ValidationError

from ..messaging.valid import (
    ABSOLUTE_URL_VALIDATE,
    MULTIBASE_BASE58_BTC_VALIDATE,
    XMLSCHEMA_DATETIME_VALIDATE,
    ProofType,
)
from .error import ValidationFailure

DEFAULT_PROOF_TYPES = ("DataIntegrityProof",)


class ValidationProfile(Enum):
    """How `proof.type` is matched against the expected proof types."""

    SET_MEMBERSHIP = "set-membership"
    LEGACY_EXACT_MATCH = "legacy-exact-match"


class RuleResult(NamedTuple):
    """Outcome of one rule against one document."""

    title: str
    passed: bool
    reason: Optional[str] = None


def get_proofs(document) -> list:
    """Return the proofs of a document as a list."""
    proof = document.get("proof") if isinstance(document, dict) else None
    return proof if isinstance(proof, list) else [proof]


class ProofRule:
    """Base class for a single proof conformance assertion."""

    title: str = None

    def check(self, document: dict):
        """Check a document, raising `ValidationFailure` if it does not conform."""
        for proof in get_proofs(document):
            if not isinstance(proof, dict):
                raise ValidationFailure("Expected proof to be an object.")
            self.check_proof(proof)

    def check_proof(self, proof: dict):
        """Check one proof object."""

    def __repr__(self) -> str:
        """Return a human readable representation of the rule."""
        return f"<{self.__class__.__name__}({self.title!r})>"


def _require(proof: dict, name: str):
    if proof.get(name) is None:
        raise ValidationFailure(f'Expected "proof.{name}" to exist.')
    return proof[name]


def _require_string(proof: dict, name: str, label: Optional[str] = None) -> str:
    value = _require(proof, name)
    if not isinstance(value, str):
        raise ValidationFailure(f'Expected "{label or "proof." + name}" to be a string.')
    return value


class ProofExistsRule(ProofRule):
    title = '"proof" field MUST exist at top-level of data object.'

    def check(self, document: dict):
        if not isinstance(document, dict):
            raise ValidationFailure("Expected data.")
        if document.get("proof") is None:
            raise ValidationFailure("Expected proof to be top-level.")
        if not isinstance(document["proof"], (dict, list)):
            raise ValidationFailure(
                "Expected proof to be either an object or an array."
            )


class ProofIdRule(ProofRule):
    title = 'if "proof.id" field exists, it MUST be a valid URL.'

    def check_proof(self, proof: dict):
        if proof.get("id") is None:
            return
        try:
            ABSOLUTE_URL_VALIDATE(proof["id"])
        except ValidationError as err:
            raise ValidationFailure('Expected "proof.id" to be a URL.') from err


class ProofTypeRule(ProofRule):
    title = '"proof.type" field MUST exist and be a string.'

    def check_proof(self, proof: dict):
        _require_string(proof, "type")


class ProofTypeMatchRule(ProofRule):
    """Match `proof.type` against the expected proof types.

    The legacy profile compares against the comma-joined expected types and
    only accepts a single expected type in practice.
    """

    def __init__(
        self,
        expected_proof_types: Sequence[str] = DEFAULT_PROOF_TYPES,
        profile: ValidationProfile = ValidationProfile.SET_MEMBERSHIP,
    ):
        """Initialize the rule."""
        self.expected_proof_types = list(expected_proof_types)
        self.joined = ",".join(self.expected_proof_types)
        self.profile = ValidationProfile(profile)
        self.title = f'"proof.type" field MUST be "{self.joined}".'
        self._validate = ProofType(self.expected_proof_types)
        if self.profile is ValidationProfile.LEGACY_EXACT_MATCH:
            warnings.warn(
                "Exact proof type matching is deprecated, "
                "use ValidationProfile.SET_MEMBERSHIP",
                DeprecationWarning,
                stacklevel=2,
            )

    def check_proof(self, proof: dict):
        proof_type = _require_string(proof, "type")
        if self.profile is ValidationProfile.LEGACY_EXACT_MATCH:
            if proof_type != self.joined:
                raise ValidationFailure(
                    f'Expected "proof.type" to equal "{self.joined}", '
                    f'got "{proof_type}".'
                )
            return
        try:
            self._validate(proof_type)
        except ValidationError as err:
            raise ValidationFailure(
                f'Expected "proof.type" to be one of {self.expected_proof_types}, '
                f'got "{proof_type}".'
            ) from err


class CryptosuiteRule(ProofRule):
    title = '"proof.cryptosuite" field MUST exist and be a string.'

    def check_proof(self, proof: dict):
        _require_string(proof, "cryptosuite", label="cryptosuite")


class CreatedRule(ProofRule):
    title = (
        '"proof.created" field MUST exist and be a valid XMLSCHEMA-11 datetime value.'
    )

    def check_proof(self, proof: dict):
        created = _require(proof, "created")
        try:
            XMLSCHEMA_DATETIME_VALIDATE(created)
        except ValidationError as err:
            raise ValidationFailure(
                f'Expected "proof.created" to be an XMLSCHEMA-11 datetime, '
                f"got {created!r}."
            ) from err


class VerificationMethodRule(ProofRule):
    title = '"proof.verificationMethod" field MUST exist and be a valid URL.'

    def check_proof(self, proof: dict):
        value = _require(proof, "verificationMethod")
        try:
            ABSOLUTE_URL_VALIDATE(value)
        except ValidationError as err:
            raise ValidationFailure('Expected "verificationMethod" to be a URL') from err


class ProofPurposeRule(ProofRule):
    title = '"proof.proofPurpose" field MUST exist and be a string.'

    def check_proof(self, proof: dict):
        _require_string(proof, "proofPurpose")


class ProofValueRule(ProofRule):
    title = '"proof.proofValue" field MUST exist and be a string.'

    def check_proof(self, proof: dict):
        _require_string(proof, "proofValue")


class ProofValueMultibaseRule(ProofRule):
    title = (
        'The "proof.proofValue" field MUST be a multibase-encoded '
        "base58-btc encoded value."
    )

    @staticmethod
    def _is_multibase(proof) -> bool:
        if not isinstance(proof, dict):
            return False
        try:
            MULTIBASE_BASE58_BTC_VALIDATE(proof.get("proofValue"))
        except ValidationError:
            return False
        return True

    def check(self, document: dict):
        # one conforming proof is enough
        if not any(self._is_multibase(proof) for proof in get_proofs(document)):
            raise ValidationFailure(
                'Expected "proof.proofValue" to be multibase-encoded base58-btc value.'
            )


class DomainRule(ProofRule):
    title = 'if "proof.domain" field exists, it MUST be a string.'

    def check_proof(self, proof: dict):
        if proof.get("domain") is not None:
            _require_string(proof, "domain")


class ChallengeRule(ProofRule):
    title = 'if "proof.challenge" field exists, it MUST be a string.'

    def check_proof(self, proof: dict):
        if proof.get("challenge") is None:
            return
        if proof.get("domain") is None:
            raise ValidationFailure('Expected "proof.domain" to be specified.')
        _require_string(proof, "challenge")


class PreviousProofRule(ProofRule):
    title = 'if "proof.previousProof" field exists, it MUST be a string.'

    def check_proof(self, proof: dict):
        if proof.get("previousProof") is not None:
            _require_string(proof, "previousProof")


def build_format_rules(
    expected_proof_types: Sequence[str] = DEFAULT_PROOF_TYPES,
    expected_crypto_suite: bool = True,
    profile: ValidationProfile = ValidationProfile.SET_MEMBERSHIP,
) -> List[ProofRule]:
    """Build the proof format rules in reporting order."""
    rules = [
        ProofExistsRule(),
        ProofIdRule(),
        ProofTypeRule(),
        ProofTypeMatchRule(expected_proof_types, profile),
    ]
    if expected_crypto_suite:
        rules.append(CryptosuiteRule())
    rules.extend(
        [
            CreatedRule(),
            VerificationMethodRule(),
            ProofPurposeRule(),
            ProofValueRule(),
            ProofValueMultibaseRule(),
            DomainRule(),
            ChallengeRule(),
            PreviousProofRule(),
        ]
    )
    return rules


def evaluate(document: dict, rules: Iterable[ProofRule]) -> List[RuleResult]:
    """Run each rule against a document, isolating failures per rule."""
    results = []
    for rule in rules:
        try:
            rule.check(document)
        except ValidationFailure as err:
            results.append(RuleResult(rule.title, False, err.message))
        else:
            results.append(RuleResult(rule.title, True))
    return results
