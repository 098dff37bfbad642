"""Signature suites binding a cryptosuite to a signer."""

import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Optional, Sequence, Union
from uuid import uuid4

from ...core.error import BaseError
from ...utils.pointers import PointerError, select_pointers
from ...vc_generator.error import GenerationFailure
from ...wallet.key_pair import Signer
from .cryptosuites import Cryptosuite
from .models.proof import DataIntegrityProof

LOGGER = logging.getLogger(__name__)

PROOF_TYPE = "DataIntegrityProof"
PROOF_PURPOSE = "assertionMethod"


def format_created(date: Union[datetime, str, None] = None) -> str:
    """Render a proof creation time at second precision in UTC."""
    if isinstance(date, str):
        return date
    if date is None:
        date = datetime.now(timezone.utc)
    elif date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _proof_list(document: dict) -> list:
    proofs = document.get("proof", [])
    if isinstance(proofs, dict):
        return [proofs]
    if isinstance(proofs, list):
        return list(proofs)
    raise GenerationFailure("Expected proof to be a list or an object.")


class SignatureSuite:
    """Data Integrity add-proof algorithm over one cryptosuite and signer."""

    def __init__(
        self,
        *,
        cryptosuite: Cryptosuite,
        signer: Signer,
        verify: bool = False,
        date: Union[datetime, str, None] = None,
    ):
        """Initialize the suite.

        Args:
            cryptosuite: the proof algorithms
            signer: the key the proofs are signed with
            verify: verify every created proof before returning it
            date: fixed creation time for proofs, now when omitted
        """
        self.cryptosuite = cryptosuite
        self.signer = signer
        self.verify_proofs = verify
        self.date = date

    def proof_options(self, overrides: Optional[dict] = None) -> dict:
        """Build the options of a new proof; an override of None removes a field."""
        options = {
            "id": f"urn:uuid:{uuid4()}",
            "type": PROOF_TYPE,
            "cryptosuite": self.cryptosuite.name,
            "created": format_created(self.date),
            "verificationMethod": self.signer.id,
            "proofPurpose": PROOF_PURPOSE,
        }
        for name, value in (overrides or {}).items():
            if value is None:
                options.pop(name, None)
            else:
                options[name] = value
        return options

    async def sign(
        self, document: dict, *, proof: Optional[dict] = None, chain: bool = False
    ) -> dict:
        """Add a proof to a copy of the document.

        Existing proofs are kept. A single proof is attached as an object,
        several as a list. With `chain` the new proof names the last existing
        proof as its `previousProof` and covers it.
        """
        secured = deepcopy(document)
        existing = _proof_list(secured)
        secured.pop("proof", None)

        options = self.proof_options(proof)
        unsecured = deepcopy(secured)
        if chain:
            if not existing or not existing[-1].get("id"):
                raise GenerationFailure("No identified proof to chain to")
            options["previousProof"] = existing[-1]["id"]
            unsecured["proof"] = deepcopy(existing[-1])

        try:
            created = await self.cryptosuite.create_proof(
                unsecured, DataIntegrityProof.deserialize(options), self.signer
            )
        except BaseError as err:
            raise GenerationFailure(
                f"Unable to create {self.cryptosuite.name} proof"
            ) from err
        new_proof = created.serialize()

        if self.verify_proofs:
            result = await self.cryptosuite.verify_proof(unsecured, new_proof)
            if not result.verified:
                details = "; ".join(d.get("detail", "") for d in result.problem_details)
                raise GenerationFailure(f"Created proof does not verify: {details}")

        proofs = existing + [new_proof]
        secured["proof"] = proofs[0] if len(proofs) == 1 else proofs
        return secured

    async def verify(self, secured_document: dict) -> bool:
        """Verify every proof on a document, following previousProof links."""
        unsecured = deepcopy(secured_document)
        proofs = _proof_list(unsecured)
        unsecured.pop("proof", None)
        if not proofs:
            return False
        by_id = {p.get("id"): p for p in proofs if isinstance(p, dict) and p.get("id")}
        for proof in proofs:
            if not isinstance(proof, dict):
                return False
            document = unsecured
            previous = proof.get("previousProof")
            if previous:
                if previous not in by_id:
                    return False
                document = dict(unsecured, proof=by_id[previous])
            result = await self.cryptosuite.verify_proof(document, proof)
            if not result.verified:
                LOGGER.debug("Proof %s failed: %s", proof.get("id"), result.problem_details)
                return False
        return True

    def __repr__(self) -> str:
        """Return a human readable representation of the suite."""
        return (
            f"<{self.__class__.__name__}({self.cryptosuite.name!r}, "
            f"signer={self.signer.id!r})>"
        )


class StandardSuite(SignatureSuite):
    """Suite producing plain, non-derivable proofs."""


class SelectiveSuite(SignatureSuite):
    """Suite producing base proofs from which disclosures are derived."""

    def __init__(
        self,
        *,
        mandatory_pointers: Optional[Sequence[str]] = None,
        selective_pointers: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        """Initialize the suite with the always-disclosed JSON pointers."""
        super().__init__(**kwargs)
        self.mandatory_pointers = list(mandatory_pointers or [])
        self.selective_pointers = list(selective_pointers or [])

    async def derive(
        self, secured_document: dict, selective_pointers: Optional[Sequence[str]] = None
    ) -> dict:
        """Disclose the mandatory and selective pointers under a fresh proof."""
        if selective_pointers is None:
            selective_pointers = self.selective_pointers
        unsecured = deepcopy(secured_document)
        unsecured.pop("proof", None)
        try:
            disclosed = select_pointers(
                unsecured, self.mandatory_pointers + list(selective_pointers)
            )
        except PointerError as err:
            raise GenerationFailure("Unable to derive selective disclosure") from err
        return await self.sign(disclosed)
