"""Cryptosuite interface."""

from abc import ABC, abstractmethod
from typing import List, NamedTuple

from ....core.error import BaseError
from ....wallet.key_pair import Signer
from ..models.proof import DataIntegrityProof


class CryptosuiteError(BaseError):
    """Generic Cryptosuite Error."""


class ProofVerification(NamedTuple):
    """Outcome of verifying a single proof."""

    verified: bool
    proof: dict
    problem_details: List[dict]


class Cryptosuite(ABC):
    """A named pair of proof creation and verification algorithms."""

    name: str = None

    @abstractmethod
    async def create_proof(
        self,
        unsecured_document: dict,
        options: DataIntegrityProof,
        signer: Signer,
    ) -> DataIntegrityProof:
        """Create a proof over a document with the given proof options."""

    @abstractmethod
    async def verify_proof(
        self, unsecured_document: dict, proof: dict
    ) -> ProofVerification:
        """Verify one proof against the document it was created over."""

    def __repr__(self) -> str:
        """Return a human readable representation of the cryptosuite."""
        return f"<{self.__class__.__name__}({self.name!r})>"
