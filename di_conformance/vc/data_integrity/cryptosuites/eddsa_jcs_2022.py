"""EddsaJcs2022 cryptosuite."""

from hashlib import sha256

import canonicaljson
from marshmallow import ValidationError

from ....messaging.valid import XMLSCHEMA_DATETIME_VALIDATE
from ....utils.multiformats import multibase
from ....wallet.crypto import verify_signed_message_ed25519
from ....wallet.did_key import DIDKey
from ....wallet.error import WalletError
from ....wallet.key_pair import Signer
from ..errors import problem_detail
from ..models.proof import DataIntegrityProof
from .base import Cryptosuite, CryptosuiteError, ProofVerification


class EddsaJcs2022(Cryptosuite):
    """EddsaJcs2022 cryptosuite.

    https://www.w3.org/TR/vc-di-eddsa/#eddsa-jcs-2022.
    """

    name = "eddsa-jcs-2022"

    async def create_proof(
        self,
        unsecured_document: dict,
        options: DataIntegrityProof,
        signer: Signer,
    ) -> DataIntegrityProof:
        """Create proof algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#create-proof-eddsa-jcs-2022.
        """
        if signer.algorithm != "Ed25519":
            raise CryptosuiteError(
                f"{self.name} cannot sign with a {signer.algorithm} key"
            )
        proof = DataIntegrityProof.deserialize(options.serialize())

        proof_config = self.proof_configuration(proof.serialize())
        transformed_data = self.transformation(unsecured_document, proof)
        hash_data = self.hashing(transformed_data, proof_config)
        proof_bytes = await signer.sign(hash_data)

        proof.proof_value = multibase.encode(proof_bytes, "base58btc")
        return proof

    def proof_configuration(self, options: dict) -> bytes:
        """Proof configuration algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#proof-configuration-eddsa-jcs-2022.
        """
        if options.get("type") != "DataIntegrityProof":
            raise CryptosuiteError('Expected proof.type to be "DataIntegrityProof"')
        if options.get("cryptosuite") != self.name:
            raise CryptosuiteError(f'Expected proof.cryptosuite to be "{self.name}"')
        for name in ("created", "expires"):
            if name in options:
                try:
                    XMLSCHEMA_DATETIME_VALIDATE(options[name])
                except ValidationError as err:
                    raise CryptosuiteError(f"Invalid proof.{name}") from err

        return self._canonicalize(options)

    def transformation(self, unsecured_document: dict, options: DataIntegrityProof):
        """Transformation algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#transformation-eddsa-jcs-2022.
        """
        if options.type != "DataIntegrityProof" or options.cryptosuite != self.name:
            raise CryptosuiteError(
                f"Expected a DataIntegrityProof using {self.name}"
            )
        return self._canonicalize(unsecured_document)

    def hashing(self, transformed_document: bytes, canonical_proof_config: bytes):
        """Hashing algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#hashing-eddsa-jcs-2022.
        """
        return (
            sha256(canonical_proof_config).digest()
            + sha256(transformed_document).digest()
        )

    def _canonicalize(self, data: dict) -> bytes:
        """Json canonicalization."""
        return canonicaljson.encode_canonical_json(data)

    async def verify_proof(
        self, unsecured_document: dict, proof: dict
    ) -> ProofVerification:
        """Verify proof algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#verify-proof-eddsa-jcs-2022.
        """
        proof_options = dict(proof)
        try:
            proof_value = proof_options.pop("proofValue", None)
            if not isinstance(proof_value, str):
                raise CryptosuiteError("Missing proof.proofValue")
            try:
                proof_bytes = multibase.decode(proof_value)
            except ValueError as err:
                raise CryptosuiteError("Undecodable proof.proofValue") from err

            proof_config = self.proof_configuration(proof_options)
            transformed_data = self._canonicalize(unsecured_document)
            hash_data = self.hashing(transformed_data, proof_config)
            if not self.proof_verification(
                hash_data, proof_bytes, proof_options.get("verificationMethod")
            ):
                raise CryptosuiteError("Invalid signature.")

        except CryptosuiteError as err:
            return ProofVerification(
                verified=False,
                proof=proof,
                problem_details=[
                    problem_detail("PROOF_VERIFICATION_ERROR", err.roll_up)
                ],
            )

        return ProofVerification(verified=True, proof=proof, problem_details=[])

    def proof_verification(
        self, hash_data: bytes, proof_bytes: bytes, verification_method: str
    ) -> bool:
        """Proof verification algorithm.

        https://www.w3.org/TR/vc-di-eddsa/#proof-verification-eddsa-jcs-2022.
        """
        if not isinstance(verification_method, str):
            raise CryptosuiteError("Missing proof.verificationMethod")
        try:
            public_key = DIDKey.from_did(verification_method).public_key
        except WalletError as err:
            raise CryptosuiteError(
                f"Unable to resolve verification method {verification_method}"
            ) from err
        return verify_signed_message_ed25519(hash_data, proof_bytes, public_key)
