"""DataIntegrityProof."""

from typing import Optional

from marshmallow import INCLUDE, fields, post_dump

from ....messaging.models.base import BaseModel, BaseModelSchema
from ....messaging.valid import (
    ABSOLUTE_URL_EXAMPLE,
    ABSOLUTE_URL_VALIDATE,
    MULTIBASE_BASE58_BTC_EXAMPLE,
    MULTIBASE_BASE58_BTC_VALIDATE,
    PROOF_PURPOSE_EXAMPLE,
    PROOF_PURPOSE_VALIDATE,
    XMLSCHEMA_DATETIME_EXAMPLE,
    XMLSCHEMA_DATETIME_VALIDATE,
)


class DataIntegrityProof(BaseModel):
    """Data Integrity Proof model."""

    class Meta:
        """DataIntegrityProof metadata."""

        schema_class = "DataIntegrityProofSchema"

    def __init__(
        self,
        id: Optional[str] = None,
        type: Optional[str] = "DataIntegrityProof",
        proof_purpose: Optional[str] = None,
        verification_method: Optional[str] = None,
        cryptosuite: Optional[str] = None,
        created: Optional[str] = None,
        expires: Optional[str] = None,
        domain: Optional[str] = None,
        challenge: Optional[str] = None,
        proof_value: Optional[str] = None,
        previous_proof: Optional[str] = None,
        nonce: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Initialize the DataIntegrityProof instance."""

        self.id = id
        self.type = type
        self.proof_purpose = proof_purpose
        self.verification_method = verification_method
        self.cryptosuite = cryptosuite
        self.created = created
        self.expires = expires
        self.domain = domain
        self.challenge = challenge
        self.proof_value = proof_value
        self.previous_proof = previous_proof
        self.nonce = nonce
        self.extra = kwargs


class DataIntegrityProofSchema(BaseModelSchema):
    """Data Integrity Proof schema.

    Based on https://www.w3.org/TR/vc-data-integrity/#proofs

    """

    class Meta:
        """Accept parameter overload."""

        unknown = INCLUDE
        model_class = DataIntegrityProof

    id = fields.Str(
        required=False,
        validate=ABSOLUTE_URL_VALIDATE,
        metadata={
            "description": "An optional identifier for the proof, which MUST be a URL",
            "example": "urn:uuid:6a1676b8-b51f-11ed-937b-d76685a20ff5",
        },
    )
    type = fields.Str(
        required=True,
        metadata={"description": "The proof type", "example": "DataIntegrityProof"},
    )
    proof_purpose = fields.Str(
        data_key="proofPurpose",
        required=True,
        validate=PROOF_PURPOSE_VALIDATE,
        metadata={
            "description": "The purpose the proof was created for",
            "example": PROOF_PURPOSE_EXAMPLE,
        },
    )
    verification_method = fields.Str(
        data_key="verificationMethod",
        required=True,
        validate=ABSOLUTE_URL_VALIDATE,
        metadata={
            "description": "URL of the key that verifies the proof",
            "example": ABSOLUTE_URL_EXAMPLE,
        },
    )
    cryptosuite = fields.Str(
        required=False,
        metadata={
            "description": "Identifier of the cryptographic suite of the proof",
            "example": "eddsa-jcs-2022",
        },
    )
    created = fields.Str(
        required=False,
        validate=XMLSCHEMA_DATETIME_VALIDATE,
        metadata={
            "description": "Creation time as an XMLSCHEMA11-2 dateTimeStamp",
            "example": XMLSCHEMA_DATETIME_EXAMPLE,
        },
    )
    expires = fields.Str(
        required=False,
        validate=XMLSCHEMA_DATETIME_VALIDATE,
        metadata={
            "description": "Expiry time as an XMLSCHEMA11-2 dateTimeStamp",
            "example": XMLSCHEMA_DATETIME_EXAMPLE,
        },
    )
    domain = fields.Str(
        required=False,
        metadata={
            "description": "Security domain the proof is meant to be used in",
            "example": "example.com",
        },
    )
    challenge = fields.Str(
        required=False,
        metadata={
            "description": "One-time value bound to the domain",
            "example": "1235abcd6789",
        },
    )
    proof_value = fields.Str(
        required=False,
        data_key="proofValue",
        validate=MULTIBASE_BASE58_BTC_VALIDATE,
        metadata={
            "description": "Multibase encoded signature",
            "example": MULTIBASE_BASE58_BTC_EXAMPLE,
        },
    )
    previous_proof = fields.Str(
        required=False,
        data_key="previousProof",
        metadata={
            "description": "Id of the proof that MUST verify before this one",
            "example": "urn:uuid:6a1676b8-b51f-11ed-937b-d76685a20ff5",
        },
    )
    nonce = fields.Str(
        required=False,
        metadata={"description": "Value increasing proof unlinkability"},
    )

    @post_dump(pass_original=True)
    def add_unknown_properties(self, data: dict, original, **kwargs):
        """Add back unknown properties before outputting."""

        data.update(original.extra)

        return data
