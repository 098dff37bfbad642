"""Validators for proof fields."""

import re
from typing import Iterable
from urllib.parse import urlsplit

from base58 import alphabet
from marshmallow.exceptions import ValidationError
from marshmallow.validate import OneOf, Regexp, Validator

from ..utils.multiformats.multibase import is_base58btc

B58 = alphabet if isinstance(alphabet, str) else alphabet.decode("ascii")

# schemes whose URLs need an authority, as WHATWG URL parsing requires
SPECIAL_SCHEMES = ("ftp", "http", "https", "ws", "wss")


class XmlSchemaDateTime(Regexp):
    """Validate value against the XMLSCHEMA-11 dateTimeStamp grammar."""

    EXAMPLE = "2023-05-01T12:00:00Z"
    PATTERN = re.compile(
        r"^([0-9]{4})-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])"
        r"T([01][0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9]|60)"
        r"(\.[0-9]+)?(Z|(\+|-)([01][0-9]|2[0-3]):([0-5][0-9]))\Z",
        re.IGNORECASE,
    )

    def __init__(self):
        """Initializer."""

        super().__init__(
            XmlSchemaDateTime.PATTERN,
            error="Value {input} is not a valid XMLSCHEMA-11 datetime",
        )

    def __call__(self, value):
        """Validate input value."""

        if not isinstance(value, str):
            raise ValidationError(f"Value {value!r} is not a datetime string")
        return super().__call__(value)


class AbsoluteUrl(Validator):
    """Validate value as an absolute URL on any scheme."""

    EXAMPLE = "https://example.com/issuers/565049#key-1"
    SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

    def __call__(self, value):
        """Validate input value."""

        if not isinstance(value, str) or not self.SCHEME.match(value):
            raise ValidationError(f"Value {value!r} is not an absolute URL")
        if any(char.isspace() for char in value.strip()):
            raise ValidationError(f"Value {value!r} is not an absolute URL")
        try:
            parts = urlsplit(value.strip())
            # out of range ports raise
            parts.port
        except ValueError as err:
            raise ValidationError(f"Value {value!r} is not an absolute URL") from err
        if parts.scheme.lower() in SPECIAL_SCHEMES and not parts.hostname:
            raise ValidationError(f"Value {value!r} has no host")
        if not (parts.netloc or parts.path or parts.query or parts.fragment):
            raise ValidationError(f"Value {value!r} is not an absolute URL")
        return value


class Base58Btc(Regexp):
    """Validate value against the base58btc alphabet."""

    EXAMPLE = "2NEpo7TZRRrLZSi2U"
    PATTERN = rf"^[{B58}]+\Z"

    def __init__(self):
        """Initializer."""

        super().__init__(
            Base58Btc.PATTERN,
            error="Value {input} is not base58btc encoded",
        )


class MultibaseBase58Btc(Validator):
    """Validate value as multibase `z` prefixed base58btc."""

    EXAMPLE = (
        "z5C5b3nyNxUE2E2mHKFFZbR66GNxGmGhTRDNVThY4wCZVSYxtEUE1CZBwVcH8Xg"
        "kVGMkqZMH6EpbW1bC4DbXMqUNrL"
    )

    def __call__(self, value):
        """Validate input value."""

        if not isinstance(value, str) or not value.startswith("z"):
            raise ValidationError(
                f"Value {value!r} is not multibase encoded with the 'z' prefix"
            )
        if not is_base58btc(value):
            raise ValidationError(f"Value {value!r} does not decode as base58btc")
        return value


class ProofType(OneOf):
    """Validate value against a set of accepted proof types."""

    EXAMPLE = "DataIntegrityProof"

    def __init__(self, choices: Iterable[str] = ("DataIntegrityProof",)):
        """Initializer."""

        super().__init__(
            choices=list(choices),
            error="Value {input} must be one of {choices}",
        )


class ProofPurpose(OneOf):
    """Validate value against the known proof purposes."""

    EXAMPLE = "assertionMethod"

    def __init__(self):
        """Initializer."""

        super().__init__(
            choices=[
                "assertionMethod",
                "authentication",
                "capabilityInvocation",
                "capabilityDelegation",
                "keyAgreement",
            ],
            error="Value {input} must be one of {choices}",
        )


# Instances for marshmallow schema specification
XMLSCHEMA_DATETIME_VALIDATE = XmlSchemaDateTime()
XMLSCHEMA_DATETIME_EXAMPLE = XmlSchemaDateTime.EXAMPLE

ABSOLUTE_URL_VALIDATE = AbsoluteUrl()
ABSOLUTE_URL_EXAMPLE = AbsoluteUrl.EXAMPLE

BASE58_BTC_VALIDATE = Base58Btc()
BASE58_BTC_EXAMPLE = Base58Btc.EXAMPLE

MULTIBASE_BASE58_BTC_VALIDATE = MultibaseBase58Btc()
MULTIBASE_BASE58_BTC_EXAMPLE = MultibaseBase58Btc.EXAMPLE

PROOF_TYPE_VALIDATE = ProofType()
PROOF_TYPE_EXAMPLE = ProofType.EXAMPLE

PROOF_PURPOSE_VALIDATE = ProofPurpose()
PROOF_PURPOSE_EXAMPLE = ProofPurpose.EXAMPLE
