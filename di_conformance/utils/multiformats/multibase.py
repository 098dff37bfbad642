"""MultiBase encoding and decoding utilities."""

import base64
import binascii
from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Literal, Union

import base58

BASE58_ALPHABET = frozenset(
    base58.alphabet if isinstance(base58.alphabet, str) else base58.alphabet.decode()
)


class MultibaseError(ValueError):
    """Raised when a value is not valid multibase."""


class MultibaseEncoder(ABC):
    """Encoding details."""

    name: ClassVar[str]
    character: ClassVar[str]

    @abstractmethod
    def encode(self, value: bytes) -> str:
        """Encode a byte string using this encoding."""

    @abstractmethod
    def decode(self, value: str) -> bytes:
        """Decode a string using this encoding."""


class Base58BtcEncoder(MultibaseEncoder):
    """Base58BTC encoding."""

    name = "base58btc"
    character = "z"

    def encode(self, value: bytes) -> str:
        """Encode a byte string using the base58btc encoding."""
        return base58.b58encode(value).decode()

    def decode(self, value: str) -> bytes:
        """Decode a base58btc string, rejecting characters outside the alphabet."""
        if not set(value) <= BASE58_ALPHABET:
            raise MultibaseError(f"Invalid base58btc value: {value!r}")
        try:
            return base58.b58decode(value)
        except ValueError as err:
            raise MultibaseError(f"Invalid base58btc value: {err}") from err


class Base64UrlEncoder(MultibaseEncoder):
    """Base64url (no padding) encoding."""

    name = "base64url"
    character = "u"

    def encode(self, value: bytes) -> str:
        """Encode a byte string using unpadded base64url."""
        return base64.urlsafe_b64encode(value).decode().rstrip("=")

    def decode(self, value: str) -> bytes:
        """Decode an unpadded base64url string."""
        try:
            return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
        except (binascii.Error, ValueError) as err:
            raise MultibaseError(f"Invalid base64url value: {err}") from err


class Encoding(Enum):
    """Enum for supported encodings."""

    base58btc = Base58BtcEncoder()
    base64url = Base64UrlEncoder()

    @classmethod
    def from_name(cls, name: str) -> MultibaseEncoder:
        """Get encoding from name."""
        for encoding in cls:
            if encoding.value.name == name:
                return encoding.value
        raise MultibaseError(f"Unsupported encoding: {name}")

    @classmethod
    def from_character(cls, character: str) -> MultibaseEncoder:
        """Get encoding from character."""
        for encoding in cls:
            if encoding.value.character == character:
                return encoding.value
        raise MultibaseError(f"Unsupported encoding: {character}")


EncodingStr = Literal[
    "base58btc",
    "base64url",
]


def encode(value: bytes, encoding: Union[Encoding, EncodingStr]) -> str:
    """Encode a byte string using the given encoding.

    Args:
        value: The byte string to encode
        encoding: The encoding to use

    Returns:
        The encoded string
    """
    if isinstance(encoding, str):
        encoder = Encoding.from_name(encoding)
    elif isinstance(encoding, Encoding):
        encoder = encoding.value
    else:
        raise TypeError("encoding must be an Encoding or EncodingStr")

    return encoder.character + encoder.encode(value)


def decode(value: str) -> bytes:
    """Decode a multibase encoded string.

    Args:
        value: The string to decode

    Returns:
        The decoded byte string
    """
    if not value:
        raise MultibaseError("Empty multibase value")
    encoder = Encoding.from_character(value[0])

    return encoder.decode(value[1:])


def is_base58btc(value: str) -> bool:
    """Check that a value is `z` prefixed and its body decodes as base58btc."""
    if not isinstance(value, str) or len(value) < 2:
        return False
    if value[0] != Base58BtcEncoder.character:
        return False
    try:
        Base58BtcEncoder().decode(value[1:])
    except MultibaseError:
        return False
    return True
