"""Multicodec wrap and unwrap functions."""

from enum import Enum
from typing import NamedTuple, Optional


class Multicodec(NamedTuple):
    """Multicodec base class."""

    name: str
    code: bytes


class SupportedCodecs(Enum):
    """Key codecs a did:key verification method may carry."""

    ed25519_pub = Multicodec("ed25519-pub", b"\xed\x01")

    @classmethod
    def by_name(cls, name: str) -> Multicodec:
        """Get multicodec by name."""
        for codec in cls:
            if codec.value.name == name:
                return codec.value
        raise ValueError(f"Unsupported multicodec: {name}")

    @classmethod
    def for_data(cls, data: bytes) -> Multicodec:
        """Get multicodec by data."""
        for codec in cls:
            if data.startswith(codec.value.code):
                return codec.value
        raise ValueError("Unsupported multicodec")


def wrap(codec: Multicodec, data: bytes) -> bytes:
    """Wrap data with multicodec prefix."""
    return codec.code + data


def unwrap(data: bytes, codec: Optional[Multicodec] = None) -> tuple[Multicodec, bytes]:
    """Unwrap data with multicodec prefix."""
    if not codec:
        codec = SupportedCodecs.for_data(data)
    elif not data.startswith(codec.code):
        raise ValueError(f"Data is not prefixed with {codec.name}")
    return codec, data[len(codec.code) :]
