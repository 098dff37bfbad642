"""Ed25519 primitives backing the fixture signer."""

import base64
from typing import Optional, Tuple, Union

import nacl.bindings
import nacl.exceptions
import nacl.utils

from .error import WalletError


def random_seed() -> bytes:
    """Generate a random seed value."""
    return nacl.utils.random(nacl.bindings.crypto_sign_SEEDBYTES)


def create_ed25519_keypair(seed: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    """Create a public and private ed25519 keypair from a seed value.

    Args:
        seed: Seed for keypair, random when omitted

    Returns:
        A tuple of (public key, secret key)

    """
    if not seed:
        seed = random_seed()
    pk, sk = nacl.bindings.crypto_sign_seed_keypair(seed)
    return pk, sk


def validate_seed(seed: Union[str, bytes, None]) -> Optional[bytes]:
    """Convert a seed parameter to bytes and check its length.

    A string seed containing `=` is read as base64, any other string as ASCII.
    """
    if not seed:
        return None
    if isinstance(seed, str):
        if "=" in seed:
            seed = base64.b64decode(seed)
        else:
            seed = seed.encode("ascii")
    if not isinstance(seed, bytes):
        raise WalletError("Seed value is not a string or bytes")
    if len(seed) != 32:
        raise WalletError("Seed value must be 32 bytes in length")
    return seed


def sign_message_ed25519(message: bytes, secret: bytes) -> bytes:
    """Sign message using a ed25519 private signing key."""
    result = nacl.bindings.crypto_sign(message, secret)
    return result[: nacl.bindings.crypto_sign_BYTES]


def verify_signed_message_ed25519(
    message: bytes, signature: bytes, verkey: bytes
) -> bool:
    """Verify an ed25519 signed message according to a public verification key."""
    try:
        nacl.bindings.crypto_sign_open(signature + message, verkey)
    except (nacl.exceptions.BadSignatureError, ValueError):
        return False
    return True
