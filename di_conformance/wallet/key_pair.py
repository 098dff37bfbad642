"""Key pairs and the signer handed to signature suites."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union

from .crypto import (
    create_ed25519_keypair,
    sign_message_ed25519,
    validate_seed,
    verify_signed_message_ed25519,
)
from .did_key import DIDKey
from .error import WalletError


class Signer:
    """Signing capability bound to one verification method."""

    def __init__(
        self,
        id: str,
        sign: Callable[[bytes], Awaitable[bytes]],
        algorithm: str = "Ed25519",
    ):
        """Initialize the signer."""
        self.id = id
        self.algorithm = algorithm
        self._sign = sign

    async def sign(self, data: bytes) -> bytes:
        """Sign data with the bound key."""
        return await self._sign(data)

    def __repr__(self) -> str:
        """Return a human readable representation of the signer."""
        return f"<Signer(id={self.id!r}, algorithm={self.algorithm!r})>"


class KeyPair(ABC):
    """Base key pair class."""

    @abstractmethod
    async def sign(self, message: bytes) -> bytes:
        """Sign message using key pair."""

    @abstractmethod
    async def verify(self, message: bytes, signature: bytes) -> bool:
        """Verify message against signature using key pair."""

    @property
    @abstractmethod
    def has_public_key(self) -> bool:
        """Whether key pair has a public key."""

    @property
    @abstractmethod
    def public_key(self) -> Optional[bytes]:
        """Getter for the public key bytes."""

    @abstractmethod
    def from_verification_method(
        self, verification_method: Union[dict, str]
    ) -> "KeyPair":
        """Create new key pair class based on the passed verification method."""


class Ed25519KeyPair(KeyPair):
    """Ed25519 key pair identified by its did:key."""

    algorithm = "Ed25519"

    def __init__(self, public_key: bytes, secret_key: Optional[bytes] = None):
        """Initialize new Ed25519KeyPair instance."""
        self._public_key = public_key
        self._secret_key = secret_key
        self._did_key = DIDKey(public_key)

    @classmethod
    def from_seed(cls, seed: Union[str, bytes, None] = None) -> "Ed25519KeyPair":
        """Derive a key pair from a 32-byte seed, or a random one."""
        public_key, secret_key = create_ed25519_keypair(validate_seed(seed))
        return cls(public_key, secret_key)

    @property
    def controller(self) -> str:
        """The did:key controlling this key pair."""
        return self._did_key.did

    @property
    def id(self) -> str:
        """Verification method id of this key pair."""
        return self._did_key.key_id

    @property
    def fingerprint(self) -> str:
        """Multibase fingerprint of the public key."""
        return self._did_key.fingerprint

    @property
    def has_public_key(self) -> bool:
        """Whether key pair has a public key."""
        return self._public_key is not None

    @property
    def public_key(self) -> Optional[bytes]:
        """Getter for the public key bytes."""
        return self._public_key

    async def sign(self, message: bytes) -> bytes:
        """Sign message using the secret key."""
        if not self._secret_key:
            raise WalletError("Unable to sign without a secret key")
        return sign_message_ed25519(message, self._secret_key)

    async def verify(self, message: bytes, signature: bytes) -> bool:
        """Verify message against signature using the public key."""
        return verify_signed_message_ed25519(message, signature, self._public_key)

    def from_verification_method(
        self, verification_method: Union[dict, str]
    ) -> "Ed25519KeyPair":
        """Create a verify-only key pair from a did:key verification method."""
        if isinstance(verification_method, dict):
            verification_method = verification_method.get("id", "")
        return Ed25519KeyPair(DIDKey.from_did(verification_method).public_key)

    def signer(self) -> Signer:
        """Return a signer bound to this key pair's verification method."""
        return Signer(self.id, self.sign, algorithm=self.algorithm)
