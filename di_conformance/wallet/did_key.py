"""did:key identifiers for Ed25519 public keys."""

from ..utils.multiformats import multibase, multicodec
from ..utils.multiformats.multicodec import SupportedCodecs
from .error import WalletError


class DIDKey:
    """DID Key parser."""

    def __init__(self, public_key: bytes) -> None:
        """Initialize new DIDKey instance."""
        self._public_key = public_key

    @classmethod
    def from_fingerprint(cls, fingerprint: str) -> "DIDKey":
        """Initialize new DIDKey instance from a multibase encoded fingerprint."""
        if not fingerprint.startswith("z"):
            raise WalletError(f"Fingerprint {fingerprint!r} is not base58btc")
        try:
            _, public_key = multicodec.unwrap(
                multibase.decode(fingerprint), SupportedCodecs.ed25519_pub.value
            )
        except ValueError as err:
            raise WalletError(f"Unsupported did:key fingerprint {fingerprint}") from err
        return cls(public_key)

    @classmethod
    def from_did(cls, did: str) -> "DIDKey":
        """Initialize a DIDKey from a did:key string or verification method id."""
        did = did.split("#")[0]
        if not did.startswith("did:key:"):
            raise WalletError(f"Not a did:key identifier: {did}")
        return cls.from_fingerprint(did[len("did:key:") :])

    @property
    def public_key(self) -> bytes:
        """Getter for public key."""
        return self._public_key

    @property
    def fingerprint(self) -> str:
        """Getter for did key fingerprint."""
        return multibase.encode(
            multicodec.wrap(SupportedCodecs.ed25519_pub.value, self._public_key),
            "base58btc",
        )

    @property
    def did(self) -> str:
        """Getter for full did:key string."""
        return f"did:key:{self.fingerprint}"

    @property
    def key_id(self) -> str:
        """Getter for the verification method id."""
        return f"{self.did}#{self.fingerprint}"
