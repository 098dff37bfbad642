"""Wallet-related exceptions."""

from ..core.error import BaseError


class WalletError(BaseError):
    """General wallet exception."""
