"""Resolve the signature suites a fixture generator signs with."""

from datetime import datetime
from typing import NamedTuple, Optional, Sequence, Union

from ...config.base import ConfigurationError
from ...wallet.key_pair import Signer
from .cryptosuites import CRYPTOSUITES, Cryptosuite
from .suites import SelectiveSuite, StandardSuite


class ResolvedSuites(NamedTuple):
    """The suites available to one generator run."""

    suite: StandardSuite
    selective_suite: Optional[SelectiveSuite]


def load_cryptosuite(cryptosuite: Union[Cryptosuite, str]) -> Cryptosuite:
    """Return a cryptosuite instance, looking names up in the registry."""
    if isinstance(cryptosuite, Cryptosuite):
        return cryptosuite
    if isinstance(cryptosuite, str) and cryptosuite in CRYPTOSUITES:
        return CRYPTOSUITES[cryptosuite]()
    raise ConfigurationError(f"Unsupported cryptosuite: {cryptosuite!r}")


def resolve_suites(
    *,
    cryptosuite: Union[Cryptosuite, str],
    signer: Signer,
    mandatory_pointers: Optional[Sequence[str]] = None,
    selective_pointers: Optional[Sequence[str]] = None,
    verify: bool = False,
    date: Union[datetime, str, None] = None,
) -> ResolvedSuites:
    """Build the standard suite, and a selective one when pointers are given."""
    cryptosuite = load_cryptosuite(cryptosuite)
    suite = StandardSuite(
        cryptosuite=cryptosuite, signer=signer, verify=verify, date=date
    )
    selective_suite = None
    if selective_pointers is not None:
        selective_suite = SelectiveSuite(
            cryptosuite=cryptosuite,
            signer=signer,
            verify=verify,
            date=date,
            mandatory_pointers=mandatory_pointers,
            selective_pointers=selective_pointers,
        )
    return ResolvedSuites(suite, selective_suite)
