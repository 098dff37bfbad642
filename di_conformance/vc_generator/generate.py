"""Generate the signed credential fixtures of a suite, once per run."""

import inspect
import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional, Sequence, Union

from ..vc.data_integrity.cryptosuites import Cryptosuite, EddsaJcs2022
from ..vc.data_integrity.resolver import load_cryptosuite, resolve_suites
from ..wallet.key_pair import Ed25519KeyPair
from ..wallet.secret import get_default_key
from .cache import FixtureCache, get_default_cache
from .data import VALID_VC
from .error import GenerationFailure
from .generators import (
    Generator,
    GeneratorContext,
    OptionalTestCategory,
    get_generators,
)
from .issuance import issue_cloned

LOGGER = logging.getLogger(__name__)


class TestData:
    """Read access to the fixtures of one suite."""

    __test__ = False

    def __init__(
        self,
        suite_name: str,
        cache: FixtureCache,
        failures: Optional[Dict[str, GenerationFailure]] = None,
    ):
        """Initialize the view over a suite's fixtures."""
        self.suite_name = suite_name
        self.cache = cache
        self.failures = failures or {}

    def clone(self, generator_id: str) -> Any:
        """Get an independent copy of a fixture."""
        return self.cache.clone(self.suite_name, generator_id)

    def ids(self) -> List[str]:
        """List the available fixture ids."""
        return self.cache.ids(self.suite_name)

    def __repr__(self) -> str:
        """Return a human readable representation of the fixtures."""
        return f"<TestData({self.suite_name!r}, ids={self.ids()})>"


async def _call(generator: Generator, ctx: GeneratorContext):
    output = generator(ctx)
    if inspect.isawaitable(output):
        output = await output
    return output


async def generate_test_data(
    *,
    suite_name: str = "eddsa-2022",
    key: Optional[Ed25519KeyPair] = None,
    cryptosuite: Union[Cryptosuite, str, None] = None,
    mandatory_pointers: Optional[Sequence[str]] = None,
    selective_pointers: Optional[Sequence[str]] = None,
    verify: bool = False,
    optional_tests=None,
    test_vector: Optional[dict] = None,
    cache: Optional[FixtureCache] = None,
    raise_errors: bool = True,
) -> TestData:
    """Run every registered generator not yet cached for the suite.

    Args:
        suite_name: the cache partition the fixtures are stored under
        key: the signing key, the default key when omitted
        cryptosuite: the cryptosuite, or its registered name
        mandatory_pointers: JSON pointers always disclosed by derived proofs
        selective_pointers: JSON pointers selectively disclosed; without them
            the selective disclosure fixtures are not generated
        verify: verify each created proof
        optional_tests: optional categories to generate, see
            `OptionalTestCategory.parse`
        test_vector: the credential template, left untouched
        cache: the fixture cache, the run-scoped default when omitted
        raise_errors: raise the first failure instead of collecting it

    Returns:
        The fixtures of the suite

    """
    cryptosuite = load_cryptosuite(cryptosuite or EddsaJcs2022())
    if test_vector is None:
        test_vector = VALID_VC
    if cache is None:
        cache = get_default_cache()
    if key is None:
        key = await get_default_key()

    cache.ensure(suite_name)
    credential = deepcopy(test_vector)
    credential["issuer"] = key.controller
    signer = key.signer()

    categories = OptionalTestCategory.parse(optional_tests)
    if (
        OptionalTestCategory.SELECTIVE_DISCLOSURE in categories
        and selective_pointers is None
    ):
        LOGGER.warning(
            "No selective pointers given, skipping selective disclosure fixtures"
        )
        categories.remove(OptionalTestCategory.SELECTIVE_DISCLOSURE)

    failures: Dict[str, GenerationFailure] = {}
    for generator_id, generator in get_generators(categories):
        async with cache.acquire(suite_name, generator_id) as lock:
            if lock.done:
                continue
            suites = resolve_suites(
                cryptosuite=cryptosuite,
                signer=signer,
                mandatory_pointers=mandatory_pointers,
                selective_pointers=selective_pointers,
                verify=verify,
            )
            ctx = GeneratorContext(
                suites.suite,
                suites.selective_suite,
                deepcopy(credential),
                selective_pointers,
            )
            result = await issue_cloned(_call(generator, ctx), generator_id)
            if not result.is_ok:
                LOGGER.error(
                    "Fixture %s for %s failed: %s",
                    generator_id,
                    suite_name,
                    result.failure.roll_up,
                )
                if raise_errors:
                    result.unwrap()
                failures[generator_id] = result.failure
                continue
            await lock.set_result(result.artifact)
            LOGGER.debug("Generated fixture %s for %s", generator_id, suite_name)

    return TestData(suite_name, cache, failures)
