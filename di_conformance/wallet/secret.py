"""Default key provider for fixture generation."""

import logging
import os
from typing import Optional, Union

from ..config.base import BaseSettings
from ..config.settings import Settings
from .key_pair import Ed25519KeyPair

LOGGER = logging.getLogger(__name__)

DEFAULT_KEY_SEED = "0" * 32


async def get_default_key(
    seed: Union[str, bytes, None] = None,
    settings: Optional[BaseSettings] = None,
) -> Ed25519KeyPair:
    """Derive the deterministic Ed25519 key used to sign fixtures.

    The seed is taken from the argument, then the `key.seed` setting, falling
    back to all zeros. Without settings, `DI_CONFORMANCE_KEY_SEED` is read from
    the environment.
    """
    if seed is None:
        if settings is None:
            settings = Settings.from_environ(os.environ)
        seed = settings.get_str("key.seed", default=DEFAULT_KEY_SEED)
    key = Ed25519KeyPair.from_seed(seed)
    LOGGER.debug("Using fixture key %s", key.id)
    return key
