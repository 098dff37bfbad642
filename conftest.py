import os

import pytest

from di_conformance.vc_generator.cache import reset_default_cache


def pytest_sessionstart(session):
    # fixtures must not pick up a seed from the developer's shell
    os.environ.pop("DI_CONFORMANCE_KEY_SEED", None)


@pytest.fixture(autouse=True)
def default_fixture_cache():
    reset_default_cache()
    yield
    reset_default_cache()
