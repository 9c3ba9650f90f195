import gc

import pytest


@pytest.fixture
def collect():
    """
    Force the reclamation of unreachable objects. On CPython most objects are
    reclaimed as soon as their last reference is dropped, but cycles (and other
    interpreters) need an explicit collection.
    """

    def collect():
        for _ in range(3):
            gc.collect()

    return collect
