"""Shared pytest fixtures for genwire tests."""

import pytest

from genwire import Catalog, Leaf, LockMode, Pattern, PointerTo, Var


@pytest.fixture()
def catalog() -> Catalog:
    """Empty catalog with default locking and caching."""
    return Catalog(lock_mode=LockMode.THREAD, cache_resolutions=True)


@pytest.fixture()
def uncached_catalog() -> Catalog:
    """Empty catalog that recomputes every resolution."""
    return Catalog(cache_resolutions=False)


@pytest.fixture()
def box_catalog(catalog: Catalog) -> Catalog:
    """Catalog with the primary, pointer and text candidates of ``Box``."""
    catalog.register("Box", Pattern.of(Var("a")), "primary")
    catalog.register("Box", Pattern.of(PointerTo(Var("a"))), "pointer")
    catalog.register("Box", Pattern.of(Leaf("text")), "text")
    return catalog
