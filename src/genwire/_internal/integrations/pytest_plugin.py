from __future__ import annotations

import pytest

from genwire._internal.catalog import Catalog
from genwire._internal.settings import GenWireSettings


@pytest.fixture()
def genwire_settings() -> GenWireSettings:
    """Provide the settings used to build ``genwire_catalog``.

    Override this fixture to run a test suite against non-default settings,
    for example ``GenWireSettings(cache_resolutions=False)``.

    Returns:
        Settings read from ``GENWIRE_*`` environment variables.

    """
    return GenWireSettings()


@pytest.fixture()
def genwire_catalog(genwire_settings: GenWireSettings) -> Catalog:
    """Create a per-test catalog.

    The fixture is function-scoped, so registrations and sealing are isolated
    between tests unless users override fixture scope explicitly.

    Returns:
        A new, empty ``Catalog``.

    """
    return Catalog(settings=genwire_settings)


def pytest_report_header(config: pytest.Config) -> str:
    """Report the catalog defaults in effect for the test session."""
    _ = config
    settings = GenWireSettings()
    return (
        f"genwire: lock_mode={settings.lock_mode.value} "
        f"default_passing={settings.default_passing.value} "
        f"cache_resolutions={settings.cache_resolutions} "
        f"resolution_cache_size={settings.resolution_cache_size}"
    )
