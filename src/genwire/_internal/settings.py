from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from genwire._internal.policies import ParameterPassing
from genwire.lock_mode import LockMode


class GenWireSettings(BaseSettings):
    """Hold process-wide defaults for new catalogs.

    Values are read from ``GENWIRE_*`` environment variables when a settings
    object is created. Keyword arguments passed to ``Catalog`` take precedence
    over these defaults.

    Examples:
        .. code-block:: python

            # GENWIRE_LOCK_MODE=none GENWIRE_CACHE_RESOLUTIONS=false
            settings = GenWireSettings()
            catalog = Catalog(settings=settings)

    """

    model_config = SettingsConfigDict(env_prefix="GENWIRE_", frozen=True)

    lock_mode: LockMode = LockMode.THREAD
    """Serialization used for registration and sealing."""

    default_passing: ParameterPassing = ParameterPassing.BY_VALUE
    """Passing mode for generics without declared deduction parameters."""

    cache_resolutions: bool = True
    """Memoize successful resolutions of sealed generics."""

    resolution_cache_size: int = Field(default=1024, ge=1)
    """Maximum number of memoized resolutions per catalog; the oldest are evicted first."""


__all__ = ["GenWireSettings"]
