from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select how catalog registration is serialized.

    Use these values for the catalog-level ``lock_mode`` argument or the
    ``GENWIRE_LOCK_MODE`` setting. Reads of a sealed generic never take a lock
    regardless of the selected mode.

    Prefer ``NONE`` only when every registration happens on a single thread
    during startup.
    """

    THREAD = "thread"
    """Guard registration and sealing with ``threading.Lock``."""

    NONE = "none"
    """Disable locking around registration and sealing."""
