"""Settings base: ambiente/serviço/log e dedupe de entregas."""

from __future__ import annotations

from config.settings.base.core import (
    LOG_LEVELS,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.dedupe import (
    DedupeBackend,
    DedupeSettings,
    get_dedupe_settings,
)

__all__ = [
    "LOG_LEVELS",
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "get_base_settings",
    "get_dedupe_settings",
]
