"""Agregador de settings do crm-relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)
from config.settings.crm import (
    CrmStoreBackend,
    CrmStoreSettings,
    get_crm_store_settings,
)
from config.settings.hubspot import (
    HUBSPOT_API_BASE_URL,
    HubSpotSettings,
    get_hubspot_settings,
)
from config.settings.webhooks import WebhookSettings, get_webhook_settings

__all__ = [
    "HUBSPOT_API_BASE_URL",
    "BaseSettings",
    "CrmStoreBackend",
    "CrmStoreSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "HubSpotSettings",
    "WebhookSettings",
    "get_base_settings",
    "get_crm_store_settings",
    "get_dedupe_settings",
    "get_hubspot_settings",
    "get_webhook_settings",
]
