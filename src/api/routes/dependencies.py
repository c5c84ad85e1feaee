"""Providers de dependência (FastAPI Depends) para as rotas de webhook.

Stores são criados uma vez no lifespan (app.state); os providers só
montam os use cases por request. Testes substituem via
`app.dependency_overrides`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.protocols.crm_store import CrmStoreProtocol
from app.protocols.dedupe import AsyncDedupeProtocol
from app.services.delivery_dedupe import DeliveryDeduplicator
from app.use_cases import RecordInteractionsUseCase, RecordMeetingUseCase
from config.settings import (
    DedupeSettings,
    WebhookSettings,
    get_dedupe_settings,
    get_webhook_settings,
)


def get_crm_store(request: Request) -> CrmStoreProtocol:
    store = getattr(request.app.state, "crm_store", None)
    if store is None:
        raise RuntimeError("CRM store não inicializado")
    return store


def get_dedupe_store(request: Request) -> AsyncDedupeProtocol | None:
    return getattr(request.app.state, "dedupe_store", None)


def get_delivery_deduplicator(
    store: Annotated[AsyncDedupeProtocol | None, Depends(get_dedupe_store)],
    settings: Annotated[DedupeSettings, Depends(get_dedupe_settings)],
) -> DeliveryDeduplicator | None:
    """Retorna None quando o dedupe está desligado ou sem store."""
    if not settings.enabled or store is None:
        return None
    return DeliveryDeduplicator(
        store,
        ttl_seconds=settings.ttl_seconds,
        processing_ttl_seconds=settings.processing_ttl_seconds,
    )


def get_record_interactions(
    store: Annotated[CrmStoreProtocol, Depends(get_crm_store)],
) -> RecordInteractionsUseCase:
    return RecordInteractionsUseCase(store)


def get_record_meeting(
    store: Annotated[CrmStoreProtocol, Depends(get_crm_store)],
) -> RecordMeetingUseCase:
    return RecordMeetingUseCase(store)


def get_settings_for_webhooks() -> WebhookSettings:
    return get_webhook_settings()


DeduplicatorDep = Annotated[DeliveryDeduplicator | None, Depends(get_delivery_deduplicator)]
RecordInteractionsDep = Annotated[RecordInteractionsUseCase, Depends(get_record_interactions)]
RecordMeetingDep = Annotated[RecordMeetingUseCase, Depends(get_record_meeting)]
WebhookSettingsDep = Annotated[WebhookSettings, Depends(get_settings_for_webhooks)]
