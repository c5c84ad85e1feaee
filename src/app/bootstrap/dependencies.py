"""Factories de stores — criação de implementações concretas.

Este módulo centraliza a criação de stores baseadas nas configurações
de ambiente. As instâncias são criadas uma vez no lifespan e injetadas
nas rotas (ver api/routes/dependencies.py).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_supabase_client
from app.infra.stores import (
    MemoryCrmStore,
    MemoryDedupeStore,
    RedisDedupeStore,
    SqlCrmStore,
    SupabaseCrmStore,
)

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

    from app.protocols.crm_store import CrmStoreProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol
    from config.settings import BaseSettings, CrmStoreSettings, DedupeSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# CRM Store Factory
# ──────────────────────────────────────────────────────────────────────────────


async def create_crm_store(
    settings: CrmStoreSettings,
    base: BaseSettings,
) -> CrmStoreProtocol:
    """Cria store CRM baseado na configuração.

    CRM_STORE_BACKEND:
    - "supabase": SupabaseCrmStore (API REST, sem transação)
    - "sql": SqlCrmStore (SQLAlchemy async, transacional)
    - "memory": MemoryCrmStore (dev only)

    Raises:
        ValueError: Backend inválido ou credenciais ausentes
    """
    backend = settings.backend

    if backend == "supabase":
        store: CrmStoreProtocol = SupabaseCrmStore(create_supabase_client(settings))
        logger.info("crm_store_created", extra={"backend": "supabase"})
        return store

    if backend == "sql":
        sql_store = SqlCrmStore.from_url(settings.database_url)
        if settings.create_all:
            await sql_store.create_all()
        logger.info("crm_store_created", extra={"backend": "sql"})
        return sql_store

    if backend == "memory":
        if not base.is_development:
            logger.warning(
                "memory_crm_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("crm_store_created", extra={"backend": "memory"})
        return MemoryCrmStore()

    msg = f"CRM_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# Dedupe Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_dedupe_store(
    settings: DedupeSettings,
    base: BaseSettings,
    redis_client: AsyncRedis[bytes] | None = None,
) -> AsyncDedupeProtocol:
    """Cria store de dedupe baseado na configuração.

    DEDUPE_BACKEND:
    - "memory": MemoryDedupeStore (dev only)
    - "redis": RedisDedupeStore (staging/production)
    """
    if settings.backend == "redis":
        client = redis_client or create_async_redis_client(base.redis_url)
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return RedisDedupeStore(client)

    if settings.backend == "memory":
        if not base.is_development:
            logger.warning(
                "memory_dedupe_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("dedupe_store_created", extra={"backend": "memory"})
        return MemoryDedupeStore()

    msg = f"DEDUPE_BACKEND inválido: {settings.backend}"
    raise ValueError(msg)
