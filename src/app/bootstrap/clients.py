"""Factories de clientes externos — Redis e Supabase."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis
    from supabase import Client as SupabaseClient

    from config.settings import CrmStoreSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_async_redis_client(redis_url: str) -> AsyncRedis[bytes]:
    """Cria cliente Redis assíncrono.

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis[bytes] = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    logger.info("async_redis_client_created")
    return client


# ──────────────────────────────────────────────────────────────────────────────
# Supabase Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_supabase_client(settings: CrmStoreSettings) -> SupabaseClient:
    """Cria cliente supabase-py autenticado com a chave de serviço.

    Raises:
        ValueError: Se SUPABASE_URL ou SUPABASE_KEY ausentes
    """
    from supabase import create_client

    if not settings.supabase_url or not settings.supabase_key:
        msg = "SUPABASE_URL e SUPABASE_KEY são obrigatórios"
        raise ValueError(msg)

    client = create_client(settings.supabase_url, settings.supabase_key)
    logger.info("supabase_client_created")
    return client
