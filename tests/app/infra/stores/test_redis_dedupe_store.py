"""Testes do RedisDedupeStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from utils.errors import RedisConnectionError


def _pipeline_client(execute: AsyncMock) -> tuple[MagicMock, MagicMock]:
    async_redis = MagicMock()
    pipeline = MagicMock()
    pipeline.exists.return_value = pipeline
    pipeline.setex.return_value = pipeline
    pipeline.delete.return_value = pipeline
    pipeline.execute = execute
    async_redis.pipeline.return_value = pipeline
    return async_redis, pipeline


class TestRedisDedupeStore:
    """Testes do RedisDedupeStore."""

    @pytest.mark.asyncio
    async def test_is_duplicate_checks_processed_and_processing(self) -> None:
        """is_duplicate deve considerar chave processada e lock de processamento."""
        async_redis, pipeline = _pipeline_client(AsyncMock(return_value=[0, 1]))
        store = RedisDedupeStore(async_redis)

        result = await store.is_duplicate("whatsapp:msg-1")

        assert result is True
        pipeline.exists.assert_any_call("dedupe:whatsapp:msg-1")
        pipeline.exists.assert_any_call("dedupe:processing:whatsapp:msg-1")
        pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_is_duplicate_false_for_new_key(self) -> None:
        async_redis, _ = _pipeline_client(AsyncMock(return_value=[0, 0]))
        store = RedisDedupeStore(async_redis)

        assert await store.is_duplicate("email:new") is False

    @pytest.mark.asyncio
    async def test_mark_processing_claims_with_set_nx(self) -> None:
        """mark_processing deve reivindicar o lock atomicamente (SET NX EX)."""
        async_redis = MagicMock()
        async_redis.set = AsyncMock(return_value=True)
        async_redis.exists = AsyncMock(return_value=0)
        store = RedisDedupeStore(async_redis)

        assert await store.mark_processing("msg-2", ttl=45) is True

        async_redis.set.assert_awaited_once_with("dedupe:processing:msg-2", "1", nx=True, ex=45)
        async_redis.exists.assert_awaited_once_with("dedupe:msg-2")

    @pytest.mark.asyncio
    async def test_mark_processing_rejects_lock_held_by_another_delivery(self) -> None:
        async_redis = MagicMock()
        async_redis.set = AsyncMock(return_value=None)
        async_redis.exists = AsyncMock()
        store = RedisDedupeStore(async_redis)

        assert await store.mark_processing("msg-2") is False

        async_redis.exists.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mark_processing_releases_claim_for_processed_key(self) -> None:
        """Chave já processada: libera o lock recém-obtido e reporta duplicado."""
        async_redis = MagicMock()
        async_redis.set = AsyncMock(return_value=True)
        async_redis.exists = AsyncMock(return_value=1)
        async_redis.delete = AsyncMock()
        store = RedisDedupeStore(async_redis)

        assert await store.mark_processing("msg-2") is False

        async_redis.delete.assert_awaited_once_with("dedupe:processing:msg-2")

    @pytest.mark.asyncio
    async def test_mark_processed_promotes_and_clears_processing_lock(self) -> None:
        """mark_processed deve salvar dedupe final e remover lock temporário."""
        async_redis, pipeline = _pipeline_client(AsyncMock())
        store = RedisDedupeStore(async_redis)

        await store.mark_processed("msg-3", ttl=3600)

        pipeline.setex.assert_called_once_with("dedupe:msg-3", 3600, "1")
        pipeline.delete.assert_called_once_with("dedupe:processing:msg-3")
        pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unmark_processing_removes_lock(self) -> None:
        """unmark_processing deve liberar lock para retry."""
        async_redis = MagicMock()
        async_redis.delete = AsyncMock()
        store = RedisDedupeStore(async_redis)

        await store.unmark_processing("msg-4")

        async_redis.delete.assert_awaited_once_with("dedupe:processing:msg-4")

    @pytest.mark.asyncio
    async def test_is_duplicate_raises_without_async_client(self) -> None:
        store = RedisDedupeStore(None)

        with pytest.raises(RuntimeError, match="Async Redis client"):
            await store.is_duplicate("msg-5")

    @pytest.mark.asyncio
    async def test_is_duplicate_wraps_pipeline_errors(self) -> None:
        async_redis, _ = _pipeline_client(AsyncMock(side_effect=Exception("redis down")))
        store = RedisDedupeStore(async_redis)

        with pytest.raises(RedisConnectionError, match="consultar dedupe"):
            await store.is_duplicate("msg-5")

    @pytest.mark.asyncio
    async def test_mark_processing_wraps_redis_errors(self) -> None:
        async_redis = MagicMock()
        async_redis.set = AsyncMock(side_effect=Exception("redis down"))
        store = RedisDedupeStore(async_redis)

        with pytest.raises(RedisConnectionError, match="marcar processamento"):
            await store.mark_processing("msg-6")

    @pytest.mark.asyncio
    async def test_mark_processed_wraps_pipeline_errors(self) -> None:
        async_redis, _ = _pipeline_client(AsyncMock(side_effect=Exception("redis down")))
        store = RedisDedupeStore(async_redis)

        with pytest.raises(RedisConnectionError, match="concluir dedupe"):
            await store.mark_processed("msg-7")

    @pytest.mark.asyncio
    async def test_unmark_processing_wraps_redis_errors(self) -> None:
        async_redis = MagicMock()
        async_redis.delete = AsyncMock(side_effect=Exception("redis down"))
        store = RedisDedupeStore(async_redis)

        with pytest.raises(RedisConnectionError, match="remover lock de dedupe"):
            await store.unmark_processing("msg-8")
