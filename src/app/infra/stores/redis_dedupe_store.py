"""Redis Dedupe Store — dedupe de entregas de webhook com Redis.

Cada entrega passa por dois estados:
- `dedupe:processing:<key>`: lock curto enquanto a transação roda
- `dedupe:<key>`: marca final, gravada apenas após o commit

Contrato de Keys:
    As keys devem ser IDs opacos ou hashes (ex.: message_uid, SHA256).
    NUNCA passar dados sensíveis (PII, telefones, emails) como key.
    Keys são logadas parcialmente em DEBUG; dados sensíveis vazariam.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de dedupe
DEDUPE_PREFIX = "dedupe:"


def _mask_key(key: str) -> str:
    return key[:12] + "..." if len(key) > 12 else key


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis assíncrono.

    Args:
        async_redis_client: Cliente redis.asyncio
    """

    def __init__(self, async_redis_client: AsyncRedis[bytes] | None) -> None:
        self._async_redis = async_redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{DEDUPE_PREFIX}{key}"

    def _processing_key(self, key: str) -> str:
        """Gera chave Redis para lock temporário de processamento."""
        return f"{DEDUPE_PREFIX}processing:{key}"

    def _client(self) -> AsyncRedis[bytes]:
        if self._async_redis is None:
            msg = "Async Redis client não configurado"
            raise RuntimeError(msg)
        return self._async_redis

    async def is_duplicate(self, key: str, ttl: int = 3600) -> bool:
        """Verifica se chave já foi processada ou está em processamento.

        Args:
            key: Chave única da entrega
            ttl: TTL padrão (não usado na verificação, apenas para compatibilidade)

        Returns:
            True se duplicado, False se novo
        """
        client = self._client()
        try:
            # Verificação conjunta reduz janela de race entre check e mark.
            pipeline = client.pipeline()
            pipeline.exists(self._key(key))
            pipeline.exists(self._processing_key(key))
            exists_processed, exists_processing = await pipeline.execute()
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc

        is_duplicate = bool(exists_processed or exists_processing)
        if is_duplicate:
            logger.debug("dedupe_duplicate_detected", extra={"key": _mask_key(key)})
        return is_duplicate

    async def mark_processing(self, key: str, ttl: int = 30) -> bool:
        """Reivindica o lock de processamento com SET NX EX.

        Returns:
            True se o lock foi obtido; False se outra entrega já o detém
            ou se a chave já foi marcada como processada.
        """
        client = self._client()
        try:
            claimed = await client.set(self._processing_key(key), "1", nx=True, ex=ttl)
            if not claimed:
                logger.debug("dedupe_claim_rejected", extra={"key": _mask_key(key)})
                return False
            # Lock livre não garante chave nova: mark_processed apaga o lock
            # ao gravar a marca final
            if await client.exists(self._key(key)):
                await client.delete(self._processing_key(key))
                logger.debug("dedupe_duplicate_detected", extra={"key": _mask_key(key)})
                return False
        except Exception as exc:
            raise RedisConnectionError("Falha ao marcar processamento no Redis") from exc
        return True

    async def mark_processed(self, key: str, ttl: int = 3600) -> None:
        """Marca chave como processada e remove o lock de processamento."""
        client = self._client()
        try:
            pipeline = client.pipeline()
            pipeline.setex(self._key(key), ttl, "1")
            pipeline.delete(self._processing_key(key))
            await pipeline.execute()
        except Exception as exc:
            raise RedisConnectionError("Falha ao concluir dedupe no Redis") from exc
        logger.debug("dedupe_marked", extra={"key": _mask_key(key), "ttl": ttl})

    async def unmark_processing(self, key: str) -> None:
        """Remove marca de processamento em falhas de pipeline."""
        client = self._client()
        try:
            await client.delete(self._processing_key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao remover lock de dedupe no Redis") from exc
