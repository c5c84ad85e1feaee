"""Idempotência de entregas de webhook.

Provedores reenviam a mesma entrega (retry, replay manual). A chave é
`<fonte>:<id da mensagem>` ou, sem id, `<fonte>:payload:<sha256 do corpo>`.
A marca final só é gravada após o commit; em falha o lock é liberado para
que o reenvio do provedor seja processado.
"""

from __future__ import annotations

import hashlib
import json
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.protocols.dedupe import AsyncDedupeProtocol

logger = logging.getLogger(__name__)


def compute_delivery_key(
    source: str,
    message_id: str | None,
    raw_body: bytes | None = None,
    payload: Any = None,
) -> str:
    """Gera chave idempotente baseada no id da mensagem ou hash do payload.

    Args:
        source: Nome da fonte (whatsapp, email, hubspot, calendar)
        message_id: Id estável da entrega, quando a fonte fornece
        raw_body: Corpo bruto do request
        payload: Payload já parseado (usado se não houver corpo bruto)

    Returns:
        Identificador estável da entrega
    """
    if message_id:
        return f"{source}:{message_id}"

    digest = hashlib.sha256(
        raw_body or json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()
    return f"{source}:payload:{digest}"


class DeliveryDeduplicator:
    """Envolve o processamento de uma entrega com o ciclo de dedupe.

    Args:
        store: Store de dedupe (memory/redis)
        ttl_seconds: TTL da marca de entrega processada
        processing_ttl_seconds: TTL do lock durante o processamento
    """

    def __init__(
        self,
        store: AsyncDedupeProtocol,
        ttl_seconds: int = 7 * 86400,
        processing_ttl_seconds: int = 30,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._processing_ttl = processing_ttl_seconds

    async def is_duplicate(self, key: str) -> bool:
        return await self._store.is_duplicate(key, self._ttl)

    @asynccontextmanager
    async def processing(self, key: str) -> AsyncIterator[bool]:
        """Lock de processamento; marca como processada só se o bloco terminar.

        Produz False quando outra entrega já detém a chave; nesse caso o
        bloco não deve processar e nada é marcado.
        """
        if not await self._store.mark_processing(key, self._processing_ttl):
            yield False
            return
        try:
            yield True
        except BaseException:
            await self._store.unmark_processing(key)
            raise
        await self._store.mark_processed(key, self._ttl)
        logger.debug("delivery_marked_processed", extra={"delivery_key": key[:24]})
