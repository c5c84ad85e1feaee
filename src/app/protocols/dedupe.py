"""Protocolos de domínio para stores de dedupe.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Contrato assíncrono para dedupe de entregas de webhook.

    Ciclo de uma entrega:
    - is_duplicate(key) -> True se já processada ou em processamento
    - mark_processing(key, ttl) -> reivindica o lock (SET NX); False se outra
      entrega já o detém ou a chave já foi processada
    - mark_processed(key, ttl) -> marca final após commit (remove o lock)
    - unmark_processing(key) -> libera o lock quando o processamento falha
    """

    @abstractmethod
    async def is_duplicate(self, key: str, ttl: int = 3600) -> bool:
        """Verifica se a chave já foi processada ou está em processamento.

        Args:
            key: Chave única (ex.: "whatsapp:<message_uid>")
            ttl: TTL padrão em segundos

        Returns:
            True se já foi vista (duplicado); False caso contrário.
        """

    @abstractmethod
    async def mark_processing(self, key: str, ttl: int = 30) -> bool:
        """Reivindica a chave para processamento com TTL curto.

        Returns:
            True se o lock foi obtido; False se a chave já está em
            processamento ou já foi processada.
        """

    @abstractmethod
    async def mark_processed(self, key: str, ttl: int = 3600) -> None:
        """Marca a chave como processada.

        Args:
            key: Chave única
            ttl: TTL em segundos
        """

    @abstractmethod
    async def unmark_processing(self, key: str) -> None:
        """Remove a marca de processamento para permitir novo envio."""
