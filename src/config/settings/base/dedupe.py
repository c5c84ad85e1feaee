"""Settings de dedupe/idempotência de entregas de webhook.

Fontes externas reenviam a mesma entrega (retry do provedor, replays manuais).
A chave de dedupe evita linhas de interação duplicadas.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DedupeBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class DedupeSettings:
    """Configurações de dedupe.

    Attributes:
        enabled: Ignora entregas repetidas quando True
        backend: Backend para dedupe (memory|redis)
        ttl_seconds: TTL das chaves processadas
        processing_ttl_seconds: TTL do lock durante o processamento
    """

    enabled: bool = True
    backend: DedupeBackend = "memory"
    ttl_seconds: int = 7 * 86400
    processing_ttl_seconds: int = 30

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de dedupe.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"DEDUPE_BACKEND inválido: {self.backend}")

        if self.enabled and self.backend == "memory" and not base.is_development:
            errors.append(
                "DEDUPE_BACKEND=memory proibido em staging/production. Use Redis."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("DEDUPE_BACKEND=redis requer REDIS_URL configurado")

        if self.ttl_seconds <= 0:
            errors.append("DEDUPE_TTL_SECONDS deve ser > 0")

        if self.processing_ttl_seconds <= 0:
            errors.append("DEDUPE_PROCESSING_TTL_SECONDS deve ser > 0")

        return errors


def _load_dedupe_from_env() -> DedupeSettings:
    backend_str = os.getenv("DEDUPE_BACKEND", "memory").lower()
    backend: DedupeBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return DedupeSettings(
        enabled=os.getenv("WEBHOOK_DEDUPE_ENABLED", "true").lower() in ("true", "1", "yes"),
        backend=backend,
        ttl_seconds=int(os.getenv("DEDUPE_TTL_SECONDS", str(7 * 86400))),
        processing_ttl_seconds=int(os.getenv("DEDUPE_PROCESSING_TTL_SECONDS", "30")),
    )


@lru_cache(maxsize=1)
def get_dedupe_settings() -> DedupeSettings:
    """Retorna instância cacheada de DedupeSettings."""
    return _load_dedupe_from_env()
