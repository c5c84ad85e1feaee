"""Exceções compartilhadas entre camadas (infra, domínio e transporte)."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.results import StepErrorKind


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class CrmStoreError(InfrastructureError):
    """Falha ao ler ou escrever no store de contatos/interações."""


class ContactNotFoundError(LookupError):
    """Contato inexistente para o id informado."""


class InvalidPayloadError(ValueError):
    """Payload de webhook sem o formato mínimo exigido pela fonte."""


class ProcessingAbortedError(RuntimeError):
    """Etapa obrigatória do pipeline falhou; a requisição deve retornar erro.

    Args:
        kind: Classificação da falha (StepErrorKind)
        message: Mensagem segura para o chamador (sem PII)
    """

    def __init__(self, kind: StepErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
