"""Filters de logging: contexto da entrega e mascaramento de identificadores.

- CorrelationIdFilter: injeta correlation_id e service em todo record
- IdentifierMaskingFilter: mascara telefones/emails passados por engano em `extra`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

# Campos de `extra` que carregam identificadores de contato
IDENTIFIER_FIELDS = frozenset(
    {
        "phone",
        "mobile",
        "email",
        "identifier",
        "contact_email",
        "contact_mobile",
        "from_email",
        "to_email",
    }
)


def mask_identifier(value: str | None, visible: int = 4) -> str:
    """Mascara telefone/email para logs, mantendo só o final.

    Exemplo:
        mask_identifier("+15551234567") -> "***4567"
    """
    if not value:
        return ""
    if len(value) <= visible:
        return "***"
    return f"***{value[-visible:]}"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço (ex: crm_relay)
        correlation_id_getter: Retorna o correlation_id da entrega atual;
            sem getter o campo fica vazio.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        # correlation_id explícito em `extra` tem precedência
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class IdentifierMaskingFilter(logging.Filter):
    """Substitui valores de campos de identificador por `***<final>`."""

    def __init__(self, fields: Iterable[str] = IDENTIFIER_FIELDS) -> None:
        super().__init__()
        self._fields = frozenset(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for field in self._fields:
            value = record.__dict__.get(field)
            if isinstance(value, str) and not value.startswith("***"):
                record.__dict__[field] = mask_identifier(value)
        return True
