"""Configuração centralizada de logging.

Funções para configurar logging estruturado JSON com:
- Campos obrigatórios (correlation_id, service, level, logger, message)
- Níveis configuráveis por ambiente
- Registro padronizado de falhas best-effort (etapas que não abortam o webhook)

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="crm_relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("interaction_recorded", extra={"source": "whatsapp"})

Telefones, emails e textos de mensagem não vão para os logs; campos de
identificador em `extra` são mascarados pelo IdentifierMaskingFilter.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, IdentifierMaskingFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "crm_relay"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez na inicialização do serviço (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função opcional que retorna o correlation_id
            do contexto atual (ex: de ContextVar).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(IdentifierMaskingFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    O filter injeta automaticamente service e correlation_id.
    """
    return logging.getLogger(name)


def log_step_failure(
    logger: logging.Logger,
    step: str,
    error: BaseException | str | None,
    **context: object,
) -> None:
    """Log observável de etapa best-effort que falhou sem abortar o webhook.

    Args:
        logger: Logger instance.
        step: Nome da etapa (ex: "update_last_interaction").
        error: Exceção ou mensagem da falha.
        **context: Campos extras sem PII (ex: contact_id, source).

    Exemplo:
        log_step_failure(logger, "link_meeting_contact", exc, meeting_id=12)
    """
    extra: dict[str, object] = {"step": step, "step_failed": True, **context}
    if isinstance(error, BaseException):
        extra["error_type"] = type(error).__name__
        extra["error"] = str(error)
    elif error:
        extra["error"] = error

    logger.warning("Step %s failed; continuing", step, extra=extra)
