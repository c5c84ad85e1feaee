"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="crm_relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("contact_created", extra={"source": "email"})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime
"""

from config.logging.config import (
    configure_logging,
    get_logger,
    log_step_failure,
)
from config.logging.filters import (
    CorrelationIdFilter,
    IdentifierMaskingFilter,
    mask_identifier,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "IdentifierMaskingFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_step_failure",
    "mask_identifier",
]
