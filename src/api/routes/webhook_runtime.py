"""Runtime compartilhado pelos endpoints de webhook.

Concentra o que é igual para todas as fontes:
- correlation_id por request (header x-correlation-id ou uuid4)
- leitura do corpo bruto e tradução de erros em HTTP 500 `{"error": ...}`
- ciclo de dedupe em volta do processamento
- formato das respostas de sucesso/skip
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from api.connectors.webhook import WebhookRequestError
from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from utils.errors import InvalidPayloadError, ProcessingAbortedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from app.domain.events import InboundEvent
    from app.services.delivery_dedupe import DeliveryDeduplicator

logger = logging.getLogger(__name__)

DUPLICATE_DELIVERY_MESSAGE = "Duplicate delivery ignored"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def success_response(**fields: Any) -> JSONResponse:
    return JSONResponse(content={"success": True, **fields}, status_code=status.HTTP_200_OK)


def skip_response(message: str) -> JSONResponse:
    """Resposta 200 para entrega ignorada deliberadamente."""
    return success_response(message=message)


def error_response(message: str) -> JSONResponse:
    return JSONResponse(
        content={"error": message},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def handle_webhook(
    request: Request,
    *,
    source: str,
    handler: Callable[[bytes], Awaitable[JSONResponse]],
) -> JSONResponse:
    """Executa o handler da fonte com correlation_id e tradução de erros.

    Args:
        request: Request HTTP recebido
        source: Nome da fonte (usado nos logs)
        handler: Recebe o corpo bruto e devolve a resposta de sucesso

    Returns:
        Resposta do handler ou 500 `{"error": <mensagem>}`
    """
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        raw_body = await request.body()
        logger.info(
            "webhook_received",
            extra={
                "channel": source,
                "correlation_id": get_correlation_id(),
                "payload_size": len(raw_body),
            },
        )
        return await handler(raw_body)

    except WebhookRequestError as exc:
        logger.warning(
            "webhook_json_invalid",
            extra={"channel": source, "error": str(exc)},
        )
        return error_response(str(exc))

    except InvalidPayloadError as exc:
        logger.warning(
            "webhook_payload_invalid",
            extra={"channel": source, "error": str(exc)},
        )
        return error_response(str(exc))

    except ProcessingAbortedError as exc:
        logger.error(
            "webhook_processing_aborted",
            extra={"channel": source, "error_kind": str(exc.kind)},
        )
        return error_response(str(exc))

    except Exception:
        logger.exception("webhook_processing_failed", extra={"channel": source})
        return error_response(INTERNAL_ERROR_MESSAGE)

    finally:
        reset_correlation_id(token)


async def process_delivery(
    deduplicator: DeliveryDeduplicator | None,
    key: str,
    work: Callable[[], Awaitable[JSONResponse]],
) -> JSONResponse:
    """Executa `work` uma única vez por chave de entrega.

    Sem deduplicator (dedupe desligado) executa direto. Entrega repetida
    devolve 200 com a mensagem de replay e não toca o store.
    """
    if deduplicator is None:
        return await work()

    if await deduplicator.is_duplicate(key):
        return _duplicate_response(key)

    async with deduplicator.processing(key) as claimed:
        if not claimed:
            return _duplicate_response(key)
        return await work()


def _duplicate_response(key: str) -> JSONResponse:
    logger.info(
        "webhook_duplicate_ignored",
        extra={"channel": key.split(":", 1)[0]},
    )
    return skip_response(DUPLICATE_DELIVERY_MESSAGE)


def delivery_message_id(events: Sequence[InboundEvent]) -> str | None:
    """Id da entrega quando ela carrega exatamente um evento identificado."""
    if len(events) == 1:
        return events[0].message_id
    return None
