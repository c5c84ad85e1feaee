"""Gravação de interações (append-only)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.models import Contact, Interaction
from app.domain.results import StepErrorKind, StepResult
from utils.errors import CrmStoreError

if TYPE_CHECKING:
    from datetime import date

    from app.domain.events import InboundEvent
    from app.protocols.crm_store import CrmTransactionProtocol

logger = logging.getLogger(__name__)


def build_interaction(
    event: InboundEvent,
    interaction_date: date,
    contact: Contact | None,
    normalized_identifier: str | None,
) -> Interaction:
    """Monta a linha de interação com cópias desnormalizadas do contato.

    Sem contato resolvido, as cópias vêm do identificador do próprio evento.
    """
    if event.identifier_kind == "phone":
        contact_mobile = normalized_identifier or (contact.mobile if contact else None)
        contact_email = contact.email if contact else None
    else:
        contact_email = normalized_identifier or (contact.email if contact else None)
        contact_mobile = contact.mobile if contact else None

    return Interaction(
        interaction_date=interaction_date,
        interaction_type=event.interaction_type,
        direction=event.direction,
        note=event.text or "",
        contact_id=contact.id if contact else None,
        contact_email=contact_email,
        contact_mobile=contact_mobile,
    )


async def write_interaction(
    tx: CrmTransactionProtocol,
    interaction: Interaction,
) -> StepResult[Interaction]:
    """Insere a interação. Falha aqui é fatal para a requisição."""
    try:
        stored = await tx.insert_interaction(interaction)
    except CrmStoreError as exc:
        return StepResult.failure(StepErrorKind.STORE_FAILURE, str(exc))

    logger.info(
        "interaction_recorded",
        extra={
            "interaction_id": stored.id,
            "contact_id": stored.contact_id,
            "interaction_type": str(stored.interaction_type),
            "direction": str(stored.direction),
        },
    )
    return StepResult.success(stored)
