"""Gravação de reuniões de calendário e vínculo com participantes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.results import StepErrorKind, StepResult
from config.logging import log_step_failure
from utils.errors import CrmStoreError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.models import Meeting
    from app.protocols.crm_store import CrmTransactionProtocol

logger = logging.getLogger(__name__)


async def write_meeting(tx: CrmTransactionProtocol, meeting: Meeting) -> StepResult[Meeting]:
    """Insere a reunião. Falha aqui aborta a requisição."""
    try:
        stored = await tx.insert_meeting(meeting)
    except CrmStoreError as exc:
        return StepResult.failure(StepErrorKind.STORE_FAILURE, str(exc))

    logger.info("meeting_recorded", extra={"meeting_id": stored.id})
    return StepResult.success(stored)


async def link_meeting_contacts(
    tx: CrmTransactionProtocol,
    meeting_id: int,
    contact_ids: Iterable[int],
) -> StepResult[int]:
    """Cria um vínculo meeting_contacts por contato.

    Cada falha é logada e pulada; as demais associações seguem.

    Returns:
        StepResult com o número de vínculos criados.
    """
    linked = 0
    for contact_id in contact_ids:
        try:
            async with tx.savepoint():
                await tx.link_meeting_contact(meeting_id, contact_id)
        except (CrmStoreError, LookupError) as exc:
            log_step_failure(
                logger,
                "link_meeting_contact",
                exc,
                meeting_id=meeting_id,
                contact_id=contact_id,
            )
            continue
        linked += 1

    return StepResult.success(linked)
