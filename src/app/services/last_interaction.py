"""Atualização best-effort de `contacts.last_interaction`.

A data só avança: resultado = max(atual, nova), com NULL valendo -inf.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.results import StepErrorKind, StepResult
from utils.errors import ContactNotFoundError, CrmStoreError

if TYPE_CHECKING:
    from datetime import date

    from app.protocols.crm_store import CrmTransactionProtocol

logger = logging.getLogger(__name__)


def newer_date(current: date | None, candidate: date) -> date:
    """max(current, candidate) tratando None como menor que qualquer data."""
    if current is None or candidate > current:
        return candidate
    return current


async def update_if_newer(
    tx: CrmTransactionProtocol,
    contact_id: int,
    interaction_date: date,
) -> StepResult[date]:
    """Avança last_interaction se a nova data for estritamente maior.

    Returns:
        StepResult com a data resultante (atual ou nova). Erros são
        NOT_FOUND ou STORE_FAILURE; o chamador loga e segue.
    """
    try:
        async with tx.savepoint():
            current = await tx.get_last_interaction(contact_id)
            resulting = newer_date(current, interaction_date)
            if resulting == current:
                return StepResult.success(current)
            await tx.set_last_interaction(contact_id, resulting)
    except ContactNotFoundError as exc:
        return StepResult.failure(StepErrorKind.NOT_FOUND, str(exc))
    except CrmStoreError as exc:
        return StepResult.failure(StepErrorKind.STORE_FAILURE, str(exc))

    logger.debug(
        "last_interaction_advanced",
        extra={"contact_id": contact_id, "last_interaction": resulting.isoformat()},
    )
    return StepResult.success(resulting)
