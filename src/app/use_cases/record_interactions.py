"""Use case: registra eventos 1:1 (WhatsApp, email encaminhado, HubSpot).

Fluxo por evento, com o lote inteiro numa única transação do store:
1. find_or_create_contact (falha -> segue sem contato)
2. write_interaction (falha -> ProcessingAbortedError, rollback)
3. update_if_newer (falha -> loga e segue)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.domain.formatting import parse_datetime
from app.domain.results import StepErrorKind
from app.services.contact_resolver import find_or_create_contact, normalize_identifier
from app.services.interaction_writer import build_interaction, write_interaction
from app.services.last_interaction import update_if_newer
from config.logging import log_step_failure
from utils.errors import ProcessingAbortedError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.events import InboundEvent
    from app.protocols.crm_store import CrmStoreProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordInteractionsResult:
    """Resultado do registro de um lote de eventos."""

    recorded: int
    interaction_ids: tuple[int | None, ...] = ()
    contact_ids: tuple[int | None, ...] = ()
    contact_failures: int = 0
    last_interaction_failures: int = 0


class RecordInteractionsUseCase:
    """Registra interações normalizadas no store CRM."""

    def __init__(self, store: CrmStoreProtocol) -> None:
        self._store = store

    async def execute(self, events: Sequence[InboundEvent]) -> RecordInteractionsResult:
        """Processa os eventos em ordem, todos na mesma transação.

        Timestamps são validados antes de abrir a transação; se qualquer
        evento do lote falhar, nenhum é persistido e a entrega pode ser
        reenviada sem duplicar interações.

        Raises:
            InvalidPayloadError: Se o timestamp de um evento for inválido.
            ProcessingAbortedError: Se a interação não puder ser gravada.
        """
        prepared = [
            (
                event,
                parse_datetime(event.timestamp).date(),
                normalize_identifier(event.identifier, event.identifier_kind),
            )
            for event in events
        ]

        interaction_ids: list[int | None] = []
        contact_ids: list[int | None] = []
        contact_failures = 0
        update_failures = 0

        async with self._store.transaction() as tx:
            for event, interaction_date, normalized in prepared:
                contact_result = await find_or_create_contact(
                    tx, event.identifier, event.identifier_kind, event.display_name
                )
                contact = contact_result.value if contact_result.ok else None
                if not contact_result.ok:
                    contact_failures += 1
                    log_step_failure(
                        logger,
                        "find_or_create_contact",
                        contact_result.error,
                        source=str(event.source),
                        error_kind=str(contact_result.error_kind),
                    )

                interaction = build_interaction(
                    event,
                    interaction_date,
                    contact,
                    normalized,
                )
                write_result = await write_interaction(tx, interaction)
                if not write_result.ok or write_result.value is None:
                    logger.error(
                        "interaction_write_failed",
                        extra={
                            "source": str(event.source),
                            "error_kind": str(write_result.error_kind),
                        },
                    )
                    raise ProcessingAbortedError(
                        write_result.error_kind or StepErrorKind.STORE_FAILURE,
                        "Failed to record interaction",
                    )

                if contact is not None and contact.id is not None:
                    update_result = await update_if_newer(
                        tx, contact.id, interaction.interaction_date
                    )
                    if not update_result.ok:
                        update_failures += 1
                        log_step_failure(
                            logger,
                            "update_last_interaction",
                            update_result.error,
                            contact_id=contact.id,
                            error_kind=str(update_result.error_kind),
                        )

                interaction_ids.append(write_result.value.id)
                contact_ids.append(contact.id if contact else None)

        return RecordInteractionsResult(
            recorded=len(interaction_ids),
            interaction_ids=tuple(interaction_ids),
            contact_ids=tuple(contact_ids),
            contact_failures=contact_failures,
            last_interaction_failures=update_failures,
        )
