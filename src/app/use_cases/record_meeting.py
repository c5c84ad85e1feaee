"""Use case: registra reunião de calendário e vincula participantes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from app.domain.formatting import format_calendar_date
from app.domain.models import Meeting
from app.domain.results import StepErrorKind
from app.services.contact_resolver import find_or_create_contact
from app.services.last_interaction import update_if_newer
from app.services.meeting_writer import link_meeting_contacts, write_meeting
from config.logging import log_step_failure
from utils.errors import ProcessingAbortedError

if TYPE_CHECKING:
    from app.domain.events import CalendarEvent
    from app.protocols.crm_store import CrmStoreProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordMeetingResult:
    """Resultado do registro de uma reunião."""

    meeting_id: int | None
    contacts_processed: int
    contacts_linked: int


class RecordMeetingUseCase:
    """Resolve participantes, grava a reunião e os vínculos numa transação."""

    def __init__(self, store: CrmStoreProtocol) -> None:
        self._store = store

    async def execute(self, event: CalendarEvent) -> RecordMeetingResult:
        """Executa o fluxo de calendário.

        Participantes que falham na resolução são pulados; a reunião é
        gravada mesmo sem participantes.

        Raises:
            InvalidPayloadError: Se event_date for inválido.
            ProcessingAbortedError: Se a reunião não puder ser gravada.
        """
        meeting_date = date.fromisoformat(format_calendar_date(event.event_date))
        contact_ids: list[int] = []

        async with self._store.transaction() as tx:
            for email in event.attendee_emails:
                contact_result = await find_or_create_contact(tx, email, "email")
                contact = contact_result.value
                if not contact_result.ok or contact is None or contact.id is None:
                    log_step_failure(
                        logger,
                        "find_or_create_contact",
                        contact_result.error,
                        source="calendar",
                        error_kind=str(contact_result.error_kind),
                    )
                    continue
                contact_ids.append(contact.id)

                update_result = await update_if_newer(tx, contact.id, meeting_date)
                if not update_result.ok:
                    log_step_failure(
                        logger,
                        "update_last_interaction",
                        update_result.error,
                        contact_id=contact.id,
                        error_kind=str(update_result.error_kind),
                    )

            meeting_result = await write_meeting(
                tx,
                Meeting(
                    meeting_name=event.summary,
                    description=event.description,
                    interaction_date=meeting_date,
                ),
            )
            meeting = meeting_result.value
            if not meeting_result.ok or meeting is None or meeting.id is None:
                logger.error(
                    "meeting_write_failed",
                    extra={"error_kind": str(meeting_result.error_kind)},
                )
                raise ProcessingAbortedError(
                    meeting_result.error_kind or StepErrorKind.STORE_FAILURE,
                    "Failed to record meeting",
                )

            link_result = await link_meeting_contacts(tx, meeting.id, contact_ids)

        logger.info(
            "calendar_event_recorded",
            extra={
                "meeting_id": meeting.id,
                "contacts_processed": len(contact_ids),
                "contacts_linked": link_result.value,
            },
        )
        return RecordMeetingResult(
            meeting_id=meeting.id,
            contacts_processed=len(contact_ids),
            contacts_linked=link_result.value or 0,
        )
