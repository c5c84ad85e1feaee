"""Testes do use case de reuniões de calendário."""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.events import CalendarEvent
from app.domain.models import Contact, InteractionType
from app.infra.stores import MemoryCrmStore
from app.use_cases import RecordMeetingUseCase
from tests.fakes.fake_crm_store import FlakyCrmStore
from utils.errors import ProcessingAbortedError


def _event(*emails: str) -> CalendarEvent:
    return CalendarEvent(
        attendee_emails=emails,
        event_date="2024-03-01T23:30:00-03:00",
        summary="Kickoff",
        description="Agenda inicial",
    )


@pytest.mark.asyncio
async def test_records_meeting_and_links_attendees() -> None:
    store = MemoryCrmStore()

    result = await RecordMeetingUseCase(store).execute(_event("a@x.com", "b@y.com"))

    assert result.meeting_id == 1
    assert result.contacts_processed == 2
    assert result.contacts_linked == 2
    [meeting] = store.meetings()
    assert meeting.meeting_name == "Kickoff"
    assert meeting.interaction_date == date(2024, 3, 1)
    assert meeting.interaction_type == InteractionType.GOOGLE_MEET
    assert {c.last_interaction for c in store.contacts()} == {date(2024, 3, 1)}
    assert sorted(store.meeting_contacts()) == [(1, 1), (1, 2)]


@pytest.mark.asyncio
async def test_reuses_existing_contacts() -> None:
    store = MemoryCrmStore()
    async with store.transaction() as tx:
        await tx.insert_contact(Contact(email="a@x.com", last_interaction=date(2024, 6, 1)))

    await RecordMeetingUseCase(store).execute(_event("a@x.com"))

    [contact] = store.contacts()
    assert contact.last_interaction == date(2024, 6, 1)
    assert store.meeting_contacts() == [(1, contact.id)]


@pytest.mark.asyncio
async def test_meeting_without_attendees_is_still_recorded() -> None:
    store = MemoryCrmStore()

    result = await RecordMeetingUseCase(store).execute(_event())

    assert result.contacts_processed == 0
    assert len(store.meetings()) == 1


@pytest.mark.asyncio
async def test_link_failures_do_not_abort() -> None:
    store = FlakyCrmStore(failing={"link_meeting_contact"})

    result = await RecordMeetingUseCase(store).execute(_event("a@x.com"))

    assert result.contacts_processed == 1
    assert result.contacts_linked == 0
    assert len(store.meetings()) == 1


@pytest.mark.asyncio
async def test_contact_failures_are_skipped() -> None:
    store = FlakyCrmStore(failing={"insert_contact"})

    result = await RecordMeetingUseCase(store).execute(_event("a@x.com", "b@y.com"))

    assert result.contacts_processed == 0
    assert len(store.meetings()) == 1
    assert store.meeting_contacts() == []


@pytest.mark.asyncio
async def test_meeting_failure_aborts_and_rolls_back_contacts() -> None:
    store = FlakyCrmStore(failing={"insert_meeting"})

    with pytest.raises(ProcessingAbortedError, match="Failed to record meeting"):
        await RecordMeetingUseCase(store).execute(_event("a@x.com"))

    assert store.contacts() == []
    assert store.meetings() == []
