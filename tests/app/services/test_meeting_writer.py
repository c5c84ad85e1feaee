"""Testes da gravação de reuniões e vínculos."""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.models import Contact, Meeting
from app.domain.results import StepErrorKind
from app.infra.stores import MemoryCrmStore
from app.services.meeting_writer import link_meeting_contacts, write_meeting
from tests.fakes.fake_crm_store import FlakyCrmStore


@pytest.mark.asyncio
async def test_write_meeting_assigns_id() -> None:
    store = MemoryCrmStore()

    async with store.transaction() as tx:
        result = await write_meeting(tx, Meeting(interaction_date=date(2024, 3, 1)))

    assert result.ok
    assert result.value is not None and result.value.id == 1
    assert len(store.meetings()) == 1


@pytest.mark.asyncio
async def test_write_meeting_failure_is_store_failure() -> None:
    store = FlakyCrmStore(failing={"insert_meeting"})

    async with store.transaction() as tx:
        result = await write_meeting(tx, Meeting(interaction_date=date(2024, 3, 1)))

    assert result.error_kind == StepErrorKind.STORE_FAILURE


@pytest.mark.asyncio
async def test_link_skips_failed_associations() -> None:
    store = MemoryCrmStore()
    async with store.transaction() as tx:
        contact = await tx.insert_contact(Contact(email="a@x.com"))
        meeting = await tx.insert_meeting(Meeting(interaction_date=date(2024, 3, 1)))
        assert contact.id is not None and meeting.id is not None
        # 999 não existe: vínculo falha, os demais seguem
        result = await link_meeting_contacts(tx, meeting.id, [contact.id, 999])

    assert result.value == 1
    assert store.meeting_contacts() == [(meeting.id, contact.id)]


@pytest.mark.asyncio
async def test_link_store_errors_are_swallowed() -> None:
    store = FlakyCrmStore(failing={"link_meeting_contact"})
    async with store.transaction() as tx:
        contact = await tx.insert_contact(Contact(email="a@x.com"))
        meeting = await tx.insert_meeting(Meeting(interaction_date=date(2024, 3, 1)))
        assert contact.id is not None and meeting.id is not None
        result = await link_meeting_contacts(tx, meeting.id, [contact.id])

    assert result.ok
    assert result.value == 0
    assert store.meeting_contacts() == []
