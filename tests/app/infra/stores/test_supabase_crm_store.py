"""Testes do SupabaseCrmStore com cliente mockado."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.domain.models import Contact, Direction, Interaction, InteractionType, Meeting
from app.infra.stores.supabase_crm_store import SupabaseCrmStore
from utils.errors import ContactNotFoundError, CrmStoreError


def _client(data: list[dict[str, object]] | None = None) -> tuple[MagicMock, MagicMock]:
    """Cliente cujo query builder encadeia e devolve `data` no execute()."""
    query = MagicMock()
    for method in ("select", "eq", "or_", "limit", "insert", "update"):
        getattr(query, method).return_value = query
    query.execute.return_value = SimpleNamespace(data=data or [])
    client = MagicMock()
    client.table.return_value = query
    return client, query


@pytest.mark.asyncio
async def test_find_contact_by_mobile() -> None:
    client, query = _client([{"id": 3, "mobile": "+15551234567"}])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        contact = await tx.find_contact_by_mobile("+15551234567")

    assert contact is not None and contact.id == 3
    client.table.assert_called_with("contacts")
    query.eq.assert_called_with("mobile", "+15551234567")
    query.limit.assert_called_with(1)


@pytest.mark.asyncio
async def test_find_contact_by_email_checks_all_columns() -> None:
    client, query = _client([])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        contact = await tx.find_contact_by_email("ada@x.com")

    assert contact is None
    query.or_.assert_called_once_with("email.eq.ada@x.com,email2.eq.ada@x.com,email3.eq.ada@x.com")


@pytest.mark.asyncio
async def test_insert_contact_sends_row_without_id() -> None:
    client, query = _client([{"id": 9, "email": "ada@x.com"}])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        created = await tx.insert_contact(Contact(email="ada@x.com", first_name="Ada"))

    assert created.id == 9
    sent = query.insert.call_args[0][0]
    assert "id" not in sent
    assert sent["email"] == "ada@x.com"
    assert sent["first_name"] == "Ada"


@pytest.mark.asyncio
async def test_insert_contact_without_returned_row_raises() -> None:
    client, _ = _client([])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        with pytest.raises(CrmStoreError):
            await tx.insert_contact(Contact(email="ada@x.com"))


@pytest.mark.asyncio
async def test_get_last_interaction_missing_contact() -> None:
    client, _ = _client([])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        with pytest.raises(ContactNotFoundError):
            await tx.get_last_interaction(1)


@pytest.mark.asyncio
async def test_set_last_interaction_sends_iso_date() -> None:
    client, query = _client([])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        await tx.set_last_interaction(5, date(2024, 1, 15))

    query.update.assert_called_once_with({"last_interaction": "2024-01-15"})
    query.eq.assert_called_with("id", 5)


@pytest.mark.asyncio
async def test_interaction_and_meeting_inserts() -> None:
    client, query = _client([{"id": 1, "interaction_date": "2024-01-15", "meeting_name": "Kickoff",
                              "interaction_type": "Google Meet"}])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        meeting = await tx.insert_meeting(
            Meeting(meeting_name="Kickoff", interaction_date=date(2024, 1, 15))
        )
        await tx.link_meeting_contact(1, 2)

    assert meeting.id == 1
    client.table.assert_any_call("meetings")
    client.table.assert_any_call("meeting_contacts")
    query.insert.assert_any_call({"meeting_id": 1, "contact_id": 2})


@pytest.mark.asyncio
async def test_insert_interaction_serializes_enums() -> None:
    client, query = _client([])
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        await tx.insert_interaction(
            Interaction(
                interaction_date=date(2024, 1, 15),
                interaction_type=InteractionType.WHATSAPP,
                direction=Direction.OUTBOUND,
                note="hi",
            )
        )

    sent = query.insert.call_args[0][0]
    assert sent["interaction_type"] == "WhatsApp"
    assert sent["direction"] == "Outbound"
    assert sent["interaction_date"] == "2024-01-15"


@pytest.mark.asyncio
async def test_client_errors_are_wrapped() -> None:
    client, query = _client()
    query.execute.side_effect = RuntimeError("network down")
    store = SupabaseCrmStore(client)

    async with store.transaction() as tx:
        with pytest.raises(CrmStoreError, match="find_contact_by_mobile"):
            await tx.find_contact_by_mobile("+15551234567")


@pytest.mark.asyncio
async def test_ping_selects_one_row() -> None:
    client, query = _client([])
    store = SupabaseCrmStore(client)

    await store.ping()

    query.select.assert_called_with("id")
    query.limit.assert_called_with(1)
