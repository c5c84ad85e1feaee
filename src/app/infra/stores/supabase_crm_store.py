"""Supabase CRM Store — contatos/interações via API REST do Supabase.

O cliente supabase-py é síncrono; cada chamada roda em `asyncio.to_thread`.

A API REST não oferece transação entre statements: `transaction()` e
`savepoint()` são fronteiras sem efeito e uma falha no meio do fluxo
deixa as escritas anteriores gravadas.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from app.domain.models import Contact, Interaction, Meeting
from app.protocols.crm_store import CrmStoreProtocol, CrmTransactionProtocol
from utils.errors import ContactNotFoundError, CrmStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from datetime import date

    from supabase import Client as SupabaseClient

logger = logging.getLogger(__name__)

CONTACTS_TABLE = "contacts"
INTERACTIONS_TABLE = "interactions"
MEETINGS_TABLE = "meetings"
MEETING_CONTACTS_TABLE = "meeting_contacts"


class SupabaseCrmTransaction(CrmTransactionProtocol):
    """Operações sobre o cliente Supabase (cada uma é um round-trip)."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def _run(self, operation: str, fn: Callable[[], Any]) -> list[dict[str, Any]]:
        try:
            response = await asyncio.to_thread(fn)
        except Exception as exc:
            logger.error(
                "supabase_operation_failed",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise CrmStoreError(f"Falha no Supabase ({operation})") from exc
        return list(getattr(response, "data", None) or [])

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        yield

    async def find_contact_by_mobile(self, mobile: str) -> Contact | None:
        rows = await self._run(
            "find_contact_by_mobile",
            lambda: self._client.table(CONTACTS_TABLE)
            .select("*")
            .eq("mobile", mobile)
            .limit(1)
            .execute(),
        )
        return Contact.from_row(rows[0]) if rows else None

    async def find_contact_by_email(self, email: str) -> Contact | None:
        email_filter = f"email.eq.{email},email2.eq.{email},email3.eq.{email}"
        rows = await self._run(
            "find_contact_by_email",
            lambda: self._client.table(CONTACTS_TABLE)
            .select("*")
            .or_(email_filter)
            .limit(1)
            .execute(),
        )
        return Contact.from_row(rows[0]) if rows else None

    async def insert_contact(self, contact: Contact) -> Contact:
        row = contact.to_row()
        rows = await self._run(
            "insert_contact",
            lambda: self._client.table(CONTACTS_TABLE).insert(row).execute(),
        )
        if not rows:
            raise CrmStoreError("Supabase não retornou o contato inserido")
        return Contact.from_row(rows[0])

    async def get_last_interaction(self, contact_id: int) -> date | None:
        rows = await self._run(
            "get_last_interaction",
            lambda: self._client.table(CONTACTS_TABLE)
            .select("id,last_interaction")
            .eq("id", contact_id)
            .limit(1)
            .execute(),
        )
        if not rows:
            raise ContactNotFoundError(f"contato {contact_id} não encontrado")
        return Contact.from_row(rows[0]).last_interaction

    async def set_last_interaction(self, contact_id: int, value: date) -> None:
        await self._run(
            "set_last_interaction",
            lambda: self._client.table(CONTACTS_TABLE)
            .update({"last_interaction": value.isoformat()})
            .eq("id", contact_id)
            .execute(),
        )

    async def insert_interaction(self, interaction: Interaction) -> Interaction:
        row = interaction.to_row()
        rows = await self._run(
            "insert_interaction",
            lambda: self._client.table(INTERACTIONS_TABLE).insert(row).execute(),
        )
        return Interaction.from_row(rows[0]) if rows else interaction

    async def insert_meeting(self, meeting: Meeting) -> Meeting:
        row = meeting.to_row()
        rows = await self._run(
            "insert_meeting",
            lambda: self._client.table(MEETINGS_TABLE).insert(row).execute(),
        )
        if not rows:
            raise CrmStoreError("Supabase não retornou a reunião inserida")
        return Meeting.from_row(rows[0])

    async def link_meeting_contact(self, meeting_id: int, contact_id: int) -> None:
        await self._run(
            "link_meeting_contact",
            lambda: self._client.table(MEETING_CONTACTS_TABLE)
            .insert({"meeting_id": meeting_id, "contact_id": contact_id})
            .execute(),
        )


class SupabaseCrmStore(CrmStoreProtocol):
    """Store CRM sobre Supabase (PostgREST).

    Args:
        client: Cliente supabase-py já autenticado
    """

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client
        logger.warning(
            "crm_store_without_transactions",
            extra={"backend": "supabase"},
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[CrmTransactionProtocol]:
        yield SupabaseCrmTransaction(self._client)

    async def ping(self) -> None:
        await SupabaseCrmTransaction(self._client)._run(
            "ping",
            lambda: self._client.table(CONTACTS_TABLE).select("id").limit(1).execute(),
        )
