"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import asyncio
import copy
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from app.domain.models import Contact, Interaction, Meeting
from app.protocols.crm_store import CrmStoreProtocol, CrmTransactionProtocol
from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import ContactNotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from datetime import date


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at
        self._processing: dict[str, float] = {}

    def _cleanup_expired(self) -> None:
        """Remove entradas expiradas."""
        now = time.time()
        for table in (self._store, self._processing):
            expired = [k for k, v in table.items() if v < now]
            for k in expired:
                del table[k]

    async def is_duplicate(self, key: str, ttl: int = 3600) -> bool:
        """Verifica se chave já foi processada ou está em processamento."""
        self._cleanup_expired()
        return key in self._store or key in self._processing

    async def mark_processing(self, key: str, ttl: int = 30) -> bool:
        self._cleanup_expired()
        if key in self._store or key in self._processing:
            return False
        self._processing[key] = time.time() + ttl
        return True

    async def mark_processed(self, key: str, ttl: int = 3600) -> None:
        """Marca chave como processada (async)."""
        self._store[key] = time.time() + ttl
        self._processing.pop(key, None)

    async def unmark_processing(self, key: str) -> None:
        self._processing.pop(key, None)


class _Tables:
    """Linhas por tabela + contadores de id (snapshot barato via deepcopy)."""

    def __init__(self) -> None:
        self.rows: dict[str, dict[int, dict[str, Any]]] = {
            "contacts": {},
            "interactions": {},
            "meetings": {},
        }
        self.meeting_contacts: list[tuple[int, int]] = []
        self.next_ids: dict[str, int] = {name: 1 for name in self.rows}

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        row_id = self.next_ids[table]
        self.next_ids[table] += 1
        stored = {**row, "id": row_id}
        self.rows[table][row_id] = stored
        return dict(stored)


class MemoryCrmTransaction(CrmTransactionProtocol):
    """Transação sobre as tabelas em memória do MemoryCrmStore."""

    def __init__(self, store: MemoryCrmStore) -> None:
        self._store = store

    @property
    def _tables(self) -> _Tables:
        return self._store._tables

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        snapshot = copy.deepcopy(self._tables)
        try:
            yield
        except BaseException:
            self._store._tables = snapshot
            raise

    async def find_contact_by_mobile(self, mobile: str) -> Contact | None:
        for row in self._tables.rows["contacts"].values():
            if row.get("mobile") == mobile:
                return Contact.from_row(row)
        return None

    async def find_contact_by_email(self, email: str) -> Contact | None:
        for row in self._tables.rows["contacts"].values():
            if email in (row.get("email"), row.get("email2"), row.get("email3")):
                return Contact.from_row(row)
        return None

    async def insert_contact(self, contact: Contact) -> Contact:
        return Contact.from_row(self._tables.insert("contacts", contact.to_row()))

    async def get_last_interaction(self, contact_id: int) -> date | None:
        row = self._tables.rows["contacts"].get(contact_id)
        if row is None:
            raise ContactNotFoundError(f"contato {contact_id} não encontrado")
        return Contact.from_row(row).last_interaction

    async def set_last_interaction(self, contact_id: int, value: date) -> None:
        row = self._tables.rows["contacts"].get(contact_id)
        if row is None:
            raise ContactNotFoundError(f"contato {contact_id} não encontrado")
        row["last_interaction"] = value.isoformat()

    async def insert_interaction(self, interaction: Interaction) -> Interaction:
        return Interaction.from_row(self._tables.insert("interactions", interaction.to_row()))

    async def insert_meeting(self, meeting: Meeting) -> Meeting:
        return Meeting.from_row(self._tables.insert("meetings", meeting.to_row()))

    async def link_meeting_contact(self, meeting_id: int, contact_id: int) -> None:
        if meeting_id not in self._tables.rows["meetings"]:
            raise LookupError(f"reunião {meeting_id} não encontrada")
        if contact_id not in self._tables.rows["contacts"]:
            raise ContactNotFoundError(f"contato {contact_id} não encontrado")
        self._tables.meeting_contacts.append((meeting_id, contact_id))


class MemoryCrmStore(CrmStoreProtocol):
    """Store CRM em memória — apenas para dev/test.

    Transações são serializadas por um asyncio.Lock; em erro, as tabelas
    voltam ao snapshot tirado na abertura.
    """

    def __init__(self) -> None:
        self._tables = _Tables()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[CrmTransactionProtocol]:
        async with self._lock:
            snapshot = copy.deepcopy(self._tables)
            try:
                yield MemoryCrmTransaction(self)
            except BaseException:
                self._tables = snapshot
                raise

    async def ping(self) -> None:
        return None

    # Leitura direta (testes e inspeção em dev)
    def contacts(self) -> list[Contact]:
        return [Contact.from_row(row) for row in self._tables.rows["contacts"].values()]

    def interactions(self) -> list[Interaction]:
        return [Interaction.from_row(row) for row in self._tables.rows["interactions"].values()]

    def meetings(self) -> list[Meeting]:
        return [Meeting.from_row(row) for row in self._tables.rows["meetings"].values()]

    def meeting_contacts(self) -> list[tuple[int, int]]:
        return list(self._tables.meeting_contacts)
