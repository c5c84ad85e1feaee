"""SQL CRM Store — SQLAlchemy async com uma transação por evento.

find-or-create + insert da interação + atualização de last_interaction
rodam na mesma `AsyncSession.begin()`; etapas best-effort usam
`begin_nested()` (SAVEPOINT).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, or_, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.domain.models import Contact, Interaction, Meeting
from app.infra.stores.sql_models import (
    Base,
    ContactRow,
    InteractionRow,
    MeetingContactRow,
    MeetingRow,
)
from app.protocols.crm_store import CrmStoreProtocol, CrmTransactionProtocol
from utils.errors import ContactNotFoundError, CrmStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from datetime import date

    from pydantic import BaseModel
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

logger = logging.getLogger(__name__)


def _column_values(model: BaseModel) -> dict[str, Any]:
    values = model.model_dump(exclude={"id"})
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


def _row_values(row: Base) -> dict[str, Any]:
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


def make_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Cria AsyncEngine; em SQLite habilita SAVEPOINT (BEGIN explícito)."""
    is_sqlite = database_url.startswith("sqlite")
    if not is_sqlite:
        kwargs.setdefault("pool_pre_ping", True)
    engine = create_async_engine(database_url, **kwargs)

    if is_sqlite:
        # pysqlite/aiosqlite abrem transação sozinhos e quebram SAVEPOINT
        @event.listens_for(engine.sync_engine, "connect")
        def _sqlite_connect(dbapi_conn: Any, _record: Any) -> None:
            dbapi_conn.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _sqlite_begin(conn: Any) -> None:
            conn.exec_driver_sql("BEGIN")

    return engine


class SqlCrmTransaction(CrmTransactionProtocol):
    """Operações sobre uma AsyncSession já dentro de `begin()`."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        async with self._session.begin_nested():
            yield

    async def _first_contact(self, stmt: Any, operation: str) -> Contact | None:
        try:
            row = (await self._session.execute(stmt.limit(1))).scalars().first()
        except SQLAlchemyError as exc:
            raise CrmStoreError(f"Falha no SQL ({operation})") from exc
        return Contact.from_row(_row_values(row)) if row is not None else None

    async def _add(self, row: Base, operation: str) -> Base:
        try:
            self._session.add(row)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise CrmStoreError(f"Falha no SQL ({operation})") from exc
        return row

    async def find_contact_by_mobile(self, mobile: str) -> Contact | None:
        stmt = select(ContactRow).where(ContactRow.mobile == mobile).order_by(ContactRow.id)
        return await self._first_contact(stmt, "find_contact_by_mobile")

    async def find_contact_by_email(self, email: str) -> Contact | None:
        stmt = (
            select(ContactRow)
            .where(
                or_(
                    ContactRow.email == email,
                    ContactRow.email2 == email,
                    ContactRow.email3 == email,
                )
            )
            .order_by(ContactRow.id)
        )
        return await self._first_contact(stmt, "find_contact_by_email")

    async def insert_contact(self, contact: Contact) -> Contact:
        row = await self._add(ContactRow(**_column_values(contact)), "insert_contact")
        return Contact.from_row(_row_values(row))

    async def get_last_interaction(self, contact_id: int) -> date | None:
        stmt = select(ContactRow.id, ContactRow.last_interaction).where(ContactRow.id == contact_id)
        try:
            result = (await self._session.execute(stmt)).first()
        except SQLAlchemyError as exc:
            raise CrmStoreError("Falha no SQL (get_last_interaction)") from exc
        if result is None:
            raise ContactNotFoundError(f"contato {contact_id} não encontrado")
        return result.last_interaction

    async def set_last_interaction(self, contact_id: int, value: date) -> None:
        stmt = (
            update(ContactRow)
            .where(ContactRow.id == contact_id)
            .values(last_interaction=value)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CrmStoreError("Falha no SQL (set_last_interaction)") from exc

    async def insert_interaction(self, interaction: Interaction) -> Interaction:
        row = await self._add(
            InteractionRow(**_column_values(interaction)), "insert_interaction"
        )
        return Interaction.from_row(_row_values(row))

    async def insert_meeting(self, meeting: Meeting) -> Meeting:
        row = await self._add(MeetingRow(**_column_values(meeting)), "insert_meeting")
        return Meeting.from_row(_row_values(row))

    async def link_meeting_contact(self, meeting_id: int, contact_id: int) -> None:
        await self._add(
            MeetingContactRow(meeting_id=meeting_id, contact_id=contact_id),
            "link_meeting_contact",
        )


class SqlCrmStore(CrmStoreProtocol):
    """Store CRM sobre SQLAlchemy async (Postgres em produção, SQLite local).

    Args:
        engine: AsyncEngine (ver make_engine)
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs: Any) -> SqlCrmStore:
        return cls(make_engine(database_url, **engine_kwargs))

    async def create_all(self) -> None:
        """Cria as tabelas (dev/testes; produção usa migrações)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("sql_schema_created")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[CrmTransactionProtocol]:
        async with self._sessionmaker() as session:
            try:
                async with session.begin():
                    yield SqlCrmTransaction(session)
            except SQLAlchemyError as exc:
                raise CrmStoreError("Falha ao confirmar transação SQL") from exc

    async def ping(self) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise CrmStoreError("Banco SQL indisponível") from exc

    async def close(self) -> None:
        await self._engine.dispose()
