"""Registros persistidos: Contact, Interaction e Meeting.

Os nomes de campo seguem as colunas das tabelas `contacts`, `interactions`,
`meetings` e `meeting_contacts`. `to_row()`/`from_row()` convertem de/para
dicts no formato das APIs de store (datas em ISO `YYYY-MM-DD`).
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InteractionType(StrEnum):
    WHATSAPP = "WhatsApp"
    EMAIL = "email"
    GOOGLE_MEET = "Google Meet"


class Direction(StrEnum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"


class _RowModel(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    def to_row(self) -> dict[str, Any]:
        """Dict serializável para insert; omite `id` ainda não atribuído."""
        row = self.model_dump(mode="json")
        if row.get("id") is None:
            row.pop("id", None)
        return row

    @classmethod
    def from_row(cls, data: dict[str, Any]) -> Any:
        return cls.model_validate(data)


class Contact(_RowModel):
    """Contato canônico, criado na primeira aparição de telefone/email."""

    id: int | None = None
    mobile: str | None = None
    email: str | None = None
    email2: str | None = None
    email3: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    contact_category: str | None = None
    last_interaction: date | None = None
    created_at: datetime | None = Field(default_factory=_utcnow)

    @field_validator("last_interaction", mode="before")
    @classmethod
    def _coerce_last_interaction(cls, v: Any) -> Any:
        # Algumas APIs devolvem timestamp completo em colunas date
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class Interaction(_RowModel):
    """Registro append-only de um contato (mensagem, email ou reunião)."""

    id: int | None = None
    interaction_date: date
    interaction_type: InteractionType
    direction: Direction
    note: str = ""
    contact_id: int | None = None
    contact_email: str | None = None
    contact_mobile: str | None = None


class Meeting(_RowModel):
    """Reunião de calendário, ligada a N contatos via meeting_contacts."""

    id: int | None = None
    meeting_name: str = "Untitled Meeting"
    description: str = ""
    interaction_date: date
    interaction_type: InteractionType = InteractionType.GOOGLE_MEET
