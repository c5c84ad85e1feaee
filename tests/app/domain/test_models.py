"""Testes dos modelos persistidos."""

from __future__ import annotations

from datetime import date

from app.domain.models import Contact, Direction, Interaction, InteractionType, Meeting


def test_to_row_omits_unassigned_id_and_serializes_enums() -> None:
    interaction = Interaction(
        interaction_date=date(2024, 1, 15),
        interaction_type=InteractionType.WHATSAPP,
        direction=Direction.INBOUND,
        note="hi",
    )

    row = interaction.to_row()

    assert "id" not in row
    assert row["interaction_date"] == "2024-01-15"
    assert row["interaction_type"] == "WhatsApp"
    assert row["direction"] == "Inbound"


def test_contact_from_row_coerces_timestamp_in_date_column() -> None:
    contact = Contact.from_row({"id": 3, "email": "a@x.com", "last_interaction": "2024-01-15T00:00:00"})

    assert contact.id == 3
    assert contact.last_interaction == date(2024, 1, 15)


def test_meeting_defaults() -> None:
    meeting = Meeting(interaction_date=date(2024, 1, 15))

    assert meeting.meeting_name == "Untitled Meeting"
    assert meeting.description == ""
    assert meeting.interaction_type == InteractionType.GOOGLE_MEET
