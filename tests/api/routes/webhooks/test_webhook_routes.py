"""Testes dos endpoints de webhook chamados diretamente (sem TestClient)."""

from __future__ import annotations

import json
from typing import Any

import pytest
from starlette.requests import Request

from api.routes.calendar.webhook import receive_calendar_webhook
from api.routes.email.webhook import receive_email_webhook
from api.routes.hubspot.webhook import receive_hubspot_webhook
from api.routes.webhook_runtime import DUPLICATE_DELIVERY_MESSAGE, INTERNAL_ERROR_MESSAGE
from api.routes.whatsapp.webhook import receive_whatsapp_webhook
from app.domain.models import Direction, InteractionType
from app.infra.stores import MemoryCrmStore, MemoryDedupeStore
from app.services.delivery_dedupe import DeliveryDeduplicator
from app.use_cases import RecordInteractionsUseCase, RecordMeetingUseCase
from config.settings import WebhookSettings
from tests.fakes.fake_crm_store import FlakyCrmStore

SETTINGS = WebhookSettings(
    owner_email="owner@me.com",
    calendar_excluded_emails=frozenset({"owner@me.com"}),
)


def _request(body: bytes | str | dict[str, Any] | list[Any], path: str = "/webhook") -> Request:
    if isinstance(body, (dict, list)):
        raw = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        raw = body.encode("utf-8")
    else:
        raw = body
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [(b"content-type", b"application/json"), (b"x-correlation-id", b"corr-1")],
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": raw, "more_body": False}

    return Request(scope, _receive)


def _body(response: Any) -> dict[str, Any]:
    return json.loads(response.body.decode("utf-8"))


def _whatsapp_payload(**chat: Any) -> dict[str, Any]:
    return {
        "chat": {"phone": "+1 (555) 123-4567", "full_name": "Ada Lovelace", "is_group": False, **chat},
        "message": {
            "timestamp": "2024-01-15T10:30:00Z",
            "direction": "received",
            "text": "Olá",
            "message_uid": "uid-1",
        },
    }


def _email_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "from email": "ada@x.com",
        "from name": "Ada Lovelace",
        "to email": "owner@me.com",
        "subject": "Proposta",
        "date": "Mon, 15 Jan 2024 10:00:00 +0000",
    }
    payload.update(overrides)
    return payload


class TestWhatsAppRoute:
    @pytest.mark.asyncio
    async def test_short_phone_returns_bare_success_without_writes(self) -> None:
        store = MemoryCrmStore()

        response = await receive_whatsapp_webhook(
            _request(_whatsapp_payload(phone="12345")), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 200
        assert _body(response) == {"success": True}
        assert store.contacts() == []
        assert store.interactions() == []

    @pytest.mark.asyncio
    async def test_records_contact_and_interaction(self) -> None:
        store = MemoryCrmStore()

        response = await receive_whatsapp_webhook(
            _request(_whatsapp_payload()), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 200
        assert _body(response) == {"success": True}
        [contact] = store.contacts()
        assert contact.mobile == "+15551234567"
        assert contact.first_name == "Ada"
        [interaction] = store.interactions()
        assert interaction.interaction_type == InteractionType.WHATSAPP
        assert interaction.direction == Direction.INBOUND
        assert interaction.contact_id == contact.id

    @pytest.mark.asyncio
    async def test_group_chat_is_skipped_without_writes(self) -> None:
        store = MemoryCrmStore()

        response = await receive_whatsapp_webhook(
            _request(_whatsapp_payload(is_group=True)), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 200
        assert _body(response) == {
            "success": True,
            "message": "No individual chat messages to process",
        }
        assert store.contacts() == []
        assert store.interactions() == []

    @pytest.mark.asyncio
    async def test_malformed_json_returns_500(self) -> None:
        store = MemoryCrmStore()

        response = await receive_whatsapp_webhook(
            _request("{not json"), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 500
        assert "error" in _body(response)
        assert store.interactions() == []

    @pytest.mark.asyncio
    async def test_replayed_delivery_is_ignored(self) -> None:
        store = MemoryCrmStore()
        deduplicator = DeliveryDeduplicator(MemoryDedupeStore())
        use_case = RecordInteractionsUseCase(store)

        first = await receive_whatsapp_webhook(_request(_whatsapp_payload()), use_case, deduplicator)
        second = await receive_whatsapp_webhook(_request(_whatsapp_payload()), use_case, deduplicator)

        assert _body(first) == {"success": True}
        assert second.status_code == 200
        assert _body(second)["message"] == DUPLICATE_DELIVERY_MESSAGE
        assert len(store.interactions()) == 1

    @pytest.mark.asyncio
    async def test_failed_delivery_can_be_retried(self) -> None:
        deduplicator = DeliveryDeduplicator(MemoryDedupeStore())
        flaky = FlakyCrmStore(failing={"insert_interaction"})

        failed = await receive_whatsapp_webhook(
            _request(_whatsapp_payload()), RecordInteractionsUseCase(flaky), deduplicator
        )
        flaky.failing.clear()
        retried = await receive_whatsapp_webhook(
            _request(_whatsapp_payload()), RecordInteractionsUseCase(flaky), deduplicator
        )

        assert failed.status_code == 500
        assert _body(failed) == {"error": "Failed to record interaction"}
        assert retried.status_code == 200
        assert len(flaky.interactions()) == 1

    @pytest.mark.asyncio
    async def test_contact_failure_still_records_interaction(self) -> None:
        store = FlakyCrmStore(failing={"insert_contact"})

        response = await receive_whatsapp_webhook(
            _request(_whatsapp_payload()), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 200
        assert store.contacts() == []
        [interaction] = store.interactions()
        assert interaction.contact_id is None
        assert interaction.contact_mobile == "+15551234567"

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_generic_message(self) -> None:
        class ExplodingUseCase:
            async def execute(self, events: Any) -> Any:
                raise RuntimeError("secret detail")

        response = await receive_whatsapp_webhook(
            _request(_whatsapp_payload()), ExplodingUseCase(), None  # type: ignore[arg-type]
        )

        assert response.status_code == 500
        assert _body(response) == {"error": INTERNAL_ERROR_MESSAGE}


class TestEmailRoute:
    @pytest.mark.asyncio
    async def test_inbound_email(self) -> None:
        store = MemoryCrmStore()

        response = await receive_email_webhook(
            _request(_email_payload()), RecordInteractionsUseCase(store), None, SETTINGS
        )

        assert response.status_code == 200
        assert _body(response) == {
            "success": True,
            "message": "Email interaction logged successfully",
        }
        [contact] = store.contacts()
        assert contact.email == "ada@x.com"
        [interaction] = store.interactions()
        assert interaction.interaction_type == InteractionType.EMAIL
        assert interaction.direction == Direction.INBOUND

    @pytest.mark.asyncio
    async def test_owner_sent_email_is_outbound_to_recipient(self) -> None:
        store = MemoryCrmStore()
        payload = _email_payload(**{"from email": "owner@me.com", "to email": "bob@y.com", "to name": "Bob"})

        response = await receive_email_webhook(
            _request(payload), RecordInteractionsUseCase(store), None, SETTINGS
        )

        assert response.status_code == 200
        [contact] = store.contacts()
        assert contact.email == "bob@y.com"
        [interaction] = store.interactions()
        assert interaction.direction == Direction.OUTBOUND

    @pytest.mark.asyncio
    async def test_invalid_date_returns_500(self) -> None:
        store = MemoryCrmStore()

        response = await receive_email_webhook(
            _request(_email_payload(date="not a date")), RecordInteractionsUseCase(store), None, SETTINGS
        )

        assert response.status_code == 500
        assert store.interactions() == []


class TestHubSpotRoute:
    @staticmethod
    def _event(event_id: int, to: str) -> dict[str, Any]:
        return {
            "objectId": event_id,
            "objectType": "EMAIL",
            "eventId": event_id,
            "occurredAt": 1705314600000,
            "properties": {"hs_email_direction": "INBOUND", "subject": "Oi", "from": "a@x.com", "to": to},
        }

    @pytest.mark.asyncio
    async def test_batch_records_each_event(self) -> None:
        store = MemoryCrmStore()
        batch = [self._event(1, "bob@y.com"), self._event(2, "carol@z.com")]

        response = await receive_hubspot_webhook(_request(batch), RecordInteractionsUseCase(store), None)

        assert response.status_code == 200
        assert {c.email for c in store.contacts()} == {"bob@y.com", "carol@z.com"}
        assert len(store.interactions()) == 2

    @pytest.mark.asyncio
    async def test_payload_without_email_is_skipped(self) -> None:
        store = MemoryCrmStore()

        response = await receive_hubspot_webhook(
            _request({"objectType": "CONTACT", "properties": {}}), RecordInteractionsUseCase(store), None
        )

        assert response.status_code == 200
        assert _body(response)["message"] == "No email data to process"
        assert store.interactions() == []

    @pytest.mark.asyncio
    async def test_batch_with_bad_timestamp_is_not_partially_replayed(self) -> None:
        store = MemoryCrmStore()
        deduplicator = DeliveryDeduplicator(MemoryDedupeStore())
        broken = self._event(2, "carol@z.com")
        broken["occurredAt"] = "not-a-date"
        batch = [self._event(1, "bob@y.com"), broken]

        first = await receive_hubspot_webhook(_request(batch), RecordInteractionsUseCase(store), deduplicator)
        second = await receive_hubspot_webhook(_request(batch), RecordInteractionsUseCase(store), deduplicator)

        assert first.status_code == 500
        assert second.status_code == 500
        assert store.interactions() == []
        assert store.contacts() == []

    @pytest.mark.asyncio
    async def test_batch_store_failure_can_be_retried_without_duplicates(self) -> None:
        store = FlakyCrmStore(fail_after={"insert_interaction": 1})
        deduplicator = DeliveryDeduplicator(MemoryDedupeStore())
        batch = [self._event(1, "bob@y.com"), self._event(2, "carol@z.com")]

        failed = await receive_hubspot_webhook(_request(batch), RecordInteractionsUseCase(store), deduplicator)
        assert failed.status_code == 500
        assert store.interactions() == []

        store.fail_after.clear()
        retried = await receive_hubspot_webhook(_request(batch), RecordInteractionsUseCase(store), deduplicator)

        assert retried.status_code == 200
        assert len(store.interactions()) == 2


class TestCalendarRoute:
    @pytest.mark.asyncio
    async def test_creates_meeting_and_links_attendees(self) -> None:
        store = MemoryCrmStore()
        payload = {
            "attendee_emails": "ada@x.com, owner@me.com, bob@y.com",
            "event_date": "2024-03-01T10:00:00Z",
            "summary": "Kickoff",
            "event_id": "evt-1",
        }

        response = await receive_calendar_webhook(
            _request(payload), RecordMeetingUseCase(store), None, SETTINGS
        )

        body = _body(response)
        assert response.status_code == 200
        assert body["message"] == "Calendar event processed successfully"
        assert body["contacts_processed"] == 2
        [meeting] = store.meetings()
        assert body["meeting_id"] == meeting.id
        assert meeting.meeting_name == "Kickoff"
        assert {c.email for c in store.contacts()} == {"ada@x.com", "bob@y.com"}
        assert len(store.meeting_contacts()) == 2

    @pytest.mark.asyncio
    async def test_missing_event_date_returns_500(self) -> None:
        store = MemoryCrmStore()

        response = await receive_calendar_webhook(
            _request({"attendee_emails": "ada@x.com"}), RecordMeetingUseCase(store), None, SETTINGS
        )

        assert response.status_code == 500
        assert store.meetings() == []
