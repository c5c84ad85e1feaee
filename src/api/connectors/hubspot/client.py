"""Cliente da API de webhooks do HubSpot.

Usado só pelo registro único da assinatura `engagement.created` (EMAIL)
que aponta para POST /webhook/hubspot. O token nunca vai para os logs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.connectors.http_base import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    import httpx

    from config.settings import HubSpotSettings

logger = logging.getLogger(__name__)


class HubSpotApiError(Exception):
    """Erro retornado pela API HubSpot."""

    def __init__(self, status_code: int, message: str, category: str | None = None) -> None:
        super().__init__(f"HubSpot API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.category = category


@dataclass(frozen=True, slots=True)
class WebhookSubscription:
    """Assinatura criada no HubSpot."""

    subscription_id: str | None
    raw: dict[str, Any]


def build_subscription_payload(webhook_url: str) -> dict[str, Any]:
    """Payload da assinatura de engagements de email."""
    return {
        "subscriptionDetails": {
            "subscriptionType": "engagement.created",
            "propertyName": "engagement.type",
            "condition": {"equals": "EMAIL"},
        },
        "enabled": True,
        "webhookUrl": webhook_url,
    }


def parse_hubspot_error(status_code: int, body: Any) -> HubSpotApiError:
    if isinstance(body, dict):
        return HubSpotApiError(
            status_code=status_code,
            message=str(body.get("message") or "Erro desconhecido"),
            category=body.get("category"),
        )
    return HubSpotApiError(status_code=status_code, message="Erro desconhecido")


class HubSpotClient(HttpClient):
    """Cliente HTTP para a API de webhooks do HubSpot.

    Args:
        settings: HubSpotSettings (token, app id, URL base)
        config: Configuração HTTP base
        transport: Transport httpx opcional (testes)
    """

    def __init__(
        self,
        settings: HubSpotSettings,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            config
            or HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=settings.max_retries,
            ),
            transport=transport,
        )
        self._settings = settings

    def _auth_headers(self) -> dict[str, str]:
        token = self._settings.private_app_token
        if not token or not token.strip():
            raise ValueError(
                "HUBSPOT_PRIVATE_APP_TOKEN é obrigatório para registrar o webhook"
            )
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def create_webhook_subscription(
        self,
        webhook_url: str | None = None,
        app_id: str | None = None,
    ) -> WebhookSubscription:
        """Cria a assinatura de webhook de emails.

        Raises:
            ValueError: Token, app_id ou webhook_url ausentes.
            HubSpotApiError: HubSpot respondeu com erro.
            HttpError: Falha de rede após os retries.
        """
        url = self._settings.get_subscriptions_endpoint(app_id)
        target = webhook_url or self._settings.webhook_url
        if not target:
            raise ValueError("HUBSPOT_WEBHOOK_URL é obrigatório")

        response = await self.post(
            url,
            json=build_subscription_payload(target),
            headers=self._auth_headers(),
        )
        body = _json_or_none(response)

        if response.status_code >= 400:
            error = parse_hubspot_error(response.status_code, body)
            logger.error(
                "hubspot_subscription_failed",
                extra={"status_code": error.status_code, "category": error.category},
            )
            raise error

        if not isinstance(body, dict):
            raise HttpError("Response JSON inválido", status_code=response.status_code)

        subscription_id = body.get("subscriptionId") or body.get("id")
        logger.info(
            "hubspot_subscription_created",
            extra={"subscription_id": subscription_id},
        )
        return WebhookSubscription(
            subscription_id=str(subscription_id) if subscription_id is not None else None,
            raw=body,
        )


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError):
        return None


def create_hubspot_client(settings: HubSpotSettings | None = None) -> HubSpotClient:
    """Factory com settings do ambiente."""
    from config.settings import get_hubspot_settings

    return HubSpotClient(settings or get_hubspot_settings())
