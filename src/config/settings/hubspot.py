"""Settings específicas de HubSpot.

Usadas apenas pelo registro da assinatura de webhook
(scripts/setup_hubspot_webhook.py). O token nunca fica no código.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

HUBSPOT_API_BASE_URL: str = "https://api.hubapi.com"


@dataclass(frozen=True)
class HubSpotSettings:
    """Configurações de HubSpot.

    Attributes:
        private_app_token: Token de private app (Bearer)
        app_id: ID do app que recebe a assinatura
        webhook_url: URL pública do endpoint /webhook/hubspot
        api_base_url: URL base da API HubSpot
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em caso de erro
    """

    private_app_token: str = ""
    app_id: str = ""
    webhook_url: str = ""
    api_base_url: str = HUBSPOT_API_BASE_URL
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    def get_subscriptions_endpoint(self, app_id: str | None = None) -> str:
        """Retorna URL de assinaturas de webhook do app.

        Raises:
            ValueError: Se app_id não informado e não configurado.
        """
        aid = app_id or self.app_id
        if not aid:
            raise ValueError("app_id é obrigatório")
        return f"{self.api_base_url.rstrip('/')}/webhooks/v1/{aid}/subscriptions"

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.private_app_token:
            errors.append("HUBSPOT_PRIVATE_APP_TOKEN não configurado")

        if not self.app_id:
            errors.append("HUBSPOT_APP_ID não configurado")

        if not self.webhook_url:
            errors.append("HUBSPOT_WEBHOOK_URL não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("HUBSPOT_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("HUBSPOT_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> HubSpotSettings:
    return HubSpotSettings(
        private_app_token=os.getenv("HUBSPOT_PRIVATE_APP_TOKEN", ""),
        app_id=os.getenv("HUBSPOT_APP_ID", ""),
        webhook_url=os.getenv("HUBSPOT_WEBHOOK_URL", ""),
        api_base_url=os.getenv("HUBSPOT_API_BASE_URL", HUBSPOT_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("HUBSPOT_REQUEST_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("HUBSPOT_MAX_RETRIES", "3")),
    )


@lru_cache(maxsize=1)
def get_hubspot_settings() -> HubSpotSettings:
    """Retorna instância cacheada de HubSpotSettings."""
    return _load_from_env()
