"""Connector HubSpot — registro da assinatura de webhook de emails."""

from .client import (
    HubSpotApiError,
    HubSpotClient,
    WebhookSubscription,
    build_subscription_payload,
    create_hubspot_client,
)

__all__ = [
    "HubSpotApiError",
    "HubSpotClient",
    "WebhookSubscription",
    "build_subscription_payload",
    "create_hubspot_client",
]
