#!/usr/bin/env python3
"""Registra a assinatura de webhook de emails no HubSpot.

Uso:
    HUBSPOT_PRIVATE_APP_TOKEN=... HUBSPOT_APP_ID=... \
    HUBSPOT_WEBHOOK_URL=https://meu-host/webhook/hubspot \
    python scripts/setup_hubspot_webhook.py

Flags sobrescrevem o ambiente. Executar uma única vez por app.
"""

from __future__ import annotations

import argparse
import asyncio

from api.connectors.hubspot import HubSpotApiError, create_hubspot_client
from api.connectors.http_base import HttpError
from app.bootstrap import initialize_app


async def setup_webhook(webhook_url: str | None, app_id: str | None) -> int:
    client = create_hubspot_client()
    try:
        subscription = await client.create_webhook_subscription(
            webhook_url=webhook_url,
            app_id=app_id,
        )
    except HubSpotApiError as exc:
        print(f"Erro ao criar webhook: status={exc.status_code} message={exc.message}")
        return 1
    except HttpError as exc:
        print(f"Erro ao criar webhook: status={exc.status_code} message={exc}")
        return 1
    except ValueError as exc:
        print(f"Configuração inválida: {exc}")
        return 2

    print(f"Webhook criado: subscription_id={subscription.subscription_id}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--webhook-url", default=None, help="Sobrescreve HUBSPOT_WEBHOOK_URL")
    parser.add_argument("--app-id", default=None, help="Sobrescreve HUBSPOT_APP_ID")
    args = parser.parse_args()

    initialize_app()
    raise SystemExit(asyncio.run(setup_webhook(args.webhook_url, args.app_id)))


if __name__ == "__main__":
    main()
