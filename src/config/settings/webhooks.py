"""Settings compartilhadas pelos webhooks inbound.

O endereço do dono da caixa define a direção de emails encaminhados
e é excluído da lista de participantes de reuniões.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações dos webhooks.

    Attributes:
        owner_email: Email do dono da conta (emails enviados por ele são Outbound)
        calendar_excluded_emails: Endereços ignorados entre participantes de reunião
    """

    owner_email: str = ""
    calendar_excluded_emails: frozenset[str] = field(default_factory=frozenset)

    def is_owner(self, email: str | None) -> bool:
        """Compara com o email do dono sem diferenciar maiúsculas."""
        if not email or not self.owner_email:
            return False
        return email.strip().lower() == self.owner_email.lower()

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.owner_email:
            errors.append("OWNER_EMAIL não configurado (direção de emails será sempre Inbound)")
        return errors


def _parse_email_list(raw: str) -> frozenset[str]:
    return frozenset(e.strip().lower() for e in raw.split(",") if e.strip())


def _load_from_env() -> WebhookSettings:
    owner_email = os.getenv("OWNER_EMAIL", "").strip()
    excluded_raw = os.getenv("CALENDAR_EXCLUDED_EMAILS")
    excluded = _parse_email_list(excluded_raw if excluded_raw is not None else owner_email)
    return WebhookSettings(owner_email=owner_email, calendar_excluded_emails=excluded)


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_from_env()
