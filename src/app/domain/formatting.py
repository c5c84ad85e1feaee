"""Normalização de identificadores, datas e nomes vindos dos webhooks.

Funções puras, sem I/O. Datas sempre saem em `YYYY-MM-DD` (dia UTC),
formato aceito pelas colunas `date` do store.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from utils.errors import InvalidPayloadError

_NON_DIGITS = re.compile(r"\D")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MIN_PHONE_DIGITS = 10
# Acima disso o epoch está em milissegundos (ano ~5138 em segundos)
_EPOCH_MS_THRESHOLD = 100_000_000_000


def format_phone_number(phone: str | None) -> str | None:
    """Normaliza telefone para `+` seguido apenas de dígitos.

    Exemplo:
        format_phone_number("+1 (555) 123-4567") -> "+15551234567"

    Returns:
        Telefone normalizado ou None quando não há dígitos.
    """
    if not phone:
        return None
    digits = _NON_DIGITS.sub("", str(phone))
    if not digits:
        return None
    return f"+{digits}"


def is_valid_phone_number(phone: str | None) -> bool:
    """Telefone utilizável tem ao menos 10 dígitos."""
    if not phone:
        return False
    return len(_NON_DIGITS.sub("", str(phone))) >= MIN_PHONE_DIGITS


def _from_epoch(value: float) -> datetime:
    seconds = value / 1000 if abs(value) >= _EPOCH_MS_THRESHOLD else value
    return datetime.fromtimestamp(seconds, tz=UTC)


def _parse_string(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise InvalidPayloadError("timestamp vazio")
    if text.lstrip("-").isdigit():
        return _from_epoch(int(text))
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    # Automações de email costumam enviar RFC 2822 ("Mon, 15 Jan 2024 10:00:00 +0000")
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"timestamp inválido: {text[:40]}") from exc


def parse_datetime(value: Any) -> datetime:
    """Converte timestamp bruto em datetime com timezone UTC.

    Aceita ISO-8601 (com `Z`, offset ou espaço como separador), RFC 2822,
    `datetime`/`date` e epoch em segundos ou milissegundos. Valores sem
    timezone são tratados como UTC.

    Raises:
        InvalidPayloadError: Se o valor não puder ser interpretado.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidPayloadError("timestamp ausente")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, int | float):
        try:
            parsed = _from_epoch(value)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidPayloadError("timestamp fora do intervalo") from exc
    elif isinstance(value, str):
        try:
            parsed = _parse_string(value)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidPayloadError("timestamp fora do intervalo") from exc
    else:
        raise InvalidPayloadError(f"tipo de timestamp não suportado: {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: Any) -> str:
    """Retorna a data UTC (`YYYY-MM-DD`) do timestamp.

    Exemplo:
        format_timestamp("2024-03-01T23:30:00-03:00") -> "2024-03-02"
    """
    return parse_datetime(value).date().isoformat()


def format_calendar_date(value: Any) -> str:
    """Data de evento de calendário, preservando o dia do próprio evento.

    `2024-03-01T23:30:00-03:00` continua sendo 2024-03-01: a parte de data
    é mantida como veio. Datas puras são apenas validadas.
    """
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            text = text.split("T", 1)[0]
        if _DATE_ONLY.match(text):
            try:
                return date.fromisoformat(text).isoformat()
            except ValueError as exc:
                raise InvalidPayloadError(f"data inválida: {text}") from exc
    return format_timestamp(value)


def split_display_name(name: str | None) -> tuple[str | None, str | None]:
    """Separa nome de exibição em (primeiro nome, restante).

    Exemplo:
        split_display_name("Ada King Lovelace") -> ("Ada", "King Lovelace")
    """
    if not name:
        return None, None
    parts = name.split()
    if not parts:
        return None, None
    first = parts[0]
    rest = " ".join(parts[1:]) or None
    return first, rest


def normalize_email(email: str | None) -> str | None:
    """Email é usado como veio, apenas sem espaços nas pontas."""
    if email is None:
        return None
    cleaned = str(email).strip()
    return cleaned or None
