"""Cliente HTTP base (httpx) com retry exponencial para APIs externas.

Retry apenas em 429, 5xx, timeout e erro de conexão. Demais respostas
voltam ao chamador, que interpreta o corpo.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 2.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


def _is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS or status_code >= 500


class HttpClient:
    """Cliente HTTP assíncrono com retry/backoff.

    Args:
        config: Timeouts, retries e headers padrão
        transport: Transport httpx opcional (testes usam httpx.MockTransport)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self._request("POST", url, json=json, headers=headers)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    transport=self._transport,
                    timeout=self._config.timeout_seconds,
                ) as client:
                    response = await client.request(
                        method, url, json=json, headers=merged_headers
                    )
                if _is_retryable_status(response.status_code):
                    raise HttpError(
                        "http_retryable_status",
                        status_code=response.status_code,
                        is_retryable=True,
                    )
                return response
            except HttpError as exc:
                if not exc.is_retryable or attempt >= self._config.max_retries:
                    raise
                await self._backoff(attempt)
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await self._backoff(attempt)
        raise HttpError("http_retry_exhausted", is_retryable=True)

    async def _backoff(self, attempt: int) -> None:
        backoff = min(
            (2**attempt) * self._config.backoff_base_seconds,
            self._config.backoff_max_seconds,
        )
        logger.info("http_backoff", extra={"attempt": attempt + 1, "backoff_seconds": backoff})
        await asyncio.sleep(backoff)
