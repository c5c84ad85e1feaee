"""Liveness (/health) e readiness (/ready) do crm-relay.

Readiness exige o store CRM respondendo ao ping; Redis só entra na conta
quando o dedupe usa o backend redis (senão aparece como `skipped`).
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

router = APIRouter()

CRM_PING_TIMEOUT_SECONDS = 3.0
REDIS_PING_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Resposta do liveness probe."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    status: Literal["ok", "skipped", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: 200 quando o store CRM responde, 503 caso contrário."""
    state = request.app.state
    crm_store = getattr(state, "crm_store", None)
    redis_client = getattr(state, "redis_client", None)

    crm_ping = crm_store.ping if crm_store is not None else None
    redis_ping = redis_client.ping if redis_client is not None else None
    crm_check, redis_check = await asyncio.gather(
        _probe("crm_store", crm_ping, CRM_PING_TIMEOUT_SECONDS),
        _probe("redis", redis_ping, REDIS_PING_TIMEOUT_SECONDS),
    )
    if crm_store is None:
        crm_check = DependencyCheck(status="failed", error="not_configured")

    ready = crm_check.status == "ok" and redis_check.status != "failed"
    payload = {
        "status": "ready" if ready else "not_ready",
        "crm_backend": type(crm_store).__name__ if crm_store is not None else None,
        "checks": {
            "crm_store": crm_check.as_dict(),
            "redis": redis_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _probe(
    name: str,
    ping: Callable[[], Awaitable[Any]] | None,
    timeout: float,
) -> DependencyCheck:
    """Executa o ping com timeout e mede a latência."""
    if ping is None:
        return DependencyCheck(status="skipped", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(ping(), timeout=timeout)
    except TimeoutError:
        logger.warning("readiness_check_timeout", extra={"dependency": name})
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning(
            "readiness_check_failed",
            extra={"dependency": name, "error_type": type(exc).__name__},
        )
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
