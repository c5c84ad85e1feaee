"""Agregador de rotas — registra health e os webhooks por fonte.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.calendar.webhook import router as calendar_router
from api.routes.email.webhook import router as email_router
from api.routes.health.router import router as health_router
from api.routes.hubspot.webhook import router as hubspot_router
from api.routes.whatsapp.webhook import router as whatsapp_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(whatsapp_router, prefix="/webhook/whatsapp", tags=["whatsapp"])
    api_router.include_router(calendar_router, prefix="/webhook/calendar", tags=["calendar"])
    api_router.include_router(email_router, prefix="/webhook/email", tags=["email"])
    api_router.include_router(hubspot_router, prefix="/webhook/hubspot", tags=["hubspot"])

    return api_router
