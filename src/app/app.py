"""Entrypoint da aplicação crm-relay.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client
from app.bootstrap.dependencies import create_crm_store, create_dedupe_store
from config.logging import get_logger
from config.settings import get_base_settings, get_crm_store_settings, get_dedupe_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria store CRM, store de dedupe e cliente Redis (quando usado)

    Shutdown:
    - Fecha conexões gracefully
    """
    base = get_base_settings()
    logger.info("app_starting", extra={"service": base.service_name})
    validate_runtime_settings()

    dedupe_settings = get_dedupe_settings()
    app.state.redis_client = None
    if dedupe_settings.enabled and dedupe_settings.backend == "redis":
        app.state.redis_client = create_async_redis_client(base.redis_url)

    app.state.crm_store = await create_crm_store(get_crm_store_settings(), base)
    app.state.dedupe_store = (
        create_dedupe_store(dedupe_settings, base, app.state.redis_client)
        if dedupe_settings.enabled
        else None
    )

    yield

    logger.info("app_shutting_down", extra={"service": base.service_name})
    await app.state.crm_store.close()
    redis_client = app.state.redis_client
    if redis_client is not None:
        await redis_client.aclose()


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Erros HTTP do roteamento no formato `{"error": ...}`."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            content={"error": METHOD_NOT_ALLOWED_MESSAGE},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )
    return JSONResponse(content={"error": str(exc.detail)}, status_code=exc.status_code)


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="crm-relay",
        description="Webhooks que registram contatos e interações no CRM",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("app_starting_dev_mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
