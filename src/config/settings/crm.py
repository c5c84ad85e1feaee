"""Settings do store de contatos/interações (backend relacional).

Backends:
- supabase: API REST autenticada (SUPABASE_URL + SUPABASE_KEY)
- sql: SQLAlchemy async (DATABASE_URL), com transação por evento
- memory: apenas desenvolvimento/testes
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

CrmStoreBackend = Literal["memory", "supabase", "sql"]

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./crm_relay.db"


@dataclass(frozen=True)
class CrmStoreSettings:
    """Configurações do store CRM.

    Attributes:
        backend: Backend do store (memory|supabase|sql)
        supabase_url: URL do projeto Supabase
        supabase_key: Chave de serviço do Supabase
        database_url: URL SQLAlchemy async (ex.: postgresql+asyncpg://...)
        create_all: Cria tabelas no startup (apenas backend sql)
    """

    backend: CrmStoreBackend = "memory"
    supabase_url: str = ""
    supabase_key: str = ""
    database_url: str = DEFAULT_DATABASE_URL
    create_all: bool = False

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.backend not in ("memory", "supabase", "sql"):
            errors.append(f"CRM_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("CRM_STORE_BACKEND=memory proibido em staging/production")

        if self.backend == "supabase":
            if not self.supabase_url:
                errors.append("SUPABASE_URL não configurado")
            if not self.supabase_key:
                errors.append("SUPABASE_KEY não configurado")

        if self.backend == "sql" and not self.database_url:
            errors.append("DATABASE_URL não configurado")

        return errors


def _load_from_env() -> CrmStoreSettings:
    backend_str = os.getenv("CRM_STORE_BACKEND", "memory").lower()
    backend: CrmStoreBackend = (
        backend_str if backend_str in ("memory", "supabase", "sql") else "memory"
    )
    return CrmStoreSettings(
        backend=backend,
        supabase_url=os.getenv("SUPABASE_URL", "").strip(),
        supabase_key=os.getenv("SUPABASE_KEY", "").strip(),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL).strip(),
        create_all=os.getenv("SQL_CREATE_ALL", "0").lower() in ("1", "true", "yes"),
    )


@lru_cache(maxsize=1)
def get_crm_store_settings() -> CrmStoreSettings:
    """Retorna instância cacheada de CrmStoreSettings."""
    return _load_from_env()
