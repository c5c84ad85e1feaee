"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - supabase_crm_store: Contatos/interações via API REST do Supabase
    - sql_crm_store: Contatos/interações via SQLAlchemy async (transacional)
    - redis_dedupe_store: Dedupe de entregas de webhook usando Redis
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryCrmStore, MemoryDedupeStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.sql_crm_store import SqlCrmStore
from app.infra.stores.supabase_crm_store import SupabaseCrmStore

__all__ = [
    # Memory (dev/test)
    "MemoryCrmStore",
    "MemoryDedupeStore",
    # Redis
    "RedisDedupeStore",
    # Relacional
    "SqlCrmStore",
    "SupabaseCrmStore",
]
