"""Testes das factories de stores e da validação de startup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from app.bootstrap import collect_settings_errors, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client, create_supabase_client
from app.bootstrap.dependencies import create_crm_store, create_dedupe_store
from app.infra.stores import MemoryCrmStore, MemoryDedupeStore, RedisDedupeStore, SqlCrmStore
from config.settings import (
    BaseSettings,
    CrmStoreSettings,
    DedupeSettings,
    get_base_settings,
    get_crm_store_settings,
    get_dedupe_settings,
    get_webhook_settings,
)

DEVELOPMENT = BaseSettings()
PRODUCTION = BaseSettings(environment="production", redis_url="redis://localhost:6379/0")


def _clear_settings_cache() -> None:
    for getter in (
        get_base_settings,
        get_crm_store_settings,
        get_dedupe_settings,
        get_webhook_settings,
    ):
        getter.cache_clear()


class TestCreateCrmStore:
    @pytest.mark.asyncio
    async def test_memory_backend(self) -> None:
        store = await create_crm_store(CrmStoreSettings(backend="memory"), DEVELOPMENT)

        assert isinstance(store, MemoryCrmStore)

    @pytest.mark.asyncio
    async def test_memory_in_production_only_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            store = await create_crm_store(CrmStoreSettings(backend="memory"), PRODUCTION)

        assert isinstance(store, MemoryCrmStore)
        assert "memory_crm_store_in_non_dev" in caplog.text

    @pytest.mark.asyncio
    async def test_sql_backend_creates_tables(self, tmp_path: Path) -> None:
        settings = CrmStoreSettings(
            backend="sql",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}",
            create_all=True,
        )

        store = await create_crm_store(settings, DEVELOPMENT)
        try:
            assert isinstance(store, SqlCrmStore)
            await store.ping()
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_supabase_without_credentials_fails(self) -> None:
        with pytest.raises(ValueError, match="SUPABASE_URL"):
            await create_crm_store(CrmStoreSettings(backend="supabase"), DEVELOPMENT)

    @pytest.mark.asyncio
    async def test_unknown_backend_fails(self) -> None:
        settings = CrmStoreSettings(backend="mongo")  # type: ignore[arg-type]

        with pytest.raises(ValueError, match="CRM_STORE_BACKEND"):
            await create_crm_store(settings, DEVELOPMENT)


class TestCreateDedupeStore:
    def test_memory_backend(self) -> None:
        assert isinstance(create_dedupe_store(DedupeSettings(), DEVELOPMENT), MemoryDedupeStore)

    def test_redis_backend_uses_given_client(self) -> None:
        client = create_async_redis_client("redis://localhost:6379/0")

        store = create_dedupe_store(DedupeSettings(backend="redis"), PRODUCTION, client)

        assert isinstance(store, RedisDedupeStore)

    def test_redis_without_url_fails(self) -> None:
        with pytest.raises(ValueError, match="REDIS_URL"):
            create_dedupe_store(DedupeSettings(backend="redis"), DEVELOPMENT)


def test_supabase_client_requires_credentials() -> None:
    with pytest.raises(ValueError, match="SUPABASE_KEY"):
        create_supabase_client(CrmStoreSettings(backend="supabase", supabase_url="https://x.supabase.co"))


class TestValidateRuntimeSettings:
    def test_production_with_memory_backends_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("CRM_STORE_BACKEND", "memory")
        monkeypatch.setenv("DEDUPE_BACKEND", "memory")
        monkeypatch.setenv("OWNER_EMAIL", "owner@me.com")
        _clear_settings_cache()
        try:
            errors = collect_settings_errors()
            with pytest.raises(RuntimeError, match="Configuração inválida para production"):
                validate_runtime_settings()
        finally:
            _clear_settings_cache()

        assert any(e.startswith("crm_store: ") for e in errors)
        assert any(e.startswith("dedupe: ") for e in errors)

    def test_development_only_warns(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("OWNER_EMAIL", raising=False)
        _clear_settings_cache()
        try:
            with caplog.at_level(logging.WARNING):
                validate_runtime_settings()
        finally:
            _clear_settings_cache()

        assert "settings_validation_failed" in caplog.text
