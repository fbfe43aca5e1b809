"""Tests for the store factory, the shared database handle and service lifecycle."""

import pytest
from loguru import logger
from omegaconf import OmegaConf

from molino_store.admin import execute, run_command
from molino_store.models import StoreBackend
from molino_store.services import (
    DatabaseService,
    LoggingService,
    ServiceInitializer,
    ServiceRegistry,
)
from molino_store.store import (
    CouchDBDocumentStore,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
    StoreFactory,
)
from molino_store.utils.config import config_manager

from .conftest import TEST_CONFIG


class TestStoreFactory:
    def test_builds_backend_from_configuration(self):
        store = StoreFactory.build_document_store()
        assert isinstance(store, InMemoryDocumentStore)
        assert store.collection == "documents"
        assert not store.initialized

    def test_builds_couchdb_with_overrides(self, test_config):
        test_config["database"]["couchdb"] = {
            "url": "http://couch.internal:5984/",
            "database": "sirh_molino",
            "username": "admin",
            "password": "pw",
        }
        store = StoreFactory.build_document_store(StoreBackend.COUCHDB, database="sirh_test")

        assert isinstance(store, CouchDBDocumentStore)
        assert store.url == "http://couch.internal:5984"
        assert store.database == "sirh_test"
        assert store.auth == ("admin", "pw")

    def test_builds_firestore_with_shared_collection(self, test_config):
        test_config["database"]["firestore"] = {"project_id": "molino"}
        store = StoreFactory.build_document_store("firestore")

        assert isinstance(store, FirestoreDocumentStore)
        assert store.collection == "documents"
        assert store.project_id == "molino"

    def test_unknown_backend_falls_back_to_couchdb(self, test_config):
        test_config["database"]["backend"] = "mongodb"
        assert config_manager.get_store_backend() == StoreBackend.COUCHDB

    @pytest.mark.asyncio
    async def test_create_reuses_instances(self):
        first = await StoreFactory.create_document_store()
        second = await StoreFactory.create_document_store()
        other = await StoreFactory.create_document_store(collection="archive")

        assert first is second
        assert other is not first
        assert first.initialized and other.initialized


class TestDatabaseService:
    @pytest.mark.asyncio
    async def test_shared_instance(self):
        store = await DatabaseService.ensure_initialized()
        assert store is DatabaseService.get_instance()
        assert store.initialized

    @pytest.mark.asyncio
    async def test_set_and_reset_instance(self, store):
        DatabaseService.set_instance(store)
        assert DatabaseService.get_instance() is store

        await DatabaseService.reset_instance()
        assert not store.initialized
        assert DatabaseService.get_instance() is not store


class TestServiceLifecycle:
    @pytest.mark.asyncio
    async def test_logging_service_adds_file_sink(self, tmp_path):
        log_file = tmp_path / "molino.log"
        service = LoggingService()

        assert await service.initialize({"logging": {"level": "DEBUG", "file": str(log_file)}})
        logger.info("store ready")
        await service.shutdown()

        assert "store ready" in log_file.read_text()
        assert not service.is_initialized()

    @pytest.mark.asyncio
    async def test_initializer_brings_up_and_tears_down(self, test_config):
        initializer = ServiceInitializer()

        assert await initializer.initialize_all_services(dict(test_config))
        assert initializer.is_initialized()
        assert ServiceRegistry.get("logging") is not None
        assert DatabaseService.get_instance().initialized

        assert await initializer.shutdown_all_services()
        assert ServiceRegistry.get_all() == {}
        assert DatabaseService._instance is None


class TestAdminCommands:
    @pytest.mark.asyncio
    async def test_seed_then_stats(self):
        await execute("seed")
        summary = await execute("stats")

        assert summary["empleados"]["total"] == 5
        assert summary["contratos"]["total"] == 5

    @pytest.mark.asyncio
    async def test_init_reports_document_count(self):
        info = await execute("init")
        assert info == {"backend": "memory", "collection": "documents", "documents": 0}

    @pytest.mark.asyncio
    async def test_unknown_command(self):
        with pytest.raises(ValueError):
            await execute("drop")

    def test_run_command_uses_given_configuration(self, capsys):
        cfg = OmegaConf.create({**TEST_CONFIG, "command": "init"})

        assert run_command(cfg)
        assert '"backend": "memory"' in capsys.readouterr().out
