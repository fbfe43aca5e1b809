"""Shared fixtures for the document store test suite."""

import pytest

from molino_store.services import DatabaseService, ServiceRegistry
from molino_store.store import InMemoryDocumentStore, StoreFactory
from molino_store.utils.config import config_manager


TEST_CONFIG = {
    "database": {
        "backend": "memory",
        "collection": "documents",
        "find_limit": 50,
    },
    "statistics": {
        "page_size": 200,
        "expiring_within_days": 30,
    },
    "seed": {
        "admin_username": "admin",
        "admin_email": "admin@molino.test",
        "admin_password": "s3cret-pass",
    },
}


@pytest.fixture(autouse=True)
def test_config():
    """Install a memory-backed configuration and drop shared state afterwards."""
    config_manager.set_config({k: dict(v) for k, v in TEST_CONFIG.items()})
    yield config_manager.get_config()
    config_manager.reset()
    DatabaseService._instance = None
    DatabaseService._lock = None
    StoreFactory._document_store_instances.clear()
    ServiceRegistry.clear()


@pytest.fixture
def store():
    """A fresh in-memory store."""
    return InMemoryDocumentStore()


def employee_doc(nro_documento, nombre, apellido, estado="activo", **extra):
    """Build an employee body the way the HR application stores it."""
    doc = {
        "type": "empleado",
        "nro_documento": nro_documento,
        "nombre": nombre,
        "apellido": apellido,
        "nombre_apellido": f"{nombre} {apellido}",
        "edad": 30,
        "genero": "Masculino",
        "cargo": "Operador de Molino",
        "estado": estado,
    }
    doc.update(extra)
    return doc


def contract_doc(empleado_id, estado="activo", **extra):
    """Build a contract body referencing an employee."""
    doc = {
        "type": "contrato",
        "empleado_id": empleado_id,
        "fecha_inicio": "2024-01-01",
        "fecha_fin": "2024-12-31",
        "valor_contrato": 1000000,
        "tipo_contrato": "indefinido",
        "estado": estado,
    }
    doc.update(extra)
    return doc
