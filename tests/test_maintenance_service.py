"""Tests for clearing and seeding the store."""

from datetime import date

import pytest
from werkzeug.security import check_password_hash

from molino_store.errors import NotFoundError
from molino_store.services import MaintenanceService, StatisticsService


class TestMaintenanceService:
    @pytest.mark.asyncio
    async def test_seed_creates_linked_records(self, store):
        counts = await MaintenanceService(store).seed_database(today=date(2024, 3, 1))
        assert counts == {"empleados": 5, "contratos": 5, "usuarios": 1}

        juan = (await store.view("documents-by-secondary-id", {"key": "12345678"})).docs[0]
        assert juan["nombre_apellido"] == "Juan Pérez"

        contracts = await store.view("children-by-parent-id", {"key": juan["id"]})
        assert len(contracts.rows) == 1
        assert contracts.docs[0]["fecha_fin"] == "2024-12-31"
        assert contracts.docs[0]["valor_contrato"] == 8000000

    @pytest.mark.asyncio
    async def test_seeded_admin_password_is_hashed(self, store):
        await MaintenanceService(store).seed_database()

        admin = (await store.view("accounts-by-login-name", {"key": "admin"})).docs[0]
        assert admin["rol"] == "administrador"
        assert admin["email"] == "admin@molino.test"
        assert admin["password_hash"] != "s3cret-pass"
        assert check_password_hash(admin["password_hash"], "s3cret-pass")

    @pytest.mark.asyncio
    async def test_clear_removes_everything(self, store):
        service = MaintenanceService(store)
        await service.seed_database()

        result = await service.clear_database()
        assert result.ok
        assert len(result.deleted) == 11
        assert (await store.list()).rows == []

    @pytest.mark.asyncio
    async def test_clear_on_empty_store(self, store):
        result = await MaintenanceService(store).clear_database()
        assert result.ok and result.deleted == []

    @pytest.mark.asyncio
    async def test_reset_replaces_existing_data(self, store):
        await store.insert({"id": "stray", "type": "empleado", "estado": "inactivo"})

        await MaintenanceService(store).reset_database()

        with pytest.raises(NotFoundError):
            await store.get("stray")
        stats = await StatisticsService(store).employee_statistics()
        assert stats["total"] == 5
        assert stats["activos"] == 5
