"""Maintenance operations: wiping and seeding the document store."""

from datetime import date
from typing import Any, Dict, List, Optional
from loguru import logger
from werkzeug.security import generate_password_hash

from ..models.core import BulkResult
from ..models.schema import Account, Contract, Employee, Observation
from ..store import DocumentStore
from ..utils.config import config_manager
from .database_service import DatabaseService


SAMPLE_EMPLOYEES: List[Dict[str, Any]] = [
    {
        "nro_documento": "12345678",
        "nombre": "Juan",
        "apellido": "Pérez",
        "edad": 35,
        "genero": "Masculino",
        "cargo": "Gerente General",
        "correo": "juan.perez@molino.com",
        "nro_contacto": "3001234567",
    },
    {
        "nro_documento": "87654321",
        "nombre": "María",
        "apellido": "González",
        "edad": 28,
        "genero": "Femenino",
        "cargo": "Supervisora de Producción",
        "correo": "maria.gonzalez@molino.com",
        "nro_contacto": "3007654321",
    },
    {
        "nro_documento": "11223344",
        "nombre": "Carlos",
        "apellido": "Rodríguez",
        "edad": 42,
        "genero": "Masculino",
        "cargo": "Operador de Molino",
        "correo": "carlos.rodriguez@molino.com",
        "nro_contacto": "3001122334",
        "observaciones": [
            {
                "fecha": "2024-01-15T10:30:00Z",
                "tipo": "felicitacion",
                "descripcion": "Excelente desempeño en el mantenimiento del molino",
                "autor": "Supervisor",
            }
        ],
    },
    {
        "nro_documento": "55667788",
        "nombre": "Ana",
        "apellido": "Martínez",
        "edad": 31,
        "genero": "Femenino",
        "cargo": "Contadora",
        "correo": "ana.martinez@molino.com",
        "nro_contacto": "3005566778",
    },
    {
        "nro_documento": "99887766",
        "nombre": "Luis",
        "apellido": "Hernández",
        "edad": 25,
        "genero": "Masculino",
        "cargo": "Auxiliar Administrativo",
        "correo": "luis.hernandez@molino.com",
        "nro_contacto": "3009988776",
    },
]

# Monthly contract value per position
SAMPLE_CONTRACT_VALUES: Dict[str, float] = {
    "Gerente General": 8000000,
    "Supervisora de Producción": 5000000,
    "Operador de Molino": 3200000,
    "Contadora": 4000000,
    "Auxiliar Administrativo": 2500000,
}
DEFAULT_CONTRACT_VALUE = 2000000


class MaintenanceService:
    """Administrative operations over the whole store."""

    def __init__(self, store: Optional[DocumentStore] = None):
        self.store = store or DatabaseService.get_instance()

    async def clear_database(self) -> BulkResult:
        """Delete every non-design document.

        Returns:
            The bulk deletion result
        """
        listing = await self.store.list()
        ids = [row.id for row in listing.rows]
        if not ids:
            logger.info("Store is already empty")
            return BulkResult(ok=True)

        logger.info(f"Deleting {len(ids)} documents")
        result = await self.store.bulk(ids)
        logger.info(f"Deleted {len(result.deleted)} documents")
        return result

    async def seed_database(self, today: Optional[date] = None) -> Dict[str, int]:
        """Insert sample employees, one contract each and an admin account.

        Args:
            today: Reference date for contract periods (defaults to the current date)

        Returns:
            Number of documents created per type
        """
        today = today or date.today()
        seed_cfg = config_manager.get_config().get("seed", {}) or {}

        employees = []
        for sample in SAMPLE_EMPLOYEES:
            fields = dict(sample)
            fields["observaciones"] = [Observation(**o) for o in fields.get("observaciones", [])]
            employee = Employee(**fields).to_document()
            employee["id"] = (await self.store.insert(employee)).id
            employees.append(employee)
        logger.info(f"Seeded {len(employees)} employees")

        for employee in employees:
            contract = Contract.for_employee(
                employee,
                fecha_inicio=date(today.year, 1, 1).isoformat(),
                fecha_fin=date(today.year, 12, 31).isoformat(),
                valor_contrato=SAMPLE_CONTRACT_VALUES.get(employee["cargo"], DEFAULT_CONTRACT_VALUE),
                cargo=employee["cargo"],
                tipo_contrato="indefinido",
            )
            await self.store.insert(contract.to_document())
        logger.info(f"Seeded {len(employees)} contracts")

        admin_employee = employees[0]
        admin = Account(
            username=seed_cfg.get("admin_username", "admin"),
            email=seed_cfg.get("admin_email", admin_employee["correo"]),
            password_hash=generate_password_hash(str(seed_cfg.get("admin_password", "12345678"))),
            rol="administrador",
            empleado_id=admin_employee["id"],
        )
        await self.store.insert(admin.to_document())
        logger.info(f"Seeded administrator account '{admin.username}'")

        return {"empleados": len(employees), "contratos": len(employees), "usuarios": 1}

    async def reset_database(self, today: Optional[date] = None) -> Dict[str, int]:
        """Clear the store and seed it again."""
        await self.clear_database()
        return await self.seed_database(today)
