"""Statistics service for employee and contract records.

Aggregates are computed client side from full scans of one document type.
Scans page through ``find`` so the default find limit never truncates them.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from loguru import logger

from ..models.core import Document, DocumentType
from ..store import DocumentStore
from ..utils.config import get_expiring_window_days
from .database_service import DatabaseService


AGE_BRACKETS = (
    ("18-25", 18, 25),
    ("26-35", 26, 35),
    ("36-45", 36, 45),
    ("46-55", 46, 55),
)
OLDEST_BRACKET = "55+"


def _tally(docs: List[Document], field_name: str) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for doc in docs:
        value = doc.get(field_name)
        if value is not None:
            counts[value] = counts.get(value, 0) + 1
    return counts


def age_distribution(employees: List[Document]) -> Dict[str, int]:
    """Count employees per age bracket. Ages under 18 fall in no bracket."""
    distribution = {label: 0 for label, _, _ in AGE_BRACKETS}
    distribution[OLDEST_BRACKET] = 0
    for employee in employees:
        age = employee.get("edad")
        if not isinstance(age, (int, float)):
            continue
        if age > 55:
            distribution[OLDEST_BRACKET] += 1
            continue
        for label, low, high in AGE_BRACKETS:
            if low <= age <= high:
                distribution[label] += 1
                break
    return distribution


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning(f"Ignoring malformed contract end date: {value!r}")
        return None


class StatisticsService:
    """Computes dashboard statistics over the document store."""

    def __init__(self, store: Optional[DocumentStore] = None):
        """Initialize the statistics service.

        Args:
            store: Store to read from (defaults to the shared store)
        """
        self.store = store or DatabaseService.get_instance()

    async def _all_of_type(self, doc_type: DocumentType) -> List[Document]:
        docs = await self.store.find_all({"type": doc_type.value})
        logger.debug(f"Scanned {len(docs)} documents of type {doc_type.value}")
        return docs

    async def employee_statistics(self) -> Dict[str, Any]:
        """Employee totals by status, position, gender and age bracket."""
        employees = await self._all_of_type(DocumentType.EMPLOYEE)
        by_status = await self.store.count_by_status(DocumentType.EMPLOYEE.value)

        return {
            "total": len(employees),
            "activos": by_status.get("activo", 0),
            "inactivos": by_status.get("inactivo", 0),
            "suspendidos": by_status.get("suspendido", 0),
            "por_estado": by_status,
            "por_cargo": _tally(employees, "cargo"),
            "por_genero": _tally(employees, "genero"),
            "por_edad": age_distribution(employees),
        }

    async def contract_statistics(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Contract totals by status, upcoming expirations and active value.

        Args:
            today: Reference date for expirations (defaults to the current date)
        """
        today = today or date.today()
        window = get_expiring_window_days()
        contracts = await self._all_of_type(DocumentType.CONTRACT)
        active = [c for c in contracts if c.get("estado") == "activo"]

        expiring = 0
        for contract in active:
            end = _parse_date(contract.get("fecha_fin"))
            if end is not None and 0 < (end - today).days <= window:
                expiring += 1

        return {
            "total": len(contracts),
            "activos": len(active),
            "vencidos": sum(1 for c in contracts if c.get("estado") == "vencido"),
            "terminados": sum(1 for c in contracts if c.get("estado") == "terminado"),
            "proximos_vencer": expiring,
            "valor_total": sum(float(c.get("valor_contrato") or 0) for c in active),
            "por_tipo": _tally(contracts, "tipo_contrato"),
        }

    async def summary(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Both statistics blocks keyed by entity."""
        return {
            "empleados": await self.employee_statistics(),
            "contratos": await self.contract_statistics(today),
        }
