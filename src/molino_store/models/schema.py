"""Entity schema definitions for the rice-mill HR records.

These Pydantic models describe the documents the HR application keeps in the
store. The store itself never validates against them; callers use them to
build and check document bodies before an insert.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .core import Document, DocumentType


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def full_name(first_name: str, last_name: str) -> str:
    """Derived display name used by the name-search view."""
    return f"{first_name} {last_name}".strip()


class BaseRecord(BaseModel):
    """Base record schema with common fields."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Unique identifier")
    type: str = Field(..., description="Entity kind")
    fecha_creacion: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    fecha_actualizacion: Optional[str] = Field(None, description="Last update timestamp")

    def to_document(self) -> Document:
        """Dump the record as a store document, dropping an unset id."""
        return self.model_dump(exclude_none=True)


class Observation(BaseModel):
    """Note attached to an employee record."""

    fecha: str = Field(default_factory=utc_now_iso, description="Observation timestamp")
    tipo: Literal["llamado_atencion", "felicitacion", "advertencia", "otro"]
    descripcion: str
    autor: str


class Employee(BaseRecord):
    """Employee entity schema."""

    type: Literal["empleado"] = DocumentType.EMPLOYEE.value
    nro_documento: str = Field(..., description="National identity document number")
    nombre: str
    apellido: str
    nombre_apellido: Optional[str] = Field(None, description="Derived full name kept in sync on write")
    edad: int = Field(..., ge=0)
    genero: Literal["Masculino", "Femenino", "Otro"]
    cargo: str
    correo: str
    nro_contacto: str
    estado: Literal["activo", "inactivo", "suspendido"] = "activo"
    observaciones: List[Observation] = Field(default_factory=list)

    @model_validator(mode="after")
    def _sync_full_name(self) -> "Employee":
        self.nombre_apellido = full_name(self.nombre, self.apellido)
        return self

    def add_observation(self, tipo: str, descripcion: str, autor: str) -> Observation:
        """Append an observation and stamp the update time."""
        observation = Observation(tipo=tipo, descripcion=descripcion, autor=autor)
        self.observaciones.append(observation)
        self.fecha_actualizacion = utc_now_iso()
        return observation


class Contract(BaseRecord):
    """Employment contract entity schema."""

    type: Literal["contrato"] = DocumentType.CONTRACT.value
    empleado_id: str = Field(..., description="Employee ID reference")
    empleado_nombre: str
    empleado_documento: str
    fecha_inicio: str
    fecha_fin: str
    valor_contrato: float = Field(..., ge=0)
    cargo: str
    tipo_contrato: Literal["indefinido", "temporal", "prestacion_servicios"]
    estado: Literal["activo", "terminado", "vencido"] = "activo"

    @classmethod
    def for_employee(cls, employee: Dict[str, Any], **fields: Any) -> "Contract":
        """Build a contract denormalizing the employee's name and document."""
        return cls(
            empleado_id=employee["id"],
            empleado_nombre=full_name(employee["nombre"], employee["apellido"]),
            empleado_documento=employee["nro_documento"],
            **fields,
        )


class Account(BaseRecord):
    """System account entity schema."""

    type: Literal["usuario"] = DocumentType.ACCOUNT.value
    username: str
    email: str
    password_hash: str
    rol: Literal["administrador", "supervisor", "usuario"] = "usuario"
    empleado_id: str = Field(..., description="Employee ID reference")
    activo: bool = True
    reset_token: Optional[str] = None
    reset_token_expires: Optional[str] = None
