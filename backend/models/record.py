"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Modelo SalesRecord (visita de campo)                          ║
║                                                                              ║
║  REGLAS:                                                                     ║
║  1. date / inCharge se fijan al crear y no se editan nunca                   ║
║  2. cycleId = None → ciclo actual (abierto)                                  ║
║  3. cycleId solo cambia en bloque al archivar el ciclo                       ║
║  4. sold es un enum cerrado; "Interesado/Dudoso" es sinónimo de Pendiente    ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from typing import Optional
from enum import Enum
from pydantic import BaseModel, field_validator


class SoldStatus(str, Enum):
    """Resultado de la visita."""
    SI = "Si"                 # Vendido
    NO = "No"                 # Rechazado
    PENDIENTE = "Pendiente"   # Pendiente


LEGACY_PENDING_TAG = "Interesado/Dudoso"


class ContactedFlag(str, Enum):
    SI = "Si"
    NO = "No"


PREDEFINED_INDUSTRIES = [
    "ROPA",
    "COMIDA",
    "CONSULTORIO",
    "CANCHAS",
    "TECNOLOGIA",
    "PELUQUERIA",
    "MAYORISTA",
    "LIBRERIA",
]

# Valor del selector que indica "rubro personalizado"
CUSTOM_INDUSTRY = "OTRA"


def normalize_sold(value) -> Optional[SoldStatus]:
    """
    Convierte un tag guardado en el enum cerrado.
    El tag legacy "Interesado/Dudoso" pasa a Pendiente.
    Un valor desconocido devuelve None (no cuenta en ningún resultado).
    """
    if isinstance(value, SoldStatus):
        return value
    if value == LEGACY_PENDING_TAG:
        return SoldStatus.PENDIENTE
    try:
        return SoldStatus(value)
    except ValueError:
        return None


def resolve_industry(selected: str, custom: str = "") -> str:
    """Rubro final: el custom en mayúsculas si se eligió OTRA."""
    if (selected or "").strip().upper() == CUSTOM_INDUSTRY:
        return (custom or "").strip().upper()
    return (selected or "").strip()


def _required_text(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value.strip()


class SalesRecordCreate(BaseModel):
    """Alta de una visita. date, inCharge y cycleId los pone el servidor."""
    company: str
    address: str
    industry: str = ""
    custom_industry: Optional[str] = ""
    sold: SoldStatus = SoldStatus.PENDIENTE
    contactInfo: str
    contacted: ContactedFlag = ContactedFlag.NO

    @field_validator('company')
    def validate_company(cls, v):
        return _required_text(v, "La empresa es obligatoria")

    @field_validator('address')
    def validate_address(cls, v):
        return _required_text(v, "La dirección es obligatoria")

    @field_validator('contactInfo')
    def validate_contact(cls, v):
        return _required_text(v, "El contacto es obligatorio")

    @field_validator('sold', mode='before')
    def validate_sold(cls, v):
        if v == LEGACY_PENDING_TAG:
            return SoldStatus.PENDIENTE
        return v


class SalesRecordUpdate(BaseModel):
    """Campos editables por el dueño o el vendedor que cargó la visita."""
    company: Optional[str] = None
    address: Optional[str] = None
    industry: Optional[str] = None
    custom_industry: Optional[str] = None
    sold: Optional[SoldStatus] = None
    contactInfo: Optional[str] = None
    contacted: Optional[ContactedFlag] = None

    @field_validator('company')
    def validate_company(cls, v):
        return v if v is None else _required_text(v, "La empresa no puede estar vacía")

    @field_validator('address')
    def validate_address(cls, v):
        return v if v is None else _required_text(v, "La dirección no puede estar vacía")

    @field_validator('contactInfo')
    def validate_contact(cls, v):
        return v if v is None else _required_text(v, "El contacto no puede estar vacío")

    @field_validator('sold', mode='before')
    def validate_sold(cls, v):
        if v == LEGACY_PENDING_TAG:
            return SoldStatus.PENDIENTE
        return v
