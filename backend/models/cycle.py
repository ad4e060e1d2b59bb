"""
Visitas CRM - Modelo de cierre de ciclo (período de reporte archivado)
"""

from pydantic import BaseModel, field_validator


class CycleArchive(BaseModel):
    name: str

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("El nombre del ciclo es obligatorio")
        return v.strip()
