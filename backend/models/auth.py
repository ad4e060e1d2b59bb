"""
Visitas CRM - Modelos Auth & Usuarios
Dos roles: owner (dueño, ve y edita todo) y employee (solo lo propio).
"""

from pydantic import BaseModel, field_validator
from typing import Optional


VALID_ROLES = ["owner", "employee"]


class UserLogin(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str
    password: str
    role: str = "employee"

    @field_validator("username")
    def validate_username(cls, v):
        if not v or not v.strip():
            raise ValueError("Todos los campos son obligatorios")
        return v.strip()

    @field_validator("password")
    def validate_password(cls, v):
        if not v:
            raise ValueError("Todos los campos son obligatorios")
        return v

    @field_validator("role")
    def validate_role(cls, v):
        if v not in VALID_ROLES:
            raise ValueError(f"Rol inválido: {v}. Válidos: {VALID_ROLES}")
        return v


class UserUpdate(BaseModel):
    """username no se puede cambiar: los registros lo referencian."""
    password: Optional[str] = None
    role: Optional[str] = None

    @field_validator("password")
    def validate_password(cls, v):
        if v is not None and not v:
            raise ValueError("La contraseña no puede estar vacía")
        return v

    @field_validator("role")
    def validate_role(cls, v):
        if v is not None and v not in VALID_ROLES:
            raise ValueError(f"Rol inválido: {v}")
        return v
