"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Models Package                                                ║
║                                                                              ║
║  Exporta todos los modelos para import fácil                                 ║
║  from models import SalesRecordCreate, SoldStatus, UserCreate, etc.          ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

# Auth
from .auth import (
    VALID_ROLES,
    UserLogin,
    UserCreate,
    UserUpdate,
)

# SalesRecord
from .record import (
    SoldStatus,
    ContactedFlag,
    LEGACY_PENDING_TAG,
    PREDEFINED_INDUSTRIES,
    CUSTOM_INDUSTRY,
    normalize_sold,
    resolve_industry,
    SalesRecordCreate,
    SalesRecordUpdate,
)

# Cycle
from .cycle import (
    CycleArchive,
)


__all__ = [
    # Auth
    "VALID_ROLES",
    "UserLogin",
    "UserCreate",
    "UserUpdate",
    # SalesRecord
    "SoldStatus",
    "ContactedFlag",
    "LEGACY_PENDING_TAG",
    "PREDEFINED_INDUSTRIES",
    "CUSTOM_INDUSTRY",
    "normalize_sold",
    "resolve_industry",
    "SalesRecordCreate",
    "SalesRecordUpdate",
    # Cycle
    "CycleArchive",
]
