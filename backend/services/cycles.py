"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Cierre y archivo de ciclos                                    ║
║                                                                              ║
║  Dos estados por visita:                                                     ║
║    ABIERTO  → cycle_id = None                                                ║
║    CERRADO  → cycle_id = id de un ciclo                                      ║
║                                                                              ║
║  archive_current_cycle(name):                                                ║
║    1. Crear el ciclo (si falla, no se toca ninguna visita)                   ║
║    2. Pasar TODAS las visitas abiertas al ciclo nuevo (un update_many)       ║
║                                                                              ║
║  No es atómico: si falla el paso 2 queda un ciclo vacío huérfano y las       ║
║  visitas siguen abiertas.                                                    ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List

from config import now_iso
from services.record_store import RECORDS

logger = logging.getLogger("cycles")

CYCLES = "sales_cycles"

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


class ArchiveError(Exception):
    """El archivo del ciclo no se pudo completar."""

    def __init__(self, message: str, cycle: Dict = None):
        super().__init__(message)
        self.cycle = cycle


def default_cycle_name(now: datetime = None) -> str:
    """Ej: 'Ciclo octubre de 2026' (formato mes/año es-AR)."""
    now = now or datetime.now()
    return f"Ciclo {MONTHS_ES[now.month - 1]} de {now.year}"


async def list_cycles(db) -> List[Dict]:
    """Ciclos archivados, el más reciente primero."""
    try:
        return await db[CYCLES].find({}, {"_id": 0}).sort("created_at", -1).to_list(1000)
    except Exception as e:
        logger.error(f"Error leyendo ciclos: {e}")
        return []


async def get_cycle(db, cycle_id: str) -> Dict:
    return await db[CYCLES].find_one({"id": cycle_id}, {"_id": 0})


async def archive_current_cycle(db, name: str) -> Dict:
    """
    Cierra el ciclo actual bajo el nombre dado.
    Devuelve {"cycle": ..., "archived": n}. Lanza ArchiveError si falla.
    """
    cycle = {
        "id": str(uuid.uuid4()),
        "name": name,
        "created_at": now_iso(),
    }

    # PASO 1: crear el ciclo
    try:
        await db[CYCLES].insert_one(dict(cycle))
    except Exception as e:
        logger.error(f"Error creando ciclo {name!r}: {e}")
        raise ArchiveError("No se pudo crear el ciclo") from e

    # PASO 2: mover las visitas abiertas
    try:
        result = await db[RECORDS].update_many(
            {"cycle_id": None},
            {"$set": {"cycle_id": cycle["id"]}}
        )
    except Exception as e:
        logger.error(f"Ciclo {cycle['id']} creado pero las visitas no se movieron: {e}")
        raise ArchiveError("El ciclo quedó creado pero vacío", cycle=cycle) from e

    logger.info(f"Ciclo archivado: {name!r} ({cycle['id']}), {result.modified_count} visitas")
    return {"cycle": cycle, "archived": result.modified_count}
