"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  SERVICIO DE DETECCIÓN DE DUPLICADOS                                         ║
║                                                                              ║
║  Reglas:                                                                     ║
║  - Criterio: misma empresa O mismo contacto (sin distinguir mayúsculas)      ║
║  - Alcance: solo el ciclo ACTUAL (re-visitar en un ciclo nuevo es válido)    ║
║  - Resultado: el vendedor de la primera coincidencia (orden id desc)         ║
║                                                                              ║
║  Es un aviso: no hay lock, dos altas simultáneas pueden pasar las dos.       ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import Dict, Iterable, Optional

from services.record_store import get_records

logger = logging.getLogger("duplicate_detector")


def _key(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def find_duplicate_owner(records: Iterable[Dict], company: str, contact_info: str) -> Optional[str]:
    """
    Devuelve el inCharge de la primera visita cuya empresa o contacto
    coincide, o None. Campos vacíos nunca coinciden.
    """
    company_key = _key(company)
    contact_key = _key(contact_info)

    if not company_key and not contact_key:
        return None

    for record in records:
        if company_key and _key(record.get("company")) == company_key:
            return record.get("inCharge")
        if contact_key and _key(record.get("contactInfo")) == contact_key:
            return record.get("inCharge")
    return None


async def check_duplicate(db, company: str, contact_info: str) -> Optional[str]:
    """Chequeo contra las visitas del ciclo actual, de todos los vendedores."""
    open_records = await get_records(db, cycle_id=None)
    owner = find_duplicate_owner(open_records, company, contact_info)
    if owner:
        logger.info(f"Duplicado detectado: {company!r} / {contact_info!r} → {owner}")
    return owner
