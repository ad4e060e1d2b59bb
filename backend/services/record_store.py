"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Acceso a la colección sales_records                           ║
║                                                                              ║
║  - Los documentos se guardan en snake_case (in_charge, contact_info, ...)    ║
║  - La API trabaja en camelCase (inCharge, contactInfo, cycleId)              ║
║  - El tag "sold" se normaliza acá, una sola vez (legacy → Pendiente)         ║
║  - Lecturas que fallan devuelven [] y se loguean, nunca se reintenta         ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import Dict, List, Optional

from pymongo import ReturnDocument

from config import today_es_ar
from models.record import (
    ContactedFlag,
    SalesRecordCreate,
    SoldStatus,
    normalize_sold,
    resolve_industry,
)

logger = logging.getLogger("record_store")

RECORDS = "sales_records"
MAX_RECORDS = 10000

# Campos que el dueño o el vendedor original pueden modificar
EDITABLE_FIELDS = {
    "company": "company",
    "address": "address",
    "industry": "industry",
    "sold": "sold",
    "contactInfo": "contact_info",
    "contacted": "contacted",
}


def row_to_record(row: Dict) -> Dict:
    """Documento Mongo → visita en formato API. Un tag de resultado desconocido se deja tal cual."""
    status = normalize_sold(row.get("sold"))
    contacted = row.get("contacted", ContactedFlag.NO.value)
    if contacted not in (ContactedFlag.SI.value, ContactedFlag.NO.value):
        contacted = ContactedFlag.NO.value
    return {
        "id": row["id"],
        "date": row.get("date", ""),
        "inCharge": row.get("in_charge", ""),
        "address": row.get("address", "") or "",
        "company": row.get("company", "") or "",
        "industry": row.get("industry", "") or "",
        "sold": status.value if status else (row.get("sold") or ""),
        "contactInfo": row.get("contact_info", "") or "",
        "contacted": contacted,
        "cycleId": row.get("cycle_id"),
    }


def cycle_query(cycle_id: Optional[str] = None) -> Dict:
    """None = ciclo actual (cycle_id nulo)."""
    return {"cycle_id": cycle_id if cycle_id else None}


def visibility_query(user: Optional[Dict]) -> Dict:
    """El dueño ve todo, el resto solo lo que cargó."""
    if user is None or user.get("role") == "owner":
        return {}
    return {"in_charge": user.get("username")}


def can_modify(user: Dict, record: Dict) -> bool:
    return user.get("role") == "owner" or record.get("inCharge") == user.get("username")


def filter_visible(records: List[Dict], user: Dict) -> List[Dict]:
    if user.get("role") == "owner":
        return list(records)
    return [r for r in records if r.get("inCharge") == user.get("username")]


def search_records(records: List[Dict], term: str = "", sold: Optional[str] = None) -> List[Dict]:
    """
    Filtro de la tabla: texto libre sobre empresa, dirección, rubro,
    vendedor y contacto; más un filtro exacto por estado ("all" = todos).
    """
    term = (term or "").strip().lower()
    status = None
    if sold and sold != "all":
        normalized = normalize_sold(sold)
        status = normalized.value if normalized else sold

    result = []
    for r in records:
        if term:
            haystack = (
                r.get("company", ""),
                r.get("address", ""),
                r.get("industry", ""),
                r.get("inCharge", ""),
                r.get("contactInfo", ""),
            )
            if not any(term in (field or "").lower() for field in haystack):
                continue
        if status and r.get("sold") != status:
            continue
        result.append(r)
    return result


async def next_record_id(db) -> int:
    """Identificador autoincremental (colección counters)."""
    counter = await db.counters.find_one_and_update(
        {"_id": RECORDS},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return counter["seq"]


async def get_records(db, cycle_id: Optional[str] = None, user: Optional[Dict] = None) -> List[Dict]:
    """
    Visitas de un ciclo (None = actual), en orden de alta descendente.
    Con user se aplica la visibilidad por rol.
    """
    query = {**cycle_query(cycle_id), **visibility_query(user)}
    try:
        rows = await db[RECORDS].find(query, {"_id": 0}).sort("id", -1).to_list(MAX_RECORDS)
    except Exception as e:
        logger.error(f"Error leyendo visitas (cycle={cycle_id}): {e}")
        return []
    return [row_to_record(row) for row in rows]


async def get_record(db, record_id: int) -> Optional[Dict]:
    row = await db[RECORDS].find_one({"id": record_id}, {"_id": 0})
    return row_to_record(row) if row else None


async def add_record(db, in_charge: str, data: SalesRecordCreate, date: str = None) -> Optional[Dict]:
    """Alta en el ciclo actual. Devuelve None si la escritura falla."""
    doc = {
        "date": date or today_es_ar(),
        "in_charge": in_charge,
        "address": data.address,
        "company": data.company,
        "industry": resolve_industry(data.industry, data.custom_industry),
        "sold": data.sold.value,
        "contact_info": data.contactInfo,
        "contacted": data.contacted.value,
        "cycle_id": None,
    }
    try:
        doc["id"] = await next_record_id(db)
        await db[RECORDS].insert_one(doc)
    except Exception as e:
        logger.error(f"Error guardando visita de {in_charge} ({data.company}): {e}")
        return None

    logger.info(f"Visita #{doc['id']} guardada: {data.company} por {in_charge}")
    return row_to_record(doc)


async def update_record(db, record_id: int, changes: Dict) -> bool:
    """changes en formato API; solo se aplican los campos editables."""
    update_data = {}
    for api_field, store_field in EDITABLE_FIELDS.items():
        if api_field not in changes or changes[api_field] is None:
            continue
        value = changes[api_field]
        if isinstance(value, (SoldStatus, ContactedFlag)):
            value = value.value
        update_data[store_field] = value

    if not update_data:
        return True

    try:
        await db[RECORDS].update_one({"id": record_id}, {"$set": update_data})
    except Exception as e:
        logger.error(f"Error actualizando visita #{record_id}: {e}")
        return False
    return True


async def delete_record(db, record_id: int) -> bool:
    try:
        await db[RECORDS].delete_one({"id": record_id})
    except Exception as e:
        logger.error(f"Error borrando visita #{record_id}: {e}")
        return False
    return True


async def clear_open_records(db) -> int:
    """
    Borra todas las visitas del ciclo actual.
    Reemplazado por el archivo de ciclos; solo para limpieza manual.
    """
    result = await db[RECORDS].delete_many({"cycle_id": None})
    logger.warning(f"Ciclo actual vaciado: {result.deleted_count} visitas borradas")
    return result.deleted_count
