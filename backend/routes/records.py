"""
Routes para las visitas (sales_records)
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from config import get_db
from models.record import (
    ContactedFlag,
    PREDEFINED_INDUSTRIES,
    CUSTOM_INDUSTRY,
    SalesRecordCreate,
    SalesRecordUpdate,
    resolve_industry,
)
from routes.auth import get_current_user
from services import record_store
from services.change_feed import feed
from services.duplicate_detector import check_duplicate
from services.event_logger import log_event
from services.whatsapp import InvalidContactError, build_whatsapp_link

router = APIRouter(prefix="/records", tags=["Visitas"])

GENERIC_ERROR = "No se pudo procesar la operación"


async def _get_modifiable(db, record_id: int, user: dict) -> dict:
    record = await record_store.get_record(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Visita no encontrada")
    if not record_store.can_modify(user, record):
        raise HTTPException(status_code=403, detail="Solo el dueño o quien cargó la visita puede modificarla")
    return record


# ==================== LECTURA ====================

@router.get("")
async def list_records(
    cycle_id: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Visitas visibles del ciclo (actual si no se indica)."""
    records = await record_store.get_records(db, cycle_id=cycle_id, user=user)
    return {"records": records, "count": len(records), "cycle_id": cycle_id}


@router.get("/search")
async def search_records(
    q: str = "",
    sold: str = "all",
    cycle_id: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Búsqueda libre + filtro por estado sobre las visitas visibles."""
    records = await record_store.get_records(db, cycle_id=cycle_id, user=user)
    filtered = record_store.search_records(records, q, sold)
    return {"records": filtered, "count": len(filtered)}


@router.get("/industries")
async def list_industries(user: dict = Depends(get_current_user)):
    return {"industries": PREDEFINED_INDUSTRIES, "custom": CUSTOM_INDUSTRY}


@router.get("/duplicate-check")
async def duplicate_check(
    company: str = "",
    contact: str = "",
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Vendedor que ya cargó esa empresa o contacto en el ciclo actual, o null."""
    owner = await check_duplicate(db, company, contact)
    return {"duplicate": owner is not None, "owner": owner}


@router.get("/whatsapp-link")
async def adhoc_whatsapp_link(contact: str, user: dict = Depends(get_current_user)):
    """Link de WhatsApp para un contacto suelto (sin visita guardada)."""
    try:
        return {"link": build_whatsapp_link(contact)}
    except InvalidContactError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{record_id}/whatsapp")
async def whatsapp_link(record_id: int, user: dict = Depends(get_current_user), db=Depends(get_db)):
    record = await record_store.get_record(db, record_id)
    if not record or not record_store.filter_visible([record], user):
        raise HTTPException(status_code=404, detail="Visita no encontrada")

    try:
        link = build_whatsapp_link(record["contactInfo"])
    except InvalidContactError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"link": link}


# ==================== ESCRITURA ====================

@router.post("")
async def create_record(data: SalesRecordCreate, user: dict = Depends(get_current_user), db=Depends(get_db)):
    """
    Alta de visita en el ciclo actual.

    Flow:
    1. Validar rubro (predefinido u OTRA + texto)
    2. Chequeo de duplicado en el ciclo actual → 409 con el vendedor
    3. Guardar (date e inCharge los pone el servidor)
    """
    if not resolve_industry(data.industry, data.custom_industry):
        raise HTTPException(status_code=400, detail="Por favor selecciona o escribe un rubro.")

    owner = await check_duplicate(db, data.company, data.contactInfo)
    if owner:
        raise HTTPException(
            status_code=409,
            detail={"message": f"Este registro ya fue realizado por: {owner}", "owner": owner}
        )

    record = await record_store.add_record(db, user["username"], data)
    if record is None:
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    await log_event(db, "create_record", "record", record["id"], user=user["username"])
    feed.publish("sales_records", "insert")

    return {"success": True, "record": record}


@router.put("/{record_id}")
async def update_record(
    record_id: int,
    data: SalesRecordUpdate,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    await _get_modifiable(db, record_id, user)

    changes = data.model_dump(exclude_none=True)
    custom = changes.pop("custom_industry", "")
    if "industry" in changes:
        changes["industry"] = resolve_industry(changes["industry"], custom)
        if not changes["industry"]:
            raise HTTPException(status_code=400, detail="El rubro no puede estar vacío.")

    if not await record_store.update_record(db, record_id, changes):
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    feed.publish("sales_records", "update")
    return {"success": True, "record": await record_store.get_record(db, record_id)}


@router.post("/{record_id}/toggle-contacted")
async def toggle_contacted(record_id: int, user: dict = Depends(get_current_user), db=Depends(get_db)):
    record = await _get_modifiable(db, record_id, user)

    new_status = ContactedFlag.NO if record["contacted"] == ContactedFlag.SI.value else ContactedFlag.SI
    if not await record_store.update_record(db, record_id, {"contacted": new_status}):
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    feed.publish("sales_records", "update")
    return {"success": True, "contacted": new_status.value}


@router.delete("/{record_id}")
async def delete_record(record_id: int, user: dict = Depends(get_current_user), db=Depends(get_db)):
    record = await _get_modifiable(db, record_id, user)

    if not await record_store.delete_record(db, record_id):
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    await log_event(
        db, "delete_record", "record", record_id,
        user=user["username"], details={"company": record["company"], "in_charge": record["inCharge"]}
    )
    feed.publish("sales_records", "delete")

    return {"success": True}
