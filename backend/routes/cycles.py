"""
Routes para los ciclos (historial de períodos)
"""

from fastapi import APIRouter, HTTPException, Depends

from config import get_db
from models.cycle import CycleArchive
from routes.auth import get_current_user, require_owner
from services.change_feed import feed
from services.cycles import ArchiveError, archive_current_cycle, default_cycle_name, list_cycles
from services.event_logger import log_event

router = APIRouter(prefix="/cycles", tags=["Ciclos"])


@router.get("")
async def get_cycles(user: dict = Depends(get_current_user), db=Depends(get_db)):
    """Ciclos archivados, el más reciente primero."""
    cycles = await list_cycles(db)
    return {"cycles": cycles, "count": len(cycles)}


@router.get("/default-name")
async def get_default_name(user: dict = Depends(get_current_user)):
    return {"name": default_cycle_name()}


@router.post("/archive")
async def archive_cycle(data: CycleArchive, user: dict = Depends(require_owner), db=Depends(get_db)):
    """
    Cierra el ciclo actual: todas las visitas abiertas pasan al ciclo nuevo
    y la planilla queda vacía para empezar de nuevo.
    """
    try:
        result = await archive_current_cycle(db, data.name)
    except ArchiveError as e:
        if e.cycle:
            feed.publish("sales_cycles", "insert")
        raise HTTPException(status_code=500, detail="Hubo un error al archivar el ciclo.")

    await log_event(
        db, "archive_cycle", "cycle", result["cycle"]["id"],
        user=user["username"], details={"name": data.name, "archived": result["archived"]}
    )
    feed.publish("sales_cycles", "insert")
    feed.publish("sales_records", "update")

    return {"success": True, **result}
