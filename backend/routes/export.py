"""
Routes de exportación: reporte CSV (Excel) y backup JSON
"""

from urllib.parse import quote
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from typing import Optional

from config import get_db
from routes.auth import get_current_user
from services import record_store
from services.cycles import get_cycle
from services.event_logger import log_event
from services.export import (
    convert_to_csv,
    convert_to_json,
    csv_filename,
    json_filename,
    with_bom,
)

router = APIRouter(prefix="/export", tags=["Export"])


def _attachment(filename: str) -> dict:
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return {
        "Content-Disposition": f'attachment; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename)}'
    }


async def _cycle_name(db, cycle_id: Optional[str]) -> Optional[str]:
    if not cycle_id:
        return None
    cycle = await get_cycle(db, cycle_id)
    if not cycle:
        raise HTTPException(status_code=404, detail="Ciclo no encontrado")
    return cycle.get("name")


@router.get("/csv")
async def export_csv(
    cycle_id: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Reporte de las visitas visibles del ciclo, con BOM para Excel."""
    name = await _cycle_name(db, cycle_id)
    records = await record_store.get_records(db, cycle_id=cycle_id, user=user)

    await log_event(
        db, "export_csv", "cycle", cycle_id or "current",
        user=user["username"], details={"count": len(records)}
    )

    return Response(
        content=with_bom(convert_to_csv(records)).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers=_attachment(csv_filename(name))
    )


@router.get("/json")
async def export_json(
    cycle_id: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Backup de las visitas visibles del ciclo, tal cual."""
    name = await _cycle_name(db, cycle_id)
    records = await record_store.get_records(db, cycle_id=cycle_id, user=user)

    await log_event(
        db, "export_json", "cycle", cycle_id or "current",
        user=user["username"], details={"count": len(records)}
    )

    return Response(
        content=convert_to_json(records).encode("utf-8"),
        media_type="application/json; charset=utf-8",
        headers=_attachment(json_filename(name))
    )
