"""
Routes para las estadísticas por vendedor + tablero
"""

from fastapi import APIRouter, Depends
from typing import Optional

from config import get_db
from routes.auth import get_current_user
from services import record_store
from services.cycles import list_cycles
from services.sales_stats import (
    LEGACY_DISPLAY_TIERS,
    TIER_DISPLAY,
    compute_stats,
    top_performer,
)
from services.user_directory import get_users
from services.view_state import CURRENT_CYCLE, ViewState, reduce_view

router = APIRouter(tags=["Estadísticas"])


async def _stats_for_cycle(db, cycle_id: Optional[str]):
    # Las estadísticas son del equipo completo, sin importar el rol de quien mira
    records = await record_store.get_records(db, cycle_id=cycle_id)
    users = await get_users(db)
    return compute_stats(records, users)


@router.get("/stats")
async def get_stats(
    cycle_id: Optional[str] = None,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Visitas y comisiones por vendedor para el ciclo pedido."""
    stats = await _stats_for_cycle(db, cycle_id)
    return {
        "stats": stats,
        "top_performer": top_performer(stats),
        "cycle_id": cycle_id,
    }


@router.get("/stats/tiers")
async def get_tiers(user: dict = Depends(get_current_user)):
    return {
        "tiers": TIER_DISPLAY,
        "legacy_tiers": {
            "tiers": LEGACY_DISPLAY_TIERS,
            "inconsistent": True,
            "note": "Tabla de un panel anterior, no usada para calcular comisiones",
        },
    }


@router.get("/dashboard")
async def get_dashboard(
    cycle_index: int = CURRENT_CYCLE,
    tab: str = "list",
    initial: bool = False,
    acknowledged: bool = False,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """
    Todo lo que la pantalla necesita en una sola lectura:
    ciclos, ciclo mirado, navegación, visitas visibles, stats y banner.
    """
    state = reduce_view(ViewState(), {"type": "login", "user": user})
    if acknowledged:
        state = reduce_view(state, {"type": "acknowledge_top_performer"})
    state = reduce_view(state, {"type": "cycles_loaded", "cycles": await list_cycles(db)})
    state = reduce_view(state, {"type": "select_cycle", "index": cycle_index})
    state = reduce_view(state, {"type": "select_tab", "tab": tab})

    records = await record_store.get_records(db, cycle_id=state.cycle_id, user=user)
    stats = await _stats_for_cycle(db, state.cycle_id)
    state = reduce_view(state, {"type": "stats_loaded", "stats": stats, "initial": initial})

    return {
        "tab": state.tab,
        "cycles": state.cycles,
        "cycle": {
            "index": state.cycle_index,
            "id": state.cycle_id,
            "name": state.cycle_name,
            "display_name": state.display_name,
            "is_current": state.is_current_cycle,
            "can_go_previous": state.can_go_previous,
            "can_go_next": state.can_go_next,
        },
        "records": records,
        "stats": stats,
        "show_top_performer": state.show_top_performer,
        "can_archive": user.get("role") == "owner" and state.is_current_cycle,
    }
