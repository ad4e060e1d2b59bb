"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Estado de la vista (reducer)                                  ║
║                                                                              ║
║  Todo el estado de pantalla (pestaña, ciclo mirado, banner del mejor         ║
║  vendedor) vive en un ViewState inmutable. Cada acción produce uno nuevo:    ║
║      state = reduce_view(state, {"type": ..., ...})                          ║
║                                                                              ║
║  Navegación de ciclos:                                                       ║
║    cycle_index = -1  → ciclo actual                                          ║
║    cycle_index = 0   → último ciclo archivado, 1 el anterior, ...            ║
║    "previous" va hacia atrás en el tiempo, "next" hacia adelante             ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from typing import Dict, List, Optional
from pydantic import BaseModel

from services.sales_stats import top_performer

CURRENT_CYCLE = -1

TABS = ["list", "entry", "stats", "users"]
OWNER_ONLY_TABS = {"users"}
CURRENT_CYCLE_ONLY_TABS = {"entry"}


class ViewState(BaseModel):
    user: Optional[Dict] = None
    tab: str = "list"
    cycle_index: int = CURRENT_CYCLE
    cycles: List[Dict] = []
    show_top_performer: bool = False
    acknowledged: bool = False

    @property
    def is_current_cycle(self) -> bool:
        return self.cycle_index == CURRENT_CYCLE

    @property
    def cycle_id(self) -> Optional[str]:
        if self.is_current_cycle or self.cycle_index >= len(self.cycles):
            return None
        return self.cycles[self.cycle_index]["id"]

    @property
    def cycle_name(self) -> Optional[str]:
        if self.is_current_cycle or self.cycle_index >= len(self.cycles):
            return None
        return self.cycles[self.cycle_index].get("name")

    @property
    def display_name(self) -> str:
        if self.is_current_cycle:
            return "CICLO ACTUAL (En curso)"
        return f"HISTORIAL: {self.cycle_name or 'Ciclo sin nombre'}"

    @property
    def can_go_previous(self) -> bool:
        return self.cycle_index < len(self.cycles) - 1

    @property
    def can_go_next(self) -> bool:
        return not self.is_current_cycle


def _allowed_tab(state: ViewState, tab: str) -> bool:
    if tab not in TABS:
        return False
    if tab in OWNER_ONLY_TABS and (state.user or {}).get("role") != "owner":
        return False
    if tab in CURRENT_CYCLE_ONLY_TABS and not state.is_current_cycle:
        return False
    return True


def reduce_view(state: ViewState, action: Dict) -> ViewState:
    kind = action.get("type")

    if kind == "login":
        return ViewState(user=action["user"], cycles=state.cycles)

    if kind == "logout":
        return ViewState()

    if kind == "cycles_loaded":
        cycles = action.get("cycles") or []
        index = state.cycle_index
        if index >= len(cycles):
            index = CURRENT_CYCLE
        return state.model_copy(update={"cycles": cycles, "cycle_index": index})

    if kind == "select_tab":
        tab = action.get("tab")
        if not _allowed_tab(state, tab):
            return state
        return state.model_copy(update={"tab": tab})

    if kind == "select_cycle":
        index = action.get("index", CURRENT_CYCLE)
        if index < CURRENT_CYCLE or index >= len(state.cycles):
            index = CURRENT_CYCLE
        update = {"cycle_index": index}
        if index != CURRENT_CYCLE and state.tab in CURRENT_CYCLE_ONLY_TABS:
            update["tab"] = "list"
        return state.model_copy(update=update)

    if kind == "previous_cycle":
        if not state.can_go_previous:
            return state
        return reduce_view(state, {"type": "select_cycle", "index": state.cycle_index + 1})

    if kind == "next_cycle":
        if not state.can_go_next:
            return state
        return reduce_view(state, {"type": "select_cycle", "index": state.cycle_index - 1})

    if kind == "stats_loaded":
        # El banner solo se ofrece en la carga inicial, sobre el ciclo actual,
        # si quien mira es el líder y todavía no lo cerró en esta sesión.
        if not action.get("initial") or state.acknowledged or not state.is_current_cycle:
            return state
        leader = top_performer(action.get("stats") or [])
        show = bool(leader and state.user and leader["name"] == state.user.get("username"))
        return state.model_copy(update={"show_top_performer": show})

    if kind == "acknowledge_top_performer":
        return state.model_copy(update={"show_top_performer": False, "acknowledged": True})

    return state
