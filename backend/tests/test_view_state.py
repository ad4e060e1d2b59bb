"""
Visitas CRM — View state reducer tests
Tests: cycle navigation, tab gating, top performer banner.
Run: cd backend && pytest tests/test_view_state.py -v
"""

from services.view_state import CURRENT_CYCLE, ViewState, reduce_view

OWNER = {"username": "dueno", "role": "owner"}
ANA = {"username": "ana", "role": "employee"}

CYCLES = [
    {"id": "c-feb", "name": "Febrero", "created_at": "2026-02-28T10:00:00+00:00"},
    {"id": "c-ene", "name": "Enero", "created_at": "2026-01-31T10:00:00+00:00"},
]


def _logged(user=ANA, cycles=CYCLES):
    state = reduce_view(ViewState(), {"type": "login", "user": user})
    return reduce_view(state, {"type": "cycles_loaded", "cycles": cycles})


class TestCycleNavigation:

    def test_starts_on_current_cycle(self):
        state = _logged()
        assert state.cycle_index == CURRENT_CYCLE
        assert state.cycle_id is None
        assert state.display_name == "CICLO ACTUAL (En curso)"
        assert state.can_go_previous is True
        assert state.can_go_next is False

    def test_no_history(self):
        state = _logged(cycles=[])
        assert state.can_go_previous is False
        assert reduce_view(state, {"type": "previous_cycle"}) == state

    def test_walk_back_and_forth(self):
        state = _logged()

        state = reduce_view(state, {"type": "previous_cycle"})
        assert state.cycle_id == "c-feb"
        assert state.display_name == "HISTORIAL: Febrero"

        state = reduce_view(state, {"type": "previous_cycle"})
        assert state.cycle_id == "c-ene"
        assert state.can_go_previous is False
        assert reduce_view(state, {"type": "previous_cycle"}).cycle_id == "c-ene"

        state = reduce_view(state, {"type": "next_cycle"})
        state = reduce_view(state, {"type": "next_cycle"})
        assert state.cycle_index == CURRENT_CYCLE
        assert reduce_view(state, {"type": "next_cycle"}) == state

    def test_out_of_range_index_falls_back_to_current(self):
        state = reduce_view(_logged(), {"type": "select_cycle", "index": 7})
        assert state.cycle_index == CURRENT_CYCLE

    def test_shrinking_cycle_list_resets_index(self):
        state = reduce_view(_logged(), {"type": "select_cycle", "index": 1})
        state = reduce_view(state, {"type": "cycles_loaded", "cycles": CYCLES[:1]})
        assert state.cycle_index == CURRENT_CYCLE


class TestTabs:

    def test_users_tab_owner_only(self):
        assert reduce_view(_logged(ANA), {"type": "select_tab", "tab": "users"}).tab == "list"
        assert reduce_view(_logged(OWNER), {"type": "select_tab", "tab": "users"}).tab == "users"

    def test_entry_only_on_current_cycle(self):
        state = reduce_view(_logged(), {"type": "select_tab", "tab": "entry"})
        assert state.tab == "entry"

        state = reduce_view(state, {"type": "previous_cycle"})
        assert state.tab == "list"
        assert reduce_view(state, {"type": "select_tab", "tab": "entry"}).tab == "list"

    def test_unknown_tab_ignored(self):
        assert reduce_view(_logged(), {"type": "select_tab", "tab": "nope"}).tab == "list"

    def test_logout_resets(self):
        state = reduce_view(_logged(OWNER), {"type": "select_tab", "tab": "stats"})
        state = reduce_view(state, {"type": "logout"})
        assert state.user is None
        assert state.tab == "list"
        assert state.cycles == []


class TestTopPerformerBanner:

    STATS = [
        {"name": "luis", "salesCount": 1},
        {"name": "ana", "salesCount": 4},
    ]

    def test_shown_to_leader_on_initial_load(self):
        state = reduce_view(_logged(ANA), {"type": "stats_loaded", "stats": self.STATS, "initial": True})
        assert state.show_top_performer is True

    def test_not_shown_to_others(self):
        luis = {"username": "luis", "role": "employee"}
        state = reduce_view(_logged(luis), {"type": "stats_loaded", "stats": self.STATS, "initial": True})
        assert state.show_top_performer is False

    def test_not_on_refresh(self):
        state = reduce_view(_logged(ANA), {"type": "stats_loaded", "stats": self.STATS, "initial": False})
        assert state.show_top_performer is False

    def test_not_after_acknowledge(self):
        state = reduce_view(_logged(ANA), {"type": "acknowledge_top_performer"})
        state = reduce_view(state, {"type": "stats_loaded", "stats": self.STATS, "initial": True})
        assert state.show_top_performer is False

    def test_not_on_history(self):
        state = reduce_view(_logged(ANA), {"type": "previous_cycle"})
        state = reduce_view(state, {"type": "stats_loaded", "stats": self.STATS, "initial": True})
        assert state.show_top_performer is False

    def test_nobody_with_visits(self):
        stats = [{"name": "ana", "salesCount": 0}]
        state = reduce_view(_logged(ANA), {"type": "stats_loaded", "stats": stats, "initial": True})
        assert state.show_top_performer is False
