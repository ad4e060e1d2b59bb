"""
Visitas CRM — Cycle archival tests
Tests: open → closed transition, fresh open generation, failure semantics.
Run: cd backend && pytest tests/test_cycles.py -v
"""

from datetime import datetime

import pytest

from models.record import SalesRecordCreate
from services.cycles import ArchiveError, archive_current_cycle, default_cycle_name, list_cycles
from services.record_store import add_record, get_records
from tests.conftest import SCENARIO_ROWS, _db_op, make_row, seed_rows


class _BrokenCollection:
    async def insert_one(self, *args, **kwargs):
        raise RuntimeError("store unavailable")

    async def update_many(self, *args, **kwargs):
        raise RuntimeError("store unavailable")


class _PartialDB:
    """Delegates to the real db except for the broken collections."""

    def __init__(self, db, broken):
        self._db = db
        self._broken = set(broken)

    def __getitem__(self, name):
        if name in self._broken:
            return _BrokenCollection()
        return self._db[name]


# ═══════════════════════════════════════════════════════════════
# 1. ARCHIVE
# ═══════════════════════════════════════════════════════════════

class TestArchive:

    def test_reference_scenario(self, db):
        seed_rows(db, SCENARIO_ROWS)
        before = {r["id"] for r in _db_op(get_records(db))}

        result = _db_op(archive_current_cycle(db, "Enero"))

        assert result["archived"] == 3
        assert result["cycle"]["name"] == "Enero"
        assert _db_op(get_records(db)) == []
        archived = _db_op(get_records(db, cycle_id=result["cycle"]["id"]))
        assert {r["id"] for r in archived} == before
        assert all(r["cycleId"] == result["cycle"]["id"] for r in archived)

    def test_already_archived_untouched(self, db):
        seed_rows(db, [
            make_row(1, "Viejo", "ana", cycle_id="old-cycle"),
            make_row(2, "Nuevo", "ana"),
        ])
        result = _db_op(archive_current_cycle(db, "Febrero"))

        assert result["archived"] == 1
        old = _db_op(get_records(db, cycle_id="old-cycle"))
        assert [r["company"] for r in old] == ["Viejo"]

    def test_empty_open_cycle(self, db):
        result = _db_op(archive_current_cycle(db, "Vacío"))
        assert result["archived"] == 0
        assert len(_db_op(list_cycles(db))) == 1

    def test_new_records_start_fresh_generation(self, db):
        seed_rows(db, SCENARIO_ROWS)
        _db_op(archive_current_cycle(db, "Enero"))

        _db_op(add_record(db, "ana", SalesRecordCreate(company="Kiosco A", address="Mitre 100", industry="COMIDA", contactInfo="111")))
        open_records = _db_op(get_records(db))

        assert len(open_records) == 1
        assert open_records[0]["cycleId"] is None
        assert open_records[0]["id"] == 4

    def test_cycles_newest_first(self, db):
        async def run():
            await db.sales_cycles.insert_one({"id": "a", "name": "Enero", "created_at": "2026-01-31T10:00:00+00:00"})
            await db.sales_cycles.insert_one({"id": "b", "name": "Febrero", "created_at": "2026-02-28T10:00:00+00:00"})
        _db_op(run())
        assert [c["name"] for c in _db_op(list_cycles(db))] == ["Febrero", "Enero"]


# ═══════════════════════════════════════════════════════════════
# 2. FAILURE SEMANTICS
# ═══════════════════════════════════════════════════════════════

class TestArchiveFailures:

    def test_cycle_write_fails_no_record_touched(self, db):
        seed_rows(db, SCENARIO_ROWS)
        broken = _PartialDB(db, ["sales_cycles"])

        with pytest.raises(ArchiveError) as exc:
            _db_op(archive_current_cycle(broken, "Enero"))

        assert exc.value.cycle is None
        assert len(_db_op(get_records(db))) == 3

    def test_bulk_move_fails_leaves_orphan_cycle(self, db):
        seed_rows(db, SCENARIO_ROWS)
        broken = _PartialDB(db, ["sales_records"])

        with pytest.raises(ArchiveError) as exc:
            _db_op(archive_current_cycle(broken, "Enero"))

        assert exc.value.cycle["name"] == "Enero"
        cycles = _db_op(list_cycles(db))
        assert [c["id"] for c in cycles] == [exc.value.cycle["id"]]
        assert len(_db_op(get_records(db))) == 3


class TestDefaultName:

    def test_month_and_year(self):
        assert default_cycle_name(datetime(2026, 1, 5)) == "Ciclo enero de 2026"
        assert default_cycle_name(datetime(2026, 10, 17)) == "Ciclo octubre de 2026"
