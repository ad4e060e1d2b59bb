"""
Visitas CRM — fixtures compartidas.
In-memory motor database (mongomock-motor) + FastAPI TestClient.
Run: cd backend && pytest tests -v
"""

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from config import get_db, hash_password
from server import app

PASSWORD = "Visitas2026!"

SEED_USERS = [
    {"username": "dueno", "role": "owner"},
    {"username": "ana", "role": "employee"},
    {"username": "luis", "role": "employee"},
]


def _db_op(coro):
    """Run async DB operation in a fresh event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def make_row(record_id, company, in_charge, sold="Pendiente", contact="",
             cycle_id=None, contacted="No", address="", industry="COMIDA"):
    """Documento sales_records tal como lo guarda el store."""
    return {
        "id": record_id,
        "date": "17/10/2026",
        "in_charge": in_charge,
        "address": address,
        "company": company,
        "industry": industry,
        "sold": sold,
        "contact_info": contact,
        "contacted": contacted,
        "cycle_id": cycle_id,
    }


def seed_rows(db, rows):
    async def run():
        for row in rows:
            await db.sales_records.insert_one(dict(row))
        if rows:
            await db.counters.update_one(
                {"_id": "sales_records"},
                {"$set": {"seq": max(r["id"] for r in rows)}},
                upsert=True,
            )
    _db_op(run())


# Escenario de referencia: ana 2 visitas, luis 1
SCENARIO_ROWS = [
    make_row(1, "Kiosco A", "ana", sold="Si", contact="111"),
    make_row(2, "Kiosco B", "ana", sold="No", contact="222"),
    make_row(3, "Kiosco C", "luis", sold="Pendiente", contact="333"),
]


@pytest.fixture
def db():
    return AsyncMongoMockClient()[f"test_visitas_{uuid.uuid4().hex[:8]}"]


@pytest.fixture
def users(db):
    async def run():
        for u in SEED_USERS:
            await db.app_users.insert_one({
                "username": u["username"],
                "password": hash_password(PASSWORD),
                "role": u["role"],
            })
    _db_op(run())
    return SEED_USERS


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def login(c, username, password=PASSWORD):
    r = c.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def owner_h(client, users):
    return login(client, "dueno")


@pytest.fixture
def ana_h(client, users):
    return login(client, "ana")


@pytest.fixture
def luis_h(client, users):
    return login(client, "luis")
