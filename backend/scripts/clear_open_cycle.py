"""
Visitas CRM - Vacía el ciclo actual SIN archivarlo (limpieza legacy).
Normalmente se usa POST /api/cycles/archive; esto borra las visitas abiertas.
Run: python scripts/clear_open_cycle.py --yes
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from config import MONGO_URL, DB_NAME
from services.record_store import clear_open_records


async def main():
    if "--yes" not in sys.argv:
        print("Borra TODAS las visitas del ciclo actual. Confirmar con --yes")
        return

    client = AsyncIOMotorClient(MONGO_URL)
    try:
        deleted = await clear_open_records(client[DB_NAME])
        print(f"{deleted} visitas borradas del ciclo actual")
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
