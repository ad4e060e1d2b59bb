"""
Visitas CRM — Migration: normalize stored outcome tags in sales_records.
"Interesado/Dudoso" becomes "Pendiente" (unknown tags are left untouched);
contacted values outside Si/No become "No".
Run: cd backend && python3 scripts/migrate_legacy_status.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from config import MONGO_URL, DB_NAME
from models.record import ContactedFlag, normalize_sold

VALID_CONTACTED = {ContactedFlag.SI.value, ContactedFlag.NO.value}


async def migrate(db):
    total = await db.sales_records.count_documents({})
    print(f"Total records in DB: {total}")

    sold_fixed = 0
    contacted_fixed = 0
    already_ok = 0

    cursor = db.sales_records.find({}, {"_id": 0, "id": 1, "sold": 1, "contacted": 1})

    async for record in cursor:
        update = {}

        normalized = normalize_sold(record.get("sold"))
        if normalized and record.get("sold") != normalized.value:
            update["sold"] = normalized.value
            sold_fixed += 1

        if record.get("contacted") not in VALID_CONTACTED:
            update["contacted"] = ContactedFlag.NO.value
            contacted_fixed += 1

        if update:
            await db.sales_records.update_one({"id": record["id"]}, {"$set": update})
        else:
            already_ok += 1

    print("\n════════════════════════════════════")
    print("  MIGRATION REPORT")
    print("════════════════════════════════════")
    print(f"  Total records:     {total}")
    print(f"  Sold normalized:   {sold_fixed}")
    print(f"  Contacted fixed:   {contacted_fixed}")
    print(f"  Already OK:        {already_ok}")
    print("════════════════════════════════════")

    return {
        "total": total,
        "sold_fixed": sold_fixed,
        "contacted_fixed": contacted_fixed,
        "already_ok": already_ok,
    }


async def main():
    client = AsyncIOMotorClient(MONGO_URL)
    try:
        await migrate(client[DB_NAME])
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
