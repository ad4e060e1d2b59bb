"""
Visitas CRM - Seed users (dev/staging only)
Creates one owner and two sellers with predictable credentials.
Run: python scripts/seed_users.py
Reset: python scripts/seed_users.py --reset
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from config import MONGO_URL, DB_NAME, hash_password, now_iso

# Same password for all seeded accounts
TEST_PASSWORD = "Visitas2026!"

SEED_USERS = [
    {"username": "dueno", "role": "owner"},
    {"username": "ana",   "role": "employee"},
    {"username": "luis",  "role": "employee"},
]


async def reset(db):
    """Delete the seeded users and their sessions"""
    usernames = [u["username"] for u in SEED_USERS]
    result = await db.app_users.delete_many({"username": {"$in": usernames}})
    await db.sessions.delete_many({"username": {"$in": usernames}})
    print(f"Deleted {result.deleted_count} seeded users")


async def seed(db):
    """Create/update seeded users"""
    for u in SEED_USERS:
        doc = {
            "username": u["username"],
            "password": hash_password(TEST_PASSWORD),
            "role": u["role"],
        }
        existing = await db.app_users.find_one({"username": u["username"]})
        if existing:
            await db.app_users.update_one({"username": u["username"]}, {"$set": doc})
            print(f"  Updated: {u['username']} ({u['role']})")
        else:
            doc["created_at"] = now_iso()
            await db.app_users.insert_one(doc)
            print(f"  Created: {u['username']} ({u['role']})")


async def main():
    client = AsyncIOMotorClient(MONGO_URL)
    db = client[DB_NAME]

    if "--reset" in sys.argv:
        await reset(db)
        print("Reset complete. Run without --reset to re-seed.")
    else:
        await seed(db)
        print(f"\n{len(SEED_USERS)} users seeded. Password for all: {TEST_PASSWORD}")
        print("Reset: python scripts/seed_users.py --reset")

    client.close()


if __name__ == "__main__":
    asyncio.run(main())
