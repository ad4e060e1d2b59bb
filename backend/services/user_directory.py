"""
Visitas CRM - Directorio de usuarios (colección app_users)

username es único e inmutable: las visitas lo guardan en in_charge.
"""

import logging
from typing import Dict, List, Optional

from config import hash_password, now_iso
from models.auth import UserCreate, UserUpdate

logger = logging.getLogger("user_directory")

USERS = "app_users"


async def get_users(db) -> List[Dict]:
    """Usuarios ordenados por username, sin contraseñas."""
    try:
        return await db[USERS].find({}, {"_id": 0, "password": 0}).sort("username", 1).to_list(500)
    except Exception as e:
        logger.error(f"Error leyendo usuarios: {e}")
        return []


async def get_user(db, username: str) -> Optional[Dict]:
    return await db[USERS].find_one({"username": username}, {"_id": 0, "password": 0})


async def authenticate(db, username: str, password: str) -> Optional[Dict]:
    user = await db[USERS].find_one({"username": username.strip()}, {"_id": 0})
    if not user or user.get("password") != hash_password(password):
        return None
    user.pop("password", None)
    return user


async def add_user(db, data: UserCreate) -> bool:
    """False si el username ya existe o la escritura falla."""
    existing = await db[USERS].find_one({"username": data.username})
    if existing:
        return False

    try:
        await db[USERS].insert_one({
            "username": data.username,
            "password": hash_password(data.password),
            "role": data.role,
            "created_at": now_iso(),
        })
    except Exception as e:
        logger.error(f"Error creando usuario {data.username}: {e}")
        return False
    return True


async def update_user(db, username: str, data: UserUpdate) -> bool:
    update_data = {}
    if data.password is not None:
        update_data["password"] = hash_password(data.password)
    if data.role is not None:
        update_data["role"] = data.role
    update_data["updated_at"] = now_iso()

    result = await db[USERS].update_one({"username": username}, {"$set": update_data})
    return result.matched_count > 0


async def delete_user(db, username: str) -> bool:
    result = await db[USERS].delete_one({"username": username})
    await db.sessions.delete_many({"username": username})
    return result.deleted_count > 0
