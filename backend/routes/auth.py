"""
Visitas CRM - Routes Auth
Login / Logout / Session / User CRUD (solo dueño).
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from datetime import datetime, timezone, timedelta

from models.auth import UserLogin, UserCreate, UserUpdate
from config import get_db, generate_token, now_iso, SESSION_DAYS
from services.change_feed import feed
from services.event_logger import get_events, log_event
from services import user_directory

router = APIRouter(prefix="/auth", tags=["Auth"])
security = HTTPBearer(auto_error=False)


# ==================== HELPERS ====================

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db=Depends(get_db),
):
    """Usuario logueado a partir del token de sesión."""
    if not credentials:
        raise HTTPException(status_code=401, detail="No autenticado")

    session = await db.sessions.find_one({
        "token": credentials.credentials,
        "expires_at": {"$gt": now_iso()}
    })

    if not session:
        raise HTTPException(status_code=401, detail="Sesión expirada")

    user = await user_directory.get_user(db, session["username"])

    if not user:
        raise HTTPException(status_code=401, detail="Usuario no encontrado")

    return user


async def require_owner(user: dict = Depends(get_current_user)):
    """Solo el dueño."""
    if user.get("role") != "owner":
        raise HTTPException(status_code=403, detail="Acceso solo para el dueño")
    return user


# ==================== LOGIN / LOGOUT ====================

@router.post("/login")
async def login(data: UserLogin, db=Depends(get_db)):
    """Login con usuario y contraseña."""
    user = await user_directory.authenticate(db, data.username, data.password)

    if not user:
        raise HTTPException(status_code=401, detail="Usuario o contraseña incorrectos")

    token = generate_token()
    expires_at = (datetime.now(timezone.utc) + timedelta(days=SESSION_DAYS)).isoformat()

    await db.sessions.insert_one({
        "token": token,
        "username": user["username"],
        "created_at": now_iso(),
        "expires_at": expires_at
    })

    await log_event(db, "login", "user", user["username"], user=user["username"])

    return {
        "token": token,
        "user": {
            "username": user["username"],
            "role": user.get("role", "employee"),
        }
    }


@router.post("/logout")
async def logout(
    user: dict = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db=Depends(get_db),
):
    if credentials:
        await db.sessions.delete_one({"token": credentials.credentials})
    return {"success": True}


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    return user


# ==================== USER CRUD (owner) ====================

@router.get("/users")
async def list_users(user: dict = Depends(require_owner), db=Depends(get_db)):
    users = await user_directory.get_users(db)
    return {"users": users}


@router.post("/users")
async def create_user(data: UserCreate, user: dict = Depends(require_owner), db=Depends(get_db)):
    created = await user_directory.add_user(db, data)
    if not created:
        raise HTTPException(status_code=400, detail="El nombre de usuario ya existe o hubo un error")

    await log_event(
        db, "create_user", "user", data.username,
        user=user["username"], details={"role": data.role}
    )
    feed.publish("app_users", "insert")

    return {"success": True, "user": {"username": data.username, "role": data.role}}


@router.put("/users/{username}")
async def update_user(username: str, data: UserUpdate, user: dict = Depends(require_owner), db=Depends(get_db)):
    """Cambia contraseña y/o rol. El username no se toca."""
    updated = await user_directory.update_user(db, username, data)
    if not updated:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")

    await log_event(
        db, "update_user", "user", username,
        user=user["username"],
        details={"role": data.role, "password_changed": data.password is not None}
    )
    feed.publish("app_users", "update")

    return {"success": True, "user": await user_directory.get_user(db, username)}


@router.delete("/users/{username}")
async def delete_user(username: str, user: dict = Depends(require_owner), db=Depends(get_db)):
    if username == user["username"]:
        raise HTTPException(status_code=400, detail="No podés eliminar tu propio usuario")

    deleted = await user_directory.delete_user(db, username)
    if not deleted:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")

    await log_event(db, "delete_user", "user", username, user=user["username"])
    feed.publish("app_users", "delete")

    return {"success": True}


# ==================== EVENT LOG ====================

@router.get("/event-log")
async def get_event_log(
    entity_type: str = None,
    action: str = None,
    limit: int = 100,
    user: dict = Depends(require_owner),
    db=Depends(get_db),
):
    return {"events": await get_events(db, entity_type, action, min(limit, 1000))}
