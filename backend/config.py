"""
Configuración y utilidades compartidas
"""

import os
import hashlib
import secrets
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv
from pathlib import Path

# Cargar .env
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'visitas_crm')

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# Prefijo celular Argentina para los links de WhatsApp
WHATSAPP_PREFIX = os.environ.get('WHATSAPP_PREFIX', '549')

SESSION_DAYS = int(os.environ.get('SESSION_DAYS', '7'))


def get_db():
    """Dependencia FastAPI: la base motor compartida (los tests la reemplazan)."""
    return db


# ==================== HELPERS ====================

def hash_password(password: str) -> str:
    """SHA256 de la contraseña"""
    return hashlib.sha256(password.encode()).hexdigest()

def generate_token() -> str:
    """Token de sesión aleatorio"""
    return secrets.token_urlsafe(32)

def now_iso() -> str:
    """Fecha/hora actual UTC en ISO"""
    return datetime.now(timezone.utc).isoformat()

def today_es_ar(now: datetime = None) -> str:
    """Fecha del día como la muestra el navegador en es-AR (d/m/aaaa)."""
    now = now or datetime.now()
    return f"{now.day}/{now.month}/{now.year}"
