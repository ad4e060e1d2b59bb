"""
Visitas CRM - API Backend
Registro de visitas de campo, comisiones por vendedor y archivo de ciclos.

Arranca con:
    uvicorn server:app --host 0.0.0.0 --port 8001 --reload
"""

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
import logging

from config import CORS_ORIGINS, LOG_LEVEL, client, db

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("visitas")

# App
app = FastAPI(
    title="Visitas CRM",
    description="Registro de visitas de campo y comisiones",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== ROUTES ====================

from routes import auth, records, cycles, stats, export, realtime

# Todas bajo /api
app.include_router(auth.router, prefix="/api")
app.include_router(records.router, prefix="/api")
app.include_router(cycles.router, prefix="/api")
app.include_router(stats.router, prefix="/api")
app.include_router(export.router, prefix="/api")
app.include_router(realtime.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "running", "version": "1.0.0"}


# ==================== STARTUP / SHUTDOWN ====================

@app.on_event("startup")
async def startup():
    logger.info("Visitas CRM iniciado")

    try:
        await db.app_users.create_index("username", unique=True)
        await db.sessions.create_index("token")
        await db.sessions.create_index("expires_at")
        await db.sales_records.create_index("id", unique=True)
        await db.sales_records.create_index("cycle_id")
        await db.sales_records.create_index("in_charge")
        await db.sales_cycles.create_index("created_at")
        await db.event_log.create_index("created_at")
        logger.info("Índices MongoDB creados")
    except Exception as e:
        logger.error(f"No se pudieron crear los índices: {e}")


@app.on_event("shutdown")
async def shutdown_db_client():
    client.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
