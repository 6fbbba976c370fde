# app/main.py
import os
from dotenv import load_dotenv

# Cargar variables de entorno desde .env ANTES de cualquier otra cosa
load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings
from .db.engine_sync import create_sync_db_and_tables

# Importaciones de API Routers
from .api import health as health_api
from .api.payments import main as payments_main_api

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Cobros", version="0.1.0")


# --- Database Initialization ---
@app.on_event("startup")
def on_startup():
    """Initialize database tables on application startup"""
    create_sync_db_and_tables()
    logger.info(f"✅ Tablas inicializadas (zona horaria de negocio: {settings.business_timezone})")


# ============================================================================
# --- SEGURIDAD: CONFIGURACIÓN CORS ESTRICTA ---
# ============================================================================
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "http://localhost:8000")
origins = allowed_origins_env.split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# --- SEGURIDAD: CABECERAS DE SEGURIDAD HTTP ---
# ============================================================================
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# ============================================================================
# --- GLOBAL EXCEPTION HANDLER ---
# ============================================================================
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"Error {exc.status_code} en {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# ============================================================================
# --- ROUTERS INCLUSION ---
# ============================================================================
app.include_router(health_api.router)
app.include_router(payments_main_api.router, prefix="/api", tags=["Payments"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.app_env == "development",
    )
