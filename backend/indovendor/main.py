# backend/indovendor/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación completa:
- Logging a partir de la configuración
- Manejadores de errores con el sobre `{success, message, ...}`
- CORS y ficheros estáticos en /uploads
- Registro de los routers de la API bajo settings.API_STR
- Endpoints raíz y de salud
"""

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from indovendor.core.config import settings
from indovendor.core.exceptions import register_exception_handlers
from indovendor.api.v1.api_router import api_router
from indovendor.db.database import init_db

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API del marketplace de proveedores de eventos y bodas IndoVendor"
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# El directorio debe existir antes de montar StaticFiles
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router, prefix=settings.API_STR)

# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """Mensaje de bienvenida con el nombre y la versión del proyecto."""
    return {"message": f"Welcome to {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}


def _health() -> dict:
    return {
        "success": True,
        "message": "IndoVendor API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health", tags=["Root"])
async def health():
    return _health()


@app.get(f"{settings.API_STR}/health", tags=["Root"])
async def api_health():
    return _health()

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """Crea las tablas que falten al arrancar."""
    await init_db()
    logger.info(f"🚀 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} iniciada ({settings.APP_ENVIRONMENT})")
