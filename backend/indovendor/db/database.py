# backend/indovendor/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión con PostgreSQL usando SQLAlchemy y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)
- Tipos de columna compartidos (JSONType, ids UUID, timestamps UTC)

La dependencia get_db() vive en indovendor/api/deps.py.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from indovendor.core.config import settings # Importamos nuestra configuración

# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# expire_on_commit=False mantiene los objetos utilizables tras el commit
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()

# JSONB en PostgreSQL, JSON genérico en el resto de motores (SQLite en tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def init_db() -> None:
    """Crea las tablas que falten. Se invoca al arrancar la aplicación."""
    # Registrar todos los modelos en Base.metadata
    from indovendor.db.models import user_model, vendor_model, category_model, product_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
