# backend/indovendor/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path
import os

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_STR: str = "/api"
    PROJECT_NAME: str = "IndoVendor API"
    PROJECT_VERSION: str = "1.0.0"
    APP_ENVIRONMENT: str = "development"

    # Configuración de la base de datos
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "postgres")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "indovendor_db")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")

    # Permite sustituir la URL completa (p. ej. sqlite+aiosqlite en tests)
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        """URL de conexión a la base de datos asíncrona."""
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # JWT - El secreto es REQUERIDO del .env (sensible)
    JWT_SECRET: str
    JWT_REFRESH_SECRET: Optional[str] = None
    JWT_EXPIRES_IN: str = "15m"
    JWT_REFRESH_EXPIRES_IN: str = "7d"
    JWT_ISSUER: str = "indovendor-api"
    JWT_AUDIENCE: str = "indovendor-client"
    JWT_ALGORITHM: str = "HS256"

    @property
    def REFRESH_SECRET(self) -> str:
        """Secreto de los refresh tokens; si no se define se deriva del principal."""
        return self.JWT_REFRESH_SECRET or f"{self.JWT_SECRET}_refresh"

    # Contraseñas
    BCRYPT_SALT_ROUNDS: int = 12

    # Autenticación
    REQUIRE_EMAIL_VERIFICATION: bool = False

    # Ficheros subidos - Se sirven estáticamente en /uploads
    UPLOAD_DIR: str = "uploads"

    # API pública de regiones de Indonesia
    REGION_API_BASE_URL: str = "https://emsifa.github.io/api-wilayah-indonesia/api"
    REGION_API_TIMEOUT: float = 10.0

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Server - Del .env con defaults
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia global de la configuración
settings = Settings()
