# backend/indovendor/services/file_storage_service.py
"""
Este servicio guarda en disco los ficheros subidos (imágenes de producto,
avatares y documentos de vendedor) tras comprobar su tamaño y su tipo MIME.

Los ficheros se guardan bajo settings.UPLOAD_DIR y se exponen en /uploads,
de modo que la URL pública es siempre `/uploads/<subcarpeta>/<fichero>`.
"""

import os
import logging
import secrets
import time
from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import UploadFile
from starlette import status

from indovendor.core.config import settings
from indovendor.core.exceptions import ApiError

logger = logging.getLogger(__name__)

MB = 1024 * 1024
URL_PREFIX = "/uploads/"

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}


@dataclass(frozen=True)
class UploadRule:
    """Límites de un tipo de subida y los mensajes que se devuelven al incumplirlos."""
    max_size: int
    allowed_types: FrozenSet[str]
    size_message: str
    type_message: str


PRODUCT_IMAGE_RULE = UploadRule(
    max_size=5 * MB,
    allowed_types=frozenset({"image/jpeg", "image/png", "image/webp"}),
    size_message="Image file size must not exceed 5MB",
    type_message="Only JPEG, PNG, and WebP images are allowed",
)

AVATAR_RULE = UploadRule(
    max_size=5 * MB,
    allowed_types=frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"}),
    size_message="File too large. Maximum size is 5MB",
    type_message="Invalid file type. Only JPEG, PNG, and WebP images are allowed",
)

DOCUMENT_RULE = UploadRule(
    max_size=10 * MB,
    allowed_types=frozenset({"application/pdf", "image/jpeg", "image/jpg", "image/png"}),
    size_message="File size too large. Maximum size is 10MB",
    type_message="Invalid file type. Only PDF, JPEG, and PNG are allowed for documents",
)

PORTFOLIO_RULE = UploadRule(
    max_size=5 * MB,
    allowed_types=frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"}),
    size_message="Image size too large. Maximum size is 5MB",
    type_message="Invalid file type. Only JPEG, PNG, and WebP are allowed for portfolio images",
)


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def random_suffix() -> str:
    return secrets.token_hex(4)


class FileStorageService:
    """Validación y persistencia de ficheros subidos en el disco local."""

    def _root(self) -> str:
        return settings.UPLOAD_DIR

    def validate(self, file: UploadFile, content: bytes, rule: UploadRule) -> None:
        """
        Comprueba tipo MIME y tamaño.

        Raises:
            ApiError 400 con el mensaje de la regla incumplida
        """
        if file.content_type not in rule.allowed_types:
            raise ApiError(status.HTTP_400_BAD_REQUEST, rule.type_message, code="INVALID_FILE_TYPE")
        if len(content) > rule.max_size:
            raise ApiError(status.HTTP_400_BAD_REQUEST, rule.size_message, code="FILE_TOO_LARGE")

    def extension_for(self, file: UploadFile) -> str:
        # La extensión sale del tipo MIME validado, nunca del nombre del cliente
        return _EXTENSIONS.get(file.content_type or "", "")

    async def save(self, file: UploadFile, subdir: str, stem: str, rule: UploadRule) -> str:
        """
        Valida y guarda el fichero como `<UPLOAD_DIR>/<subdir>/<stem><ext>`.

        Returns:
            URL pública del fichero guardado
        """
        content = await file.read()
        self.validate(file, content, rule)

        filename = f"{stem}{self.extension_for(file)}"
        directory = os.path.join(self._root(), subdir)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, filename), "wb") as f:
            f.write(content)

        url = f"{URL_PREFIX}{subdir}/{filename}"
        logger.info(f"📁 UPLOAD: Guardado {url} ({len(content)} bytes)")
        return url

    def path_for_url(self, url: str) -> Optional[str]:
        """Traduce una URL /uploads/... a su ruta en disco; None si no es local."""
        if not url or not url.startswith(URL_PREFIX):
            return None
        relative = url[len(URL_PREFIX):]
        # Evita salir del directorio de subidas
        if ".." in relative.split("/"):
            return None
        return os.path.join(self._root(), *relative.split("/"))

    def delete(self, url: Optional[str]) -> bool:
        """Borra el fichero asociado a la URL. Un fichero ausente no es un error."""
        path = self.path_for_url(url) if url else None
        if not path:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning(f"⚠️ UPLOAD: Fichero ya inexistente {path}")
            return False
        except OSError as e:
            logger.warning(f"⚠️ UPLOAD: No se pudo borrar {path}: {e}")
            return False
        logger.info(f"🗑️ UPLOAD: Borrado {url}")
        return True

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

file_storage_service = FileStorageService()
