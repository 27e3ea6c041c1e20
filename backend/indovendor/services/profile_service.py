# backend/indovendor/services/profile_service.py
"""
Servicio del perfil personal: completitud, actualización validada y avatar.
"""

import logging
import math
from datetime import date
from typing import Any, Dict, List

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.exceptions import ApiError, validation_error
from indovendor.core.permissions import UserRole
from indovendor.crud import user_crud
from indovendor.db.models.user_model import User
from indovendor.schemas.user_schema import ProfileUpdate
from indovendor.services.file_storage_service import (
    AVATAR_RULE,
    FileStorageService,
    file_storage_service,
    timestamp_ms,
)

logger = logging.getLogger(__name__)

GENDERS = ("MALE", "FEMALE", "OTHER")
MIN_AGE = 13
MAX_AGE = 120
MAX_NAME_LENGTH = 50
AVATARS_DIR = "avatars"


def _is_filled(value: Any) -> bool:
    # Un texto con solo espacios cuenta como vacío
    return value is not None and bool(str(value).strip())


def vendor_fields(user: User) -> Dict[str, Any]:
    """Campos de negocio que un VENDOR debe completar; vacío para otros roles."""
    if user.role != UserRole.VENDOR:
        return {}
    vendor = user.vendor
    return {
        "vendor.business_name": vendor.business_name if vendor else None,
        "vendor.description": vendor.description if vendor else None,
    }


def completeness(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Porcentaje (redondeo hacia arriba en .5) de campos rellenos y lista de
    los que faltan, en el orden de `fields`.
    """
    missing = [name for name, value in fields.items() if not _is_filled(value)]
    percentage = int(math.floor((len(fields) - len(missing)) / len(fields) * 100 + 0.5))
    return {"percentage": percentage, "missing_fields": missing}


def calculate_profile_completeness(user: User) -> Dict[str, Any]:
    """
    Porcentaje de campos del perfil rellenos.

    Obligatorios: email, nombre y apellido. Opcionales: teléfono, dirección,
    fecha de nacimiento, género y foto de perfil. Los vendedores suman
    nombre y descripción del negocio. Todos pesan igual.
    """
    profile = user.profile
    fields = {
        "email": user.email,
        "first_name": profile.first_name if profile else None,
        "last_name": profile.last_name if profile else None,
        "phone": user.phone,
        "full_address": profile.full_address if profile else None,
        "birth_date": profile.birth_date if profile else None,
        "gender": profile.gender if profile else None,
        "profile_picture": user.profile_picture,
    }
    fields.update(vendor_fields(user))
    return completeness(fields)


class ProfileService:

    def __init__(self, storage: FileStorageService):
        self.storage = storage

    def _validate(self, data: Dict[str, Any]) -> None:
        errors: List[str] = []

        for field, label in (("first_name", "First name"), ("last_name", "Last name")):
            if field in data and data[field] is not None:
                if not 1 <= len(data[field].strip()) <= MAX_NAME_LENGTH:
                    errors.append(f"{label} must be between 1 and {MAX_NAME_LENGTH} characters")

        if data.get("gender") is not None and data["gender"] not in GENDERS:
            errors.append("Invalid gender value")

        birth_date = data.get("birth_date")
        if birth_date is not None:
            age = date.today().year - birth_date.year
            if not MIN_AGE <= age <= MAX_AGE:
                errors.append("Invalid birth date")

        if errors:
            raise validation_error(errors)

    async def get_profile(self, db: AsyncSession, user: User) -> Dict[str, Any]:
        return {"user": user, "profile_completeness": calculate_profile_completeness(user)}

    async def update_profile(self, db: AsyncSession, user: User, profile_in: ProfileUpdate) -> User:
        """
        Actualiza (o crea) el perfil con los campos enviados.

        Raises:
            ApiError 400 NO_UPDATE_DATA si el cuerpo no trae ningún campo
        """
        data = profile_in.model_dump(exclude_unset=True)
        if not data:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "No update data provided", code="NO_UPDATE_DATA")

        self._validate(data)
        for field in ("first_name", "last_name"):
            if data.get(field):
                data[field] = data[field].strip()

        await user_crud.upsert_profile(db, user.id, data)
        logger.info(f"👤 PERFIL: Actualizado el perfil de {user.id} ({', '.join(data)})")
        return await user_crud.get_user(db, user.id)

    async def upload_avatar(self, db: AsyncSession, user: User, file: UploadFile) -> str:
        """Guarda el nuevo avatar y borra el anterior si era un fichero local."""
        previous = user.profile_picture
        url = await self.storage.save(file, AVATARS_DIR, f"{user.id}_{timestamp_ms()}", AVATAR_RULE)
        await user_crud.update_profile_picture(db, user, url)
        if previous and previous != url:
            self.storage.delete(previous)
        return url

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

profile_service = ProfileService(file_storage_service)
