# backend/indovendor/services/auth_service.py
"""
Servicio de autenticación: registro, login, refresco de tokens, cambio de
contraseña y cálculo de la completitud del perfil.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.config import settings
from indovendor.core.exceptions import ApiError
from indovendor.core.passwords import (
    hash_password,
    needs_rehash,
    validate_password_strength,
    get_password_strength_text,
    verify_password,
)
from indovendor.core.security import TokenError, generate_token_pair, refresh_access_token, verify_refresh_token
from indovendor.crud import user_crud
from indovendor.db.models.user_model import User
from indovendor.schemas import auth_schema
from indovendor.services.profile_service import completeness, vendor_fields

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^(\+62|62|0)8[1-9][0-9]{6,11}$")


def profile_completeness(user: User) -> Dict[str, Any]:
    """
    Porcentaje de campos de cuenta rellenos y lista de los que faltan.

    Los vendedores deben además completar nombre y descripción del negocio.
    """
    profile = user.profile
    fields = {
        "email": user.email,
        "profile.first_name": profile.first_name if profile else None,
        "profile.last_name": profile.last_name if profile else None,
        "phone": user.phone,
        "profile.full_address": profile.full_address if profile else None,
        "profile.birth_date": profile.birth_date if profile else None,
    }
    fields.update(vendor_fields(user))
    return completeness(fields)


class AuthService:
    """
    Casos de uso de autenticación.

    Los errores se lanzan como ApiError con su código de estado y su código
    de máquina; los endpoints solo envuelven el resultado.
    """

    # ========================================
    # REGISTRO Y LOGIN
    # ========================================

    async def register(self, db: AsyncSession, data: auth_schema.RegisterRequest) -> Dict[str, Any]:
        email = data.email.strip().lower()
        errors: List[str] = []
        if not EMAIL_RE.match(email):
            errors.append("Invalid email format")
        if data.phone and not PHONE_RE.match(data.phone):
            errors.append("Invalid Indonesian phone number format")
        strength = validate_password_strength(data.password)
        errors.extend(strength["errors"])
        if errors:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"Validation failed: {', '.join(errors)}",
                code="VALIDATION_ERROR",
                errors=errors,
            )

        existing = await user_crud.get_user_by_email_or_phone(db, email, data.phone)
        if existing:
            raise ApiError(
                status.HTTP_409_CONFLICT,
                "User already exists with this email or phone number",
                code="USER_EXISTS",
            )

        user = await user_crud.create_user(
            db,
            email=email,
            password_hash=hash_password(data.password),
            role=data.role,
            phone=data.phone,
            first_name=data.first_name,
            last_name=data.last_name,
            business_name=data.first_name,
        )
        logger.info(f"🆕 AUTH: Usuario registrado {user.id} con rol {user.role.value}")
        return {"user": user, "tokens": generate_token_pair(user)}

    async def login(self, db: AsyncSession, data: auth_schema.LoginRequest) -> Dict[str, Any]:
        user = await user_crud.get_user_by_email(db, data.email.strip().lower())
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning("⚠️ AUTH: Intento de login fallido")
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid email or password", code="LOGIN_FAILED")

        if needs_rehash(user.password_hash):
            await user_crud.update_password(db, user, hash_password(data.password))
            logger.info(f"🔐 AUTH: Hash de contraseña actualizado para {user.id}")

        logger.info(f"✅ AUTH: Login correcto de {user.id}")
        return {"user": user, "tokens": generate_token_pair(user)}

    # ========================================
    # TOKENS
    # ========================================

    def _check_refresh_token_shape(self, refresh_token: Optional[str]) -> str:
        if not refresh_token:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Refresh token is required", code="REFRESH_TOKEN_REQUIRED")
        if len(refresh_token.split(".")) != 3:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Malformed refresh token", code="MALFORMED_TOKEN")
        return refresh_token

    async def refresh_tokens(self, db: AsyncSession, refresh_token: Optional[str]) -> Dict[str, Any]:
        """Emite un nuevo par de tokens a partir de un refresh token válido."""
        token = self._check_refresh_token_shape(refresh_token)
        try:
            payload = verify_refresh_token(token)
        except TokenError as e:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, e.message, code="INVALID_REFRESH_TOKEN")

        user = await user_crud.get_user(db, payload.get("user_id"))
        if not user:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "User not found", code="USER_NOT_FOUND")

        return {
            "tokens": generate_token_pair(user),
            "token_info": {
                "refreshed_at": datetime.now(timezone.utc),
                "expires_in": settings.JWT_EXPIRES_IN,
                "token_type": "Bearer",
            },
        }

    def refresh_access_only(self, refresh_token: Optional[str]) -> Dict[str, str]:
        token = self._check_refresh_token_shape(refresh_token)
        try:
            return {"access_token": refresh_access_token(token)}
        except TokenError as e:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, e.message, code="INVALID_REFRESH_TOKEN")

    # ========================================
    # CONTRASEÑAS
    # ========================================

    async def change_password(self, db: AsyncSession, user: User, data: auth_schema.ChangePasswordRequest) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Current password is incorrect", code="INVALID_PASSWORD")

        strength = validate_password_strength(data.new_password)
        if not strength["is_valid"]:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"Validation failed: {', '.join(strength['errors'])}",
                code="WEAK_PASSWORD",
                errors=strength["errors"],
            )

        if verify_password(data.new_password, user.password_hash):
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                "New password must be different from current password",
                code="SAME_PASSWORD",
            )

        await user_crud.update_password(db, user, hash_password(data.new_password))
        logger.info(f"🔐 AUTH: Contraseña cambiada para {user.id}")

    def check_password_strength(self, password: str) -> Dict[str, Any]:
        result = validate_password_strength(password)
        return {**result, "strength": get_password_strength_text(result["score"])}

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

auth_service = AuthService()
