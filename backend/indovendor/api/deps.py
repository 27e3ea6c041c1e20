# backend/indovendor/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API:
- Sesión de base de datos
- Configuración
- Autenticación por Bearer JWT (obligatoria y opcional)
- Autorización por rol y por permiso (RBAC)
- Resolución del vendedor asociado al usuario autenticado
"""

import logging
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.config import settings
from indovendor.core.exceptions import ApiError
from indovendor.core.permissions import Permission, UserRole, has_permission, has_any_permission
from indovendor.core.security import TokenError, extract_token_from_header, verify_access_token
from indovendor.crud import user_crud, vendor_crud
from indovendor.db.database import AsyncSessionLocal
from indovendor.db.models.user_model import User
from indovendor.db.models.vendor_model import Vendor

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session

def get_settings():
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings

# ========================================
# AUTENTICACIÓN
# ========================================

async def _authenticate(token: str, db: AsyncSession) -> User:
    try:
        payload = verify_access_token(token)
    except TokenError as e:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, e.message, code=e.code)

    user = await user_crud.get_user(db, payload.get("user_id"))
    if not user:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "User not found. Token may be invalid.",
            code="USER_NOT_FOUND",
        )

    if settings.REQUIRE_EMAIL_VERIFICATION and not user.is_verified:
        raise ApiError(status.HTTP_403_FORBIDDEN, "Email verification required.", code="EMAIL_NOT_VERIFIED")

    return user


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Usuario autenticado a partir de la cabecera `Authorization: Bearer <token>`."""
    token = extract_token_from_header(request.headers.get("Authorization"))
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Access denied. No token provided.", code="NO_TOKEN")
    return await _authenticate(token, db)


async def get_optional_user(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[User]:
    """Como get_current_user, pero devuelve None en lugar de fallar."""
    token = extract_token_from_header(request.headers.get("Authorization"))
    if not token:
        return None
    try:
        return await _authenticate(token, db)
    except ApiError:
        return None

# ========================================
# AUTORIZACIÓN POR ROL
# ========================================

def require_roles(*roles: UserRole) -> Callable:
    """Fábrica de dependencias que exige uno de los roles indicados."""
    allowed = [UserRole(r) for r in roles]

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if allowed and current_user.role not in allowed:
            raise ApiError(
                status.HTTP_403_FORBIDDEN,
                f"Access forbidden. Required roles: {', '.join(r.value for r in allowed)}",
                code="INSUFFICIENT_PERMISSIONS",
            )
        return current_user

    return dependency


require_superadmin = require_roles(UserRole.SUPERADMIN)
require_vendor = require_roles(UserRole.VENDOR)
require_client = require_roles(UserRole.CLIENT)
require_vendor_or_admin = require_roles(UserRole.VENDOR, UserRole.SUPERADMIN)
require_client_or_admin = require_roles(UserRole.CLIENT, UserRole.SUPERADMIN)
require_any_user = require_roles()

# ========================================
# AUTORIZACIÓN POR PERMISO
# ========================================

def _permission_denied(user: User, reason: str, required: str) -> ApiError:
    return ApiError(
        status.HTTP_403_FORBIDDEN,
        reason,
        code="INSUFFICIENT_PERMISSIONS",
        data={"user_role": user.role.value, "required_permission": required},
    )


def require_permission(permission: Permission) -> Callable:
    """Exige que el rol del usuario tenga el permiso (sin comprobar propiedad)."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        result = has_permission(current_user.role, permission)
        if not result.allowed:
            raise _permission_denied(current_user, result.reason, permission.value)
        return current_user

    return dependency


def require_any_permission(*permissions: Permission) -> Callable:

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        result = has_any_permission(current_user.role, permissions)
        if not result.allowed:
            raise _permission_denied(current_user, result.reason, ", ".join(p.value for p in permissions))
        return current_user

    return dependency

# ========================================
# VENDEDOR ACTUAL
# ========================================

async def get_current_vendor(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Vendor:
    """Ficha de vendedor del usuario autenticado; exige rol VENDOR."""
    if current_user.role != UserRole.VENDOR:
        raise ApiError(status.HTTP_403_FORBIDDEN, "Only vendors can access this resource.", code="VENDOR_REQUIRED")

    vendor = await vendor_crud.get_vendor_by_user_id(db, current_user.id)
    if not vendor:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Vendor profile not found", code="VENDOR_NOT_FOUND")
    return vendor
