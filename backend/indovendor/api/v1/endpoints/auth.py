"""
Endpoints REST de autenticación: registro, login, tokens y contraseñas.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.api import deps
from indovendor.db.models.user_model import User
from indovendor.schemas import auth_schema, user_schema
from indovendor.schemas.common_schema import ApiResponse, ok
from indovendor.services.auth_service import auth_service, profile_completeness

router = APIRouter()


def _auth_result(result) -> dict:
    return auth_schema.AuthResult(
        user=user_schema.UserResponse.model_validate(result["user"]),
        tokens=result["tokens"],
    ).model_dump()


@router.post("/register", response_model=ApiResponse[auth_schema.AuthResult], status_code=status.HTTP_201_CREATED)
async def register(
    *,
    db: AsyncSession = Depends(deps.get_db),
    data: auth_schema.RegisterRequest,
):
    """Registra un usuario nuevo y devuelve su par de tokens."""
    result = await auth_service.register(db, data)
    return ok("User registered successfully", _auth_result(result))


@router.post("/login", response_model=ApiResponse[auth_schema.AuthResult])
async def login(
    *,
    db: AsyncSession = Depends(deps.get_db),
    data: auth_schema.LoginRequest,
):
    result = await auth_service.login(db, data)
    return ok("Login successful", _auth_result(result))


@router.post("/refresh-token", response_model=ApiResponse[auth_schema.RefreshResult])
async def refresh_token(
    *,
    db: AsyncSession = Depends(deps.get_db),
    data: auth_schema.RefreshTokenRequest,
):
    """Rota el par de tokens a partir de un refresh token válido."""
    result = await auth_service.refresh_tokens(db, data.refresh_token)
    return ok("Tokens refreshed successfully", result)


@router.post("/refresh", response_model=ApiResponse[auth_schema.AccessToken])
async def refresh_legacy(data: auth_schema.RefreshTokenRequest):
    """Variante antigua: devuelve solo un access token nuevo."""
    return ok("Token refreshed successfully", auth_service.refresh_access_only(data.refresh_token))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(current_user: User = Depends(deps.get_current_user)):
    # Los tokens no se guardan en el servidor: el cliente los descarta
    return ok("Logout successful")


@router.get("/me", response_model=ApiResponse[user_schema.UserWithCompleteness])
async def read_me(current_user: User = Depends(deps.get_current_user)):
    data = user_schema.UserWithCompleteness(
        **user_schema.UserResponse.model_validate(current_user).model_dump(),
        profile_completeness=profile_completeness(current_user),
    )
    return ok("User profile retrieved successfully", data.model_dump())


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    data: auth_schema.ChangePasswordRequest,
):
    await auth_service.change_password(db, current_user, data)
    return ok("Password changed successfully")


@router.post("/check-password-strength", response_model=ApiResponse[auth_schema.PasswordStrengthResult])
async def check_password_strength(data: auth_schema.PasswordStrengthRequest):
    return ok("Password strength checked", auth_service.check_password_strength(data.password))


@router.get("/verify-token", response_model=ApiResponse[auth_schema.TokenVerification])
async def verify_token(current_user: Optional[User] = Depends(deps.get_optional_user)):
    """Indica si la petición trae un token válido, sin fallar cuando no lo trae."""
    if current_user is None:
        return ok("Token is invalid or missing", {"valid": False, "user": None})
    user = user_schema.UserResponse.model_validate(current_user).model_dump()
    return ok("Token is valid", {"valid": True, "user": user})

# ========================================
# RUTAS DE DEMOSTRACIÓN POR ROL
# ========================================

@router.get("/admin-only", response_model=ApiResponse[None])
async def admin_only(current_user: User = Depends(deps.require_superadmin)):
    return ok("Welcome, administrator")


@router.get("/vendor-only", response_model=ApiResponse[None])
async def vendor_only(current_user: User = Depends(deps.require_vendor)):
    return ok("Welcome, vendor")


@router.get("/client-only", response_model=ApiResponse[None])
async def client_only(current_user: User = Depends(deps.require_client)):
    return ok("Welcome, client")


@router.get("/authenticated-users", response_model=ApiResponse[None])
async def authenticated_users(current_user: User = Depends(deps.require_any_user)):
    return ok(f"Welcome, {current_user.role.value.lower()}")
