# backend/indovendor/schemas/auth_schema.py
"""
Esquemas de las peticiones y respuestas de autenticación.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel

from indovendor.core.permissions import UserRole
from .user_schema import UserResponse


class RegisterRequest(BaseModel):
    email: str
    password: str
    phone: Optional[str] = None
    role: UserRole = UserRole.CLIENT
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class PasswordStrengthRequest(BaseModel):
    password: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class AccessToken(BaseModel):
    access_token: str


class TokenInfo(BaseModel):
    refreshed_at: datetime
    expires_in: str
    token_type: str = "Bearer"


class AuthResult(BaseModel):
    """Usuario autenticado junto con su par de tokens."""
    user: UserResponse
    tokens: TokenPair


class RefreshResult(BaseModel):
    tokens: TokenPair
    token_info: TokenInfo


class PasswordStrengthResult(BaseModel):
    is_valid: bool
    errors: List[str]
    score: int
    strength: str


class TokenVerification(BaseModel):
    valid: bool
    user: Optional[UserResponse] = None
