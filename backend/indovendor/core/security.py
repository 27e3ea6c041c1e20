# backend/indovendor/core/security.py
"""
Utilidades JWT para tokens de acceso y de refresco.

Los tokens de acceso y de refresco se firman con secretos distintos y tienen
duraciones distintas (15 minutos y 7 días por defecto). Todos llevan las
claims `iss`/`aud` de IndoVendor y un `type` que impide usar un token de
refresco como token de acceso.
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from indovendor.core.config import settings

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenError(Exception):
    """Fallo de verificación de un token, con su código para la API."""

    def __init__(self, message: str, code: str = "INVALID_TOKEN"):
        super().__init__(message)
        self.message = message
        self.code = code


def parse_duration(value: str) -> timedelta:
    """
    Convierte duraciones tipo "15m", "7d", "12h", "30s" o "3600" en timedelta.

    Raises:
        ValueError: si el formato no es válido
    """
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _encode(payload: Dict[str, Any], secret: str, lifetime: str, token_type: str) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        **payload,
        "type": token_type,
        "iat": now,
        "exp": now + parse_duration(lifetime),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=settings.JWT_ALGORITHM)


def build_payload(user: Any) -> Dict[str, Any]:
    role = getattr(user.role, "value", user.role)
    return {"user_id": user.id, "email": user.email, "role": role}


def generate_access_token(payload: Dict[str, Any]) -> str:
    return _encode(payload, settings.JWT_SECRET, settings.JWT_EXPIRES_IN, ACCESS_TOKEN)


def generate_refresh_token(payload: Dict[str, Any]) -> str:
    return _encode(payload, settings.REFRESH_SECRET, settings.JWT_REFRESH_EXPIRES_IN, REFRESH_TOKEN)


def generate_token_pair(user: Any) -> Dict[str, str]:
    """Genera el par de tokens (acceso + refresco) para un usuario."""
    payload = build_payload(user)
    return {
        "access_token": generate_access_token(payload),
        "refresh_token": generate_refresh_token(payload),
    }


def _verify(token: str, secret: str, token_type: str, label: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise TokenError(f"{label} token expired", "TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise TokenError(f"Invalid {label.lower()} token", "INVALID_TOKEN")

    if payload.get("type") != token_type:
        raise TokenError(f"Invalid {label.lower()} token", "INVALID_TOKEN")
    return payload


def verify_access_token(token: str) -> Dict[str, Any]:
    return _verify(token, settings.JWT_SECRET, ACCESS_TOKEN, "Access")


def verify_refresh_token(token: str) -> Dict[str, Any]:
    return _verify(token, settings.REFRESH_SECRET, REFRESH_TOKEN, "Refresh")


def refresh_access_token(refresh_token: str) -> str:
    """Emite un nuevo token de acceso a partir de un refresh token válido."""
    payload = verify_refresh_token(refresh_token)
    return generate_access_token(
        {"user_id": payload["user_id"], "email": payload["email"], "role": payload["role"]}
    )


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decodifica sin verificar la firma. Devuelve None si no es un JWT."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None


def get_token_expiration(token: str) -> Optional[datetime]:
    payload = decode_token(token)
    if not payload or "exp" not in payload:
        return None
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


def is_token_expired(token: str) -> bool:
    expiration = get_token_expiration(token)
    if expiration is None:
        return True
    return expiration <= datetime.now(timezone.utc)


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Devuelve el token solo si la cabecera es exactamente `Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]
