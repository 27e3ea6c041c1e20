# backend/indovendor/core/passwords.py
"""
Hash de contraseñas con bcrypt y evaluación de su fortaleza.
"""

import math
import re
import secrets
import string
from typing import Any, Dict, List

import bcrypt

from indovendor.core.config import settings

MIN_PASSWORD_LENGTH = 6
# bcrypt solo admite 72 bytes de entrada
MAX_PASSWORD_BYTES = 72

COMMON_PATTERNS = ("123456", "password", "qwerty", "admin", "letmein")
SPECIAL_CHARS_RE = re.compile(r'[!@#$%^&*(),.?":{}|<>]')

_SEQUENCES = [string.ascii_lowercase[i:i + 3] for i in range(24)] + [string.digits[i:i + 3] for i in range(8)]
SEQUENTIAL_RE = re.compile("|".join(_SEQUENCES), re.IGNORECASE)
REPEATED_RE = re.compile(r"(.)\1{2,}")

STRENGTH_LABELS = {0: "Very Weak", 1: "Very Weak", 2: "Weak", 3: "Fair", 4: "Strong", 5: "Very Strong"}


def hash_password(password: str) -> str:
    """
    Genera el hash bcrypt de una contraseña con el coste configurado.

    Raises:
        ValueError: contraseña vacía, demasiado corta o demasiado larga
    """
    if not password:
        raise ValueError("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=settings.BCRYPT_SALT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def _hash_rounds(hashed: str) -> int:
    # Formato: $2b$<coste>$<salt+hash>
    return int(hashed.split("$")[2])


def needs_rehash(hashed: str) -> bool:
    """True si el hash usa menos rondas que las configuradas o no es legible."""
    try:
        return _hash_rounds(hashed) < settings.BCRYPT_SALT_ROUNDS
    except (IndexError, ValueError):
        return True


def generate_random_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def validate_password_strength(password: str) -> Dict[str, Any]:
    """
    Puntúa una contraseña de 0 a 5 y recoge sus problemas.

    Longitud y variedad de caracteres suman puntos; patrones comunes,
    secuencias y repeticiones restan. Es válida si no hay errores y tiene
    al menos 6 caracteres.
    """
    password = password or ""
    errors: List[str] = []
    score = 0.0

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1

    if re.search(r"[a-z]", password):
        score += 0.5
    if re.search(r"[A-Z]", password):
        score += 0.5
    if re.search(r"\d", password):
        score += 0.5
    if SPECIAL_CHARS_RE.search(password):
        score += 0.5

    if not re.search(r"[a-zA-Z]", password):
        errors.append("Password must contain at least one letter")

    lowered = password.lower()
    if any(pattern in lowered for pattern in COMMON_PATTERNS):
        errors.append("Password contains common patterns")
        score -= 2

    if SEQUENTIAL_RE.search(password):
        errors.append("Password should not contain sequential characters")
        score -= 1

    if REPEATED_RE.search(password):
        errors.append("Password should not contain repeated characters")
        score -= 1

    # .5 se redondea hacia arriba
    final_score = int(math.floor(max(0.0, min(5.0, score)) + 0.5))
    return {
        "is_valid": not errors and len(password) >= MIN_PASSWORD_LENGTH,
        "errors": errors,
        "score": final_score,
    }


def get_password_strength_text(score: int) -> str:
    return STRENGTH_LABELS.get(max(0, min(5, int(score))), "Very Weak")
