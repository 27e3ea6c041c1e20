# backend/indovendor/schemas/common_schema.py
"""
Sobre de respuesta uniforme de la API: `{success, message, data?, errors?}`.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Respuesta correcta con carga útil tipada."""
    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    """Respuesta de error tal y como la generan los manejadores de excepciones."""
    success: bool = False
    message: str
    code: Optional[str] = None
    errors: Optional[List[Any]] = None
    data: Optional[Dict[str, Any]] = None


def ok(message: str, data: Any = None) -> Dict[str, Any]:
    """Construye el cuerpo de una respuesta correcta."""
    return {"success": True, "message": message, "data": data}
