# backend/indovendor/schemas/category_schema.py

"""
Esquemas Pydantic para el modelo Category y para las categorías de un vendedor.

Patrón de esquemas utilizado:
- CategoryBase: Propiedades comunes compartidas
- CategoryCreate: Para crear nuevas categorías (POST, solo SUPERADMIN)
- CategoryUpdate: Para actualizar categorías existentes (PUT)
- CategoryResponse: Para respuestas de la API (GET)
- VendorCategory*: Asignación de categorías a un vendedor
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

# ========================================
# ESQUEMA BASE
# ========================================

class CategoryBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de categoría."""
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class CategoryCreate(CategoryBase):
    """Esquema para crear una categoría. El slug se deriva del nombre si falta."""
    slug: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    """Esquema para actualizar una categoría. Todos los campos son opcionales."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None

    @field_validator("name", "slug", "is_active")
    @classmethod
    def not_null(cls, value, info):
        # Se pueden omitir, pero no enviar a null
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class CategoryResponse(CategoryBase):
    """Esquema para las respuestas de la API al leer categorías."""
    id: str
    slug: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategorySummary(BaseModel):
    """Versión reducida para anidar en otras respuestas."""
    id: str
    name: str
    slug: str
    icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ========================================
# CATEGORÍAS DEL VENDEDOR
# ========================================

class VendorCategoryCreate(BaseModel):
    category_id: str


class VendorCategoryReplace(BaseModel):
    """Sustituye todas las categorías del vendedor (máximo 5)."""
    category_ids: List[str]


class VendorCategoryResponse(BaseModel):
    id: str
    vendor_id: str
    category_id: str
    created_at: datetime
    category: Optional[CategoryResponse] = None

    model_config = ConfigDict(from_attributes=True)
