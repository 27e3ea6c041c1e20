# backend/indovendor/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Los rangos de negocio (longitud del nombre, precio, pedidos mínimos, descuento)
se validan en ProductService para poder informar de todos los errores a la vez;
aquí solo se fijan los tipos.
"""

from datetime import datetime, timezone
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .category_schema import CategorySummary
from .vendor_schema import VendorSummary

# ========================================
# ESQUEMAS AUXILIARES
# ========================================

class ProductImage(BaseModel):
    """Imagen asociada a un producto (almacenada como JSON en la fila)."""
    id: str
    url: str
    alt: Optional[str] = None
    sort_order: int = 0


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str
    description: Optional[str] = None
    base_price: float
    unit_type: Optional[str] = None
    min_order: int = 1
    max_order: Optional[int] = None
    discount_percentage: float = 0
    specifications: Optional[str] = None
    terms_conditions: Optional[str] = None


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un producto. El vendedor se toma del usuario autenticado."""
    category_id: str
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Esquema para actualizar un producto. Todos los campos son opcionales."""
    category_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = None
    unit_type: Optional[str] = None
    min_order: Optional[int] = None
    max_order: Optional[int] = None
    discount_percentage: Optional[float] = None
    specifications: Optional[str] = None
    terms_conditions: Optional[str] = None
    is_active: Optional[bool] = None


class ProductStatusUpdate(BaseModel):
    is_active: bool


class BulkStatusUpdate(BaseModel):
    product_ids: List[str]
    is_active: bool


class BulkDelete(BaseModel):
    product_ids: List[str]


class DuplicateRequest(BaseModel):
    name: Optional[str] = None


class ImageOrderItem(BaseModel):
    id: str
    sort_order: int = Field(..., ge=0)


class ImageOrderUpdate(BaseModel):
    images: List[ImageOrderItem] = Field(..., min_length=1)


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """
    Esquema de respuesta para un producto, incluyendo categoría y vendedor
    resumidos. Las imágenes se devuelven ordenadas por sort_order.
    """
    id: str
    vendor_id: str
    category_id: str
    images: List[ProductImage] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime
    category: Optional[CategorySummary] = None
    vendor: Optional[VendorSummary] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("images", mode="before")
    @classmethod
    def sort_images(cls, value):
        return sorted(value or [], key=lambda img: img.get("sort_order", 0) if isinstance(img, dict) else img.sort_order)


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    total: int
    limit: int
    offset: int


class ProductSearchResponse(BaseModel):
    query: str
    products: List[ProductResponse]
    count: int


class AdvancedSearchResponse(BaseModel):
    products: List[ProductResponse]
    page: int
    page_size: int
    has_next: bool
    has_previous: bool


class VendorProductStats(BaseModel):
    total_products: int
    active_products: int
    inactive_products: int


class BulkResult(BaseModel):
    updated: Optional[int] = None
    deleted: Optional[int] = None


# ========================================
# FILTROS
# ========================================

SortField = Literal["name", "base_price", "created_at"]
SortOrder = Literal["asc", "desc"]


class ProductFilters(BaseModel):
    """Filtros de listado; se construye a partir de los query params."""
    category_id: Optional[str] = None
    vendor_id: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"


# ========================================
# DESTACADOS
# ========================================

class FeaturedRequest(BaseModel):
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        # Las fechas sin zona horaria se interpretan como UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class FeaturedProductResponse(BaseModel):
    id: str
    product_id: str
    start_date: datetime
    end_date: datetime
    payment_status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
