"""
Endpoints REST para el catálogo de categorías y las categorías de cada vendedor.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.api import deps
from indovendor.db.models.user_model import User
from indovendor.db.models.vendor_model import Vendor
from indovendor.schemas import category_schema
from indovendor.schemas.common_schema import ApiResponse, ok
from indovendor.services.category_service import category_service

router = APIRouter()


def _categories(categories) -> list:
    return [category_schema.CategoryResponse.model_validate(c).model_dump() for c in categories]


def _links(links) -> list:
    return [category_schema.VendorCategoryResponse.model_validate(link).model_dump() for link in links]

# ========================================
# CONSULTAS PÚBLICAS
# ========================================

@router.get("/", response_model=ApiResponse[List[category_schema.CategoryResponse]])
async def read_categories(db: AsyncSession = Depends(deps.get_db)):
    """Obtiene todas las categorías ordenadas por nombre."""
    categories = await category_service.get_all_categories(db)
    return ok("Categories retrieved successfully", _categories(categories))


@router.get("/active", response_model=ApiResponse[List[category_schema.CategoryResponse]])
async def read_active_categories(db: AsyncSession = Depends(deps.get_db)):
    categories = await category_service.get_active_categories(db)
    return ok("Active categories retrieved successfully", _categories(categories))

# ========================================
# CATEGORÍAS DEL VENDEDOR
# ========================================

@router.get("/vendor/mine", response_model=ApiResponse[List[category_schema.VendorCategoryResponse]])
async def read_my_categories(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    links = await category_service.get_vendor_categories(db, vendor.id)
    return ok("Vendor categories retrieved successfully", _links(links))


@router.post(
    "/vendor",
    response_model=ApiResponse[category_schema.VendorCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_my_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: category_schema.VendorCategoryCreate,
):
    """Asigna una categoría al vendedor autenticado (máximo 5)."""
    link = await category_service.add_vendor_category(db, vendor.id, data.category_id)
    return ok(
        "Category added to vendor successfully",
        category_schema.VendorCategoryResponse.model_validate(link).model_dump(),
    )


@router.put("/vendor", response_model=ApiResponse[List[category_schema.VendorCategoryResponse]])
async def replace_my_categories(
    *,
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: category_schema.VendorCategoryReplace,
):
    links = await category_service.replace_vendor_categories(db, vendor.id, data.category_ids)
    return ok("Vendor categories updated successfully", _links(links))


@router.delete("/vendor/{category_id}", response_model=ApiResponse[None])
async def remove_my_category(
    category_id: str,
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    await category_service.remove_vendor_category(db, vendor.id, category_id)
    return ok("Category removed from vendor successfully")

# ========================================
# ADMINISTRACIÓN (SUPERADMIN)
# ========================================

@router.post(
    "/admin",
    response_model=ApiResponse[category_schema.CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_superadmin),
    category_in: category_schema.CategoryCreate,
):
    """Crea una nueva categoría en el catálogo."""
    category = await category_service.create_new_category(db, category_in)
    return ok(
        "Category created successfully",
        category_schema.CategoryResponse.model_validate(category).model_dump(),
    )


@router.put("/admin/{category_id}", response_model=ApiResponse[category_schema.CategoryResponse])
async def update_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_superadmin),
    category_id: str,
    category_in: category_schema.CategoryUpdate,
):
    category = await category_service.update_existing_category(db, category_id, category_in)
    return ok(
        "Category updated successfully",
        category_schema.CategoryResponse.model_validate(category).model_dump(),
    )


@router.delete("/admin/{category_id}", response_model=ApiResponse[None])
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_superadmin),
):
    """Elimina una categoría sin productos asociados."""
    await category_service.delete_existing_category(db, category_id)
    return ok("Category deleted successfully")


@router.get("/{category_id}", response_model=ApiResponse[category_schema.CategoryResponse])
async def read_category(category_id: str, db: AsyncSession = Depends(deps.get_db)):
    category = await category_service.get_category_by_id(db, category_id)
    return ok(
        "Category retrieved successfully",
        category_schema.CategoryResponse.model_validate(category).model_dump(),
    )
