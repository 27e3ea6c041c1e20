"""
Endpoints REST para el catálogo de productos.

Las rutas de lectura son públicas; las de escritura exigen un vendedor (o un
SUPERADMIN) con el permiso correspondiente y la propiedad del producto.
Las rutas con segmentos fijos se declaran antes que `/{product_id}` para que
no queden ocultas por ella.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.api import deps
from indovendor.core.permissions import Permission
from indovendor.db.models.user_model import User
from indovendor.db.models.vendor_model import Vendor
from indovendor.schemas import product_schema
from indovendor.schemas.common_schema import ApiResponse, ok
from indovendor.services.product_service import product_service

router = APIRouter()


def _product(product) -> dict:
    return product_schema.ProductResponse.model_validate(product).model_dump()


def _products(products) -> list:
    return [_product(p) for p in products]


def _filters(
    category_id: Optional[str] = None,
    vendor_id: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: product_schema.SortField = "created_at",
    sort_order: product_schema.SortOrder = "desc",
) -> product_schema.ProductFilters:
    """Construye los filtros de listado a partir de los query params."""
    return product_schema.ProductFilters(
        category_id=category_id,
        vendor_id=vendor_id,
        min_price=min_price,
        max_price=max_price,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )

# ========================================
# CONSULTAS PÚBLICAS
# ========================================

@router.get("/", response_model=ApiResponse[product_schema.ProductListResponse])
async def read_products(
    db: AsyncSession = Depends(deps.get_db),
    filters: product_schema.ProductFilters = Depends(_filters),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """
    Obtiene una lista filtrada y paginada de productos.

    - **category_id / vendor_id**: Filtros exactos
    - **min_price / max_price**: Rango de precio base
    - **search**: Texto en nombre o descripción
    - **sort_by / sort_order**: Orden (por defecto created_at desc)
    """
    result = await product_service.list_products(db, filters, limit=limit, offset=offset)
    result["products"] = _products(result["products"])
    return ok("Products retrieved successfully", result)


@router.get("/search", response_model=ApiResponse[product_schema.ProductSearchResponse])
async def search_products(
    db: AsyncSession = Depends(deps.get_db),
    q: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=100),
):
    result = await product_service.search(db, q, limit=limit)
    result["products"] = _products(result["products"])
    return ok("Search completed successfully", result)


@router.get("/search/advanced", response_model=ApiResponse[product_schema.AdvancedSearchResponse])
async def advanced_search(
    db: AsyncSession = Depends(deps.get_db),
    filters: product_schema.ProductFilters = Depends(_filters),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """Búsqueda paginada por páginas sobre productos públicos."""
    result = await product_service.advanced_search(db, filters, page=page, page_size=page_size)
    result["products"] = _products(result["products"])
    return ok("Search completed successfully", result)


@router.get("/featured", response_model=ApiResponse[List[product_schema.ProductResponse]])
async def read_featured_products(
    db: AsyncSession = Depends(deps.get_db),
    limit: int = Query(10, ge=1, le=100),
):
    products = await product_service.get_featured(db, limit=limit)
    return ok("Featured products retrieved successfully", _products(products))


@router.get("/popular", response_model=ApiResponse[List[product_schema.ProductResponse]])
async def read_popular_products(
    db: AsyncSession = Depends(deps.get_db),
    limit: int = Query(10, ge=1, le=100),
):
    products = await product_service.get_popular(db, limit=limit)
    return ok("Popular products retrieved successfully", _products(products))


@router.get("/category/{category_id}", response_model=ApiResponse[List[product_schema.ProductResponse]])
async def read_products_by_category(category_id: str, db: AsyncSession = Depends(deps.get_db)):
    products = await product_service.get_by_category(db, category_id)
    return ok("Products retrieved successfully", _products(products))

# ========================================
# PRODUCTOS DEL VENDEDOR
# ========================================

@router.get("/vendor/mine", response_model=ApiResponse[List[product_schema.ProductResponse]])
async def read_my_products(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    products = await product_service.get_vendor_products(db, vendor)
    return ok("Vendor products retrieved successfully", _products(products))


@router.get("/vendor/stats", response_model=ApiResponse[product_schema.VendorProductStats])
async def read_my_product_stats(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    stats = await product_service.get_vendor_stats(db, vendor)
    return ok("Product statistics retrieved successfully", stats)


@router.post(
    "/",
    response_model=ApiResponse[product_schema.ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_CREATE)),
    vendor: Vendor = Depends(deps.get_current_vendor),
    product_in: product_schema.ProductCreate,
):
    """Crea un producto para el vendedor autenticado."""
    product = await product_service.create_product(db, vendor, product_in)
    return ok("Product created successfully", _product(product))

# ========================================
# OPERACIONES MASIVAS
# ========================================

@router.put("/bulk/status", response_model=ApiResponse[product_schema.BulkResult])
async def bulk_update_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: product_schema.BulkStatusUpdate,
):
    updated = await product_service.bulk_update_status(db, vendor, data.product_ids, data.is_active)
    return ok(f"{updated} products updated successfully", {"updated": updated})


@router.delete("/bulk", response_model=ApiResponse[product_schema.BulkResult])
async def bulk_delete(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_DELETE)),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: product_schema.BulkDelete,
):
    deleted = await product_service.bulk_delete(db, vendor, data.product_ids)
    return ok(f"{deleted} products deleted successfully", {"deleted": deleted})

# ========================================
# PRODUCTO INDIVIDUAL
# ========================================

@router.get("/{product_id}", response_model=ApiResponse[product_schema.ProductResponse])
async def read_product(product_id: str, db: AsyncSession = Depends(deps.get_db)):
    product = await product_service.get_product_by_id(db, product_id)
    return ok("Product retrieved successfully", _product(product))


@router.get("/{product_id}/similar", response_model=ApiResponse[List[product_schema.ProductResponse]])
async def read_similar_products(
    product_id: str,
    db: AsyncSession = Depends(deps.get_db),
    limit: int = Query(5, ge=1, le=50),
):
    products = await product_service.get_similar(db, product_id, limit=limit)
    return ok("Similar products retrieved successfully", _products(products))


@router.put("/{product_id}", response_model=ApiResponse[product_schema.ProductResponse])
async def update_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    product_id: str,
    product_in: product_schema.ProductUpdate,
):
    product = await product_service.update_product(db, current_user, product_id, product_in)
    return ok("Product updated successfully", _product(product))


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_DELETE)),
):
    """Elimina el producto y sus imágenes en disco."""
    await product_service.delete_product(db, current_user, product_id)
    return ok("Product deleted successfully")


@router.put("/{product_id}/status", response_model=ApiResponse[product_schema.ProductResponse])
async def update_product_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    product_id: str,
    data: product_schema.ProductStatusUpdate,
):
    product = await product_service.set_status(db, current_user, product_id, data.is_active)
    message = "Product activated successfully" if data.is_active else "Product deactivated successfully"
    return ok(message, _product(product))


@router.post(
    "/{product_id}/duplicate",
    response_model=ApiResponse[product_schema.ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_CREATE)),
    product_id: str,
    data: Optional[product_schema.DuplicateRequest] = None,
):
    product = await product_service.duplicate_product(db, current_user, product_id, data.name if data else None)
    return ok("Product duplicated successfully", _product(product))


@router.post(
    "/{product_id}/featured",
    response_model=ApiResponse[product_schema.FeaturedProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def request_featured(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_FEATURE)),
    product_id: str,
    data: product_schema.FeaturedRequest,
):
    """Solicita un periodo destacado; queda pendiente de pago."""
    entry = await product_service.request_featured(db, current_user, product_id, data.start_date, data.end_date)
    return ok(
        "Featured request created successfully",
        product_schema.FeaturedProductResponse.model_validate(entry).model_dump(),
    )

# ========================================
# IMÁGENES
# ========================================

@router.get("/{product_id}/images", response_model=ApiResponse[List[product_schema.ProductImage]])
async def read_product_images(product_id: str, db: AsyncSession = Depends(deps.get_db)):
    images = await product_service.get_images(db, product_id)
    return ok("Product images retrieved successfully", images)


@router.post(
    "/{product_id}/images",
    response_model=ApiResponse[List[product_schema.ProductImage]],
    status_code=status.HTTP_201_CREATED,
)
async def upload_product_images(
    product_id: str,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    images: Optional[List[UploadFile]] = File(None),
):
    """Sube hasta 10 imágenes (campo multipart `images`)."""
    result = await product_service.add_images(db, current_user, product_id, images or [])
    return ok("Images uploaded successfully", result)


@router.post(
    "/{product_id}/images/single",
    response_model=ApiResponse[product_schema.ProductImage],
    status_code=status.HTTP_201_CREATED,
)
async def upload_single_product_image(
    product_id: str,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    image: UploadFile = File(...),
    alt: Optional[str] = Form(None),
    sort_order: Optional[int] = Form(None),
):
    result = await product_service.add_single_image(
        db, current_user, product_id, image, alt=alt, sort_order=sort_order
    )
    return ok("Image uploaded successfully", result)


@router.put("/{product_id}/images/order", response_model=ApiResponse[List[product_schema.ProductImage]])
async def reorder_product_images(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
    product_id: str,
    data: product_schema.ImageOrderUpdate,
):
    images = await product_service.reorder_images(db, current_user, product_id, data.images)
    return ok("Image order updated successfully", images)


@router.delete("/{product_id}/images/{image_id}", response_model=ApiResponse[None])
async def delete_product_image(
    product_id: str,
    image_id: str,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_permission(Permission.PRODUCT_UPDATE)),
):
    await product_service.remove_image(db, current_user, product_id, image_id)
    return ok("Image deleted successfully")
