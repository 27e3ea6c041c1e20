# backend/indovendor/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Esta capa orquesta las operaciones CRUD de productos, aplica las reglas de
negocio del catálogo y coordina la relación entre productos, categorías,
vendedores e imágenes.

Responsabilidades principales:
- Validaciones de negocio (rangos de precio, pedidos y descuento)
- Verificación de categoría existente y activa
- Control de propiedad: un vendedor solo gestiona sus propios productos
- Búsquedas públicas, destacados, populares y similares
- Operaciones masivas (estado y borrado)
- Gestión de imágenes en disco y en la lista JSON del producto
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from fastapi import HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.exceptions import ApiError, validation_error
from indovendor.core.permissions import Permission, has_permission
from indovendor.crud import category_crud, product_crud
from indovendor.db.models.product_model import FeaturedProduct, Product
from indovendor.db.models.user_model import User
from indovendor.db.models.vendor_model import Vendor
from indovendor.schemas import product_schema
from indovendor.services.file_storage_service import (
    PRODUCT_IMAGE_RULE,
    FileStorageService,
    file_storage_service,
    random_suffix,
    timestamp_ms,
)

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 100
MAX_BASE_PRICE = 999_999_999
MIN_SEARCH_LENGTH = 2
MAX_IMAGES_PER_UPLOAD = 10
PRODUCT_IMAGES_DIR = "products"


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.

    Características principales:
    - Recoge todos los errores de validación y los informa juntos
    - SUPERADMIN puede gestionar cualquier producto
    - Las imágenes se guardan en `<UPLOAD_DIR>/products`
    """

    def __init__(self, storage: FileStorageService):
        self.storage = storage

    # ========================================
    # VALIDACIONES
    # ========================================

    def _validate_fields(self, data: Dict[str, Any], current: Optional[Product] = None) -> None:
        """
        Valida los campos presentes en `data`. En una actualización, los
        campos ausentes se completan con los valores actuales del producto
        para comprobar la relación entre min_order y max_order.
        """
        errors: List[str] = []

        if "category_id" in data and not data["category_id"]:
            errors.append("Category ID is required")
        if "is_active" in data and data["is_active"] is None:
            errors.append("Active status cannot be null")

        if "name" in data:
            name = (data["name"] or "").strip()
            if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
                errors.append(
                    f"Product name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters"
                )

        if "base_price" in data:
            price = data["base_price"]
            if price is None or price <= 0:
                errors.append("Base price must be greater than 0")
            elif price > MAX_BASE_PRICE:
                errors.append("Base price is too high")

        min_order = data.get("min_order", current.min_order if current else 1)
        max_order = data.get("max_order", current.max_order if current else None)
        if "min_order" in data and (min_order is None or min_order < 1):
            errors.append("Minimum order must be at least 1")
        elif max_order is not None and min_order is not None and max_order < min_order:
            errors.append("Maximum order must be greater than or equal to minimum order")

        if "discount_percentage" in data:
            discount = data["discount_percentage"]
            if discount is None or not 0 <= discount <= 100:
                errors.append("Discount percentage must be between 0 and 100")

        if errors:
            raise validation_error(errors)

    async def _validate_category(self, db: AsyncSession, category_id: str) -> None:
        category = await category_crud.get_category(db, category_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        if not category.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category is not active")

    def validate_filters(self, filters: product_schema.ProductFilters) -> None:
        errors: List[str] = []
        if filters.min_price is not None and filters.min_price < 0:
            errors.append("Minimum price cannot be negative")
        if filters.max_price is not None and filters.max_price < 0:
            errors.append("Maximum price cannot be negative")
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            errors.append("Minimum price cannot be greater than maximum price")
        if errors:
            raise validation_error(errors)

    # ========================================
    # CONTROL DE PROPIEDAD
    # ========================================

    def _ensure_owner(self, user: User, product: Product, permission: Permission, message: str) -> None:
        """
        Lanza 403 si el usuario no puede ejercer `permission` sobre el producto.

        El propietario del producto es el usuario dueño de su vendedor.
        """
        owner = {"user_id": product.vendor.user_id if product.vendor else None}
        result = has_permission(user.role, permission, user.id, owner)
        if not result.allowed:
            raise ApiError(status.HTTP_403_FORBIDDEN, message, code="INSUFFICIENT_PERMISSIONS")

    async def get_owned_product(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        permission: Permission,
        message: str,
    ) -> Product:
        product = await self.get_product_by_id(db, product_id)
        self._ensure_owner(user, product, permission, message)
        return product

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product_by_id(self, db: AsyncSession, product_id: str) -> Product:
        product = await product_crud.get_product(db, product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    async def list_products(
        self,
        db: AsyncSession,
        filters: product_schema.ProductFilters,
        limit: int,
        offset: int,
    ) -> Dict[str, Any]:
        self.validate_filters(filters)
        products, total = await product_crud.get_products(db, filters, limit=limit, offset=offset)
        return {"products": products, "total": total, "limit": limit, "offset": offset}

    async def search(self, db: AsyncSession, query: Optional[str], limit: int = 50) -> Dict[str, Any]:
        term = (query or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Search query must be at least {MIN_SEARCH_LENGTH} characters long",
            )
        products = await product_crud.search_products(db, term, limit=limit)
        return {"query": term, "products": products, "count": len(products)}

    async def advanced_search(
        self,
        db: AsyncSession,
        filters: product_schema.ProductFilters,
        page: int,
        page_size: int,
    ) -> Dict[str, Any]:
        """
        Búsqueda pública paginada. Se pide una fila extra para saber si hay
        página siguiente sin contar el total.
        """
        self.validate_filters(filters)
        rows = await product_crud.get_products_page(
            db, filters, limit=page_size + 1, offset=(page - 1) * page_size
        )
        return {
            "products": rows[:page_size],
            "page": page,
            "page_size": page_size,
            "has_next": len(rows) > page_size,
            "has_previous": page > 1,
        }

    async def get_featured(self, db: AsyncSession, limit: int = 10) -> List[Product]:
        return await product_crud.get_featured_products(db, limit=limit)

    async def get_popular(self, db: AsyncSession, limit: int = 10) -> List[Product]:
        # Sin pedidos todavía: la novedad hace de popularidad
        return await product_crud.get_recent_public_products(db, limit=limit)

    async def get_by_category(self, db: AsyncSession, category_id: str) -> List[Product]:
        if not await category_crud.get_category(db, category_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        return await product_crud.get_products_by_category(db, category_id)

    async def get_similar(self, db: AsyncSession, product_id: str, limit: int = 5) -> List[Product]:
        product = await self.get_product_by_id(db, product_id)
        return await product_crud.get_similar_products(db, product, limit=limit)

    async def get_vendor_products(self, db: AsyncSession, vendor: Vendor) -> List[Product]:
        return await product_crud.get_products_by_vendor(db, vendor.id)

    async def get_vendor_stats(self, db: AsyncSession, vendor: Vendor) -> Dict[str, int]:
        return await product_crud.get_vendor_product_stats(db, vendor.id)

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def create_product(
        self,
        db: AsyncSession,
        vendor: Vendor,
        product_in: product_schema.ProductCreate,
    ) -> Product:
        data = product_in.model_dump()
        self._validate_fields(data)
        await self._validate_category(db, product_in.category_id)

        data["name"] = data["name"].strip()
        product = await product_crud.create_product(db, vendor.id, data)
        logger.info(f"🆕 PRODUCTO: '{product.name}' creado por el vendedor {vendor.id}")
        return product

    async def update_product(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        product_in: product_schema.ProductUpdate,
    ) -> Product:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only update your own products"
        )
        data = product_in.model_dump(exclude_unset=True)
        if not data:
            return product

        self._validate_fields(data, current=product)
        if data.get("category_id") and data["category_id"] != product.category_id:
            await self._validate_category(db, data["category_id"])
        if "name" in data:
            data["name"] = data["name"].strip()

        return await product_crud.update_product(db, product, data)

    async def delete_product(self, db: AsyncSession, user: User, product_id: str) -> None:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_DELETE, "You can only delete your own products"
        )
        image_urls = [img.get("url") for img in product.images or []]
        await product_crud.delete_product(db, product)
        for url in image_urls:
            self.storage.delete(url)
        logger.info(f"🗑️ PRODUCTO: Eliminado {product_id} ({len(image_urls)} imágenes)")

    async def set_status(self, db: AsyncSession, user: User, product_id: str, is_active: bool) -> Product:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only update your own products"
        )
        return await product_crud.update_product(db, product, {"is_active": is_active})

    async def duplicate_product(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        name: Optional[str] = None,
    ) -> Product:
        """
        Copia un producto propio. La copia nace inactiva y sin imágenes.
        """
        source = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_CREATE, "You can only duplicate your own products"
        )
        data = {
            "category_id": source.category_id,
            "name": name.strip() if name else f"{source.name} (Copy)",
            "description": source.description,
            "base_price": source.base_price,
            "unit_type": source.unit_type,
            "min_order": source.min_order,
            "max_order": source.max_order,
            "discount_percentage": source.discount_percentage,
            "specifications": source.specifications,
            "terms_conditions": source.terms_conditions,
            "is_active": False,
        }
        self._validate_fields({"name": data["name"]})
        copy = await product_crud.create_product(db, source.vendor_id, data)
        logger.info(f"📑 PRODUCTO: {source.id} duplicado como {copy.id}")
        return copy

    async def _owned_products(self, db: AsyncSession, vendor: Vendor, product_ids: Sequence[str]) -> List[Product]:
        """Carga los productos indicados exigiendo que todos sean del vendedor."""
        unique_ids = list(dict.fromkeys(product_ids))
        if not unique_ids:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product IDs are required")

        products = await product_crud.get_products_by_ids(db, unique_ids)
        if len(products) != len(unique_ids) or any(p.vendor_id != vendor.id for p in products):
            raise ApiError(
                status.HTTP_403_FORBIDDEN,
                "Some products do not belong to you",
                code="INSUFFICIENT_PERMISSIONS",
            )
        return products

    async def bulk_update_status(
        self,
        db: AsyncSession,
        vendor: Vendor,
        product_ids: Sequence[str],
        is_active: bool,
    ) -> int:
        products = await self._owned_products(db, vendor, product_ids)
        updated = await product_crud.bulk_update_status(db, [p.id for p in products], is_active)
        logger.info(f"📦 PRODUCTO: {updated} productos del vendedor {vendor.id} con is_active={is_active}")
        return updated

    async def bulk_delete(self, db: AsyncSession, vendor: Vendor, product_ids: Sequence[str]) -> int:
        products = await self._owned_products(db, vendor, product_ids)
        image_urls = [img.get("url") for p in products for img in p.images or []]
        deleted = await product_crud.bulk_delete(db, products)
        for url in image_urls:
            self.storage.delete(url)
        return deleted

    async def request_featured(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        start_date: datetime,
        end_date: datetime,
    ) -> FeaturedProduct:
        """Registra una solicitud de destacado pendiente de pago."""
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_FEATURE, "You can only feature your own products"
        )
        if end_date <= start_date:
            raise validation_error(["End date must be after start date"])
        if not product.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only active products can be featured")

        entry = await product_crud.add_featured_period(db, product.id, start_date, end_date)
        logger.info(f"⭐ PRODUCTO: Solicitud de destacado {entry.id} para {product.id}")
        return entry

    # ========================================
    # IMÁGENES
    # ========================================

    async def get_images(self, db: AsyncSession, product_id: str) -> List[Dict[str, Any]]:
        product = await self.get_product_by_id(db, product_id)
        return product.sorted_images()

    async def _store_image(self, product: Product, file: UploadFile) -> str:
        stem = f"{product.id}_{timestamp_ms()}_{random_suffix()}"
        return await self.storage.save(file, PRODUCT_IMAGES_DIR, stem, PRODUCT_IMAGE_RULE)

    async def add_images(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        files: List[UploadFile],
    ) -> List[Dict[str, Any]]:
        """
        Sube varias imágenes y las añade al final de la lista actual.

        Si una falla la validación se borran las ya guardadas en esta petición.
        """
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only upload images to your own products"
        )
        if not files:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No images uploaded")
        if len(files) > MAX_IMAGES_PER_UPLOAD:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {MAX_IMAGES_PER_UPLOAD} images can be uploaded at once",
            )

        images = list(product.images or [])
        next_order = max((img.get("sort_order", 0) for img in images), default=-1) + 1
        saved_urls: List[str] = []
        try:
            for offset, file in enumerate(files):
                url = await self._store_image(product, file)
                saved_urls.append(url)
                images.append({
                    "id": uuid.uuid4().hex,
                    "url": url,
                    "alt": product.name,
                    "sort_order": next_order + offset,
                })
        except ApiError:
            for url in saved_urls:
                self.storage.delete(url)
            raise

        product = await product_crud.set_product_images(db, product, images)
        return product.sorted_images()

    async def add_single_image(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        file: UploadFile,
        alt: Optional[str] = None,
        sort_order: Optional[int] = None,
    ) -> Dict[str, Any]:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only upload images to your own products"
        )
        images = list(product.images or [])
        if sort_order is None:
            sort_order = max((img.get("sort_order", 0) for img in images), default=-1) + 1

        url = await self._store_image(product, file)
        image = {"id": uuid.uuid4().hex, "url": url, "alt": alt or product.name, "sort_order": sort_order}
        await product_crud.set_product_images(db, product, images + [image])
        return image

    async def remove_image(self, db: AsyncSession, user: User, product_id: str, image_id: str) -> None:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only remove images from your own products"
        )
        images = list(product.images or [])
        target = next((img for img in images if img.get("id") == image_id), None)
        if not target:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

        await product_crud.set_product_images(db, product, [img for img in images if img is not target])
        self.storage.delete(target.get("url"))

    async def reorder_images(
        self,
        db: AsyncSession,
        user: User,
        product_id: str,
        order: List[product_schema.ImageOrderItem],
    ) -> List[Dict[str, Any]]:
        product = await self.get_owned_product(
            db, user, product_id, Permission.PRODUCT_UPDATE, "You can only reorder images of your own products"
        )
        positions = {item.id: item.sort_order for item in order}
        known = {img.get("id") for img in product.images or []}
        unknown = [image_id for image_id in positions if image_id not in known]
        if unknown:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

        images = [
            {**img, "sort_order": positions.get(img.get("id"), img.get("sort_order", 0))}
            for img in product.images or []
        ]
        product = await product_crud.set_product_images(db, product, images)
        return product.sorted_images()

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

product_service = ProductService(file_storage_service)
