# backend/indovendor/services/category_service.py
"""
Servicio para operaciones de negocio relacionadas con categorías.

Este servicio se encarga de gestionar la lógica de negocio para el catálogo de
categorías de servicios y para la asignación de categorías a los vendedores,
incluyendo validación de duplicados, límites por vendedor y verificación de
integridad referencial.
"""

import logging
import re
import unicodedata
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Sequence

from indovendor.core.exceptions import ApiError
from indovendor.db.models.category_model import Category
from indovendor.db.models.vendor_model import VendorCategory
from indovendor.crud import category_crud, vendor_crud
from indovendor.schemas import category_schema
from fastapi import HTTPException
from starlette import status

logger = logging.getLogger(__name__)

MAX_VENDOR_CATEGORIES = 5


def slugify(value: str) -> str:
    """Convierte un nombre en slug: minúsculas ASCII separadas por guiones."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")


class CategoryService:
    """
    Servicio para operaciones de negocio relacionadas con categorías.

    Características:
    - Slug único en todo el catálogo
    - Bloqueo de borrado de categorías con productos
    - Máximo de 5 categorías activas por vendedor
    - Sustitución transaccional de las categorías de un vendedor
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_category_by_id(self, db: AsyncSession, category_id: str) -> Category:
        """
        Obtiene una categoría por su ID.

        Raises:
            HTTPException 404 si no existe
        """
        category = await category_crud.get_category(db, category_id=category_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        return category

    async def get_all_categories(self, db: AsyncSession) -> List[Category]:
        return await category_crud.get_categories(db)

    async def get_active_categories(self, db: AsyncSession) -> List[Category]:
        return await category_crud.get_categories(db, active_only=True)

    # ========================================
    # ADMINISTRACIÓN DEL CATÁLOGO (SUPERADMIN)
    # ========================================

    async def create_new_category(self, db: AsyncSession, category_in: category_schema.CategoryCreate) -> Category:
        """
        Crea una nueva categoría validando que el slug no esté en uso.

        Si no se envía slug se genera a partir del nombre.
        """
        slug = category_in.slug or slugify(category_in.name)
        if not slug:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category slug cannot be empty")

        if await category_crud.get_category_by_slug(db, slug):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category with slug '{slug}' already exists"
            )

        category = await category_crud.create_category(db, category_in, slug=slug)
        logger.info(f"🆕 CATEGORÍA: Creada '{category.name}' ({category.slug})")
        return category

    async def update_existing_category(self, db: AsyncSession, category_id: str, category_in: category_schema.CategoryUpdate) -> Category:
        """
        Actualiza una categoría existente. Un cambio de slug no puede chocar
        con el de otra categoría.
        """
        db_category = await self.get_category_by_id(db, category_id)

        if category_in.slug and category_in.slug != db_category.slug:
            existing = await category_crud.get_category_by_slug(db, category_in.slug)
            if existing and existing.id != category_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Category with slug '{category_in.slug}' already exists"
                )

        return await category_crud.update_category(db, db_category, category_in)

    async def delete_existing_category(self, db: AsyncSession, category_id: str) -> Category:
        """
        Elimina una categoría si no tiene productos asociados.
        """
        category = await self.get_category_by_id(db, category_id)

        if await category_crud.count_products_in_category(db, category_id) > 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete category with associated products. Reassign products first."
            )

        deleted = await category_crud.delete_category(db, category)
        logger.info(f"🗑️ CATEGORÍA: Eliminada '{deleted.name}'")
        return deleted

    # ========================================
    # CATEGORÍAS DEL VENDEDOR
    # ========================================

    async def get_vendor_categories(self, db: AsyncSession, vendor_id: str) -> List[VendorCategory]:
        return await vendor_crud.get_vendor_categories(db, vendor_id)

    async def add_vendor_category(self, db: AsyncSession, vendor_id: str, category_id: str) -> VendorCategory:
        """
        Asigna una categoría activa al vendedor, sin duplicados y respetando el máximo.
        """
        category = await self.get_category_by_id(db, category_id)
        if not category.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot add inactive category")

        if await vendor_crud.get_vendor_category(db, vendor_id, category_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Vendor already has this category")

        if await vendor_crud.count_vendor_categories(db, vendor_id) >= MAX_VENDOR_CATEGORIES:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"Maximum {MAX_VENDOR_CATEGORIES} categories allowed",
                code="CATEGORY_LIMIT_REACHED",
            )

        link = await vendor_crud.add_vendor_category(db, vendor_id, category_id)
        logger.info(f"🏷️ CATEGORÍA: Vendedor {vendor_id} añade '{category.name}'")
        return link

    async def remove_vendor_category(self, db: AsyncSession, vendor_id: str, category_id: str) -> None:
        link = await vendor_crud.get_vendor_category(db, vendor_id, category_id)
        if not link:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor does not have this category")
        await vendor_crud.remove_vendor_category(db, link)

    async def replace_vendor_categories(self, db: AsyncSession, vendor_id: str, category_ids: Sequence[str]) -> List[VendorCategory]:
        """
        Sustituye todas las categorías del vendedor.

        Se validan todas antes de tocar la base de datos; la sustitución se
        realiza en una única transacción.
        """
        unique_ids = list(dict.fromkeys(category_ids))
        if len(unique_ids) > MAX_VENDOR_CATEGORIES:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"Maximum {MAX_VENDOR_CATEGORIES} categories allowed",
                code="CATEGORY_LIMIT_REACHED",
            )

        found = {c.id: c for c in await category_crud.get_categories_by_ids(db, unique_ids)}
        for category_id in unique_ids:
            category = found.get(category_id)
            if not category:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category {category_id} not found")
            if not category.is_active:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Category {category.name} is not active")

        links = await vendor_crud.replace_vendor_categories(db, vendor_id, unique_ids)
        logger.info(f"🏷️ CATEGORÍA: Vendedor {vendor_id} ahora tiene {len(links)} categorías")
        return links

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

category_service = CategoryService()
