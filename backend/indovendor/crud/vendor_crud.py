# backend/indovendor/crud/vendor_crud.py

"""
Operaciones CRUD para vendedores, sus categorías y sus áreas de cobertura.

Las sustituciones completas (categorías y cobertura) borran e insertan dentro
de la misma transacción: o se aplica todo o no se aplica nada.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from indovendor.db.models.vendor_model import Vendor, VendorCategory, VendorCoverageArea

logger = logging.getLogger(__name__)

# ========================================
# VENDEDOR
# ========================================

async def get_vendor(db: AsyncSession, vendor_id: str) -> Optional[Vendor]:
    result = await db.execute(select(Vendor).filter(Vendor.id == vendor_id))
    return result.scalars().first()


async def get_vendor_by_user_id(db: AsyncSession, user_id: str) -> Optional[Vendor]:
    result = await db.execute(select(Vendor).filter(Vendor.user_id == user_id))
    return result.scalars().first()


async def update_vendor(db: AsyncSession, db_vendor: Vendor, data: Dict[str, Any]) -> Vendor:
    """Aplica los campos indicados sobre el vendedor y confirma."""
    for field, value in data.items():
        setattr(db_vendor, field, value)
    await db.commit()
    await db.refresh(db_vendor)
    return db_vendor


# ========================================
# CATEGORÍAS DEL VENDEDOR
# ========================================

async def get_vendor_categories(db: AsyncSession, vendor_id: str) -> List[VendorCategory]:
    """Categorías del vendedor con la categoría precargada."""
    result = await db.execute(
        select(VendorCategory)
        .options(selectinload(VendorCategory.category))
        .filter(VendorCategory.vendor_id == vendor_id)
        .order_by(VendorCategory.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_vendor_category(db: AsyncSession, vendor_id: str, category_id: str) -> Optional[VendorCategory]:
    result = await db.execute(
        select(VendorCategory)
        .options(selectinload(VendorCategory.category))
        .filter(VendorCategory.vendor_id == vendor_id, VendorCategory.category_id == category_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def count_vendor_categories(db: AsyncSession, vendor_id: str) -> int:
    result = await db.execute(
        select(func.count(VendorCategory.id)).filter(VendorCategory.vendor_id == vendor_id)
    )
    return result.scalar_one()


async def add_vendor_category(db: AsyncSession, vendor_id: str, category_id: str) -> VendorCategory:
    db.add(VendorCategory(vendor_id=vendor_id, category_id=category_id))
    await db.commit()
    return await get_vendor_category(db, vendor_id, category_id)


async def remove_vendor_category(db: AsyncSession, link: VendorCategory) -> None:
    await db.delete(link)
    await db.commit()


async def replace_vendor_categories(db: AsyncSession, vendor_id: str, category_ids: Sequence[str]) -> List[VendorCategory]:
    """Sustituye todas las categorías del vendedor en una única transacción."""
    try:
        await db.execute(delete(VendorCategory).where(VendorCategory.vendor_id == vendor_id))
        for category_id in category_ids:
            db.add(VendorCategory(vendor_id=vendor_id, category_id=category_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"❌ ERROR: No se pudieron sustituir las categorías del vendedor {vendor_id}")
        raise
    return await get_vendor_categories(db, vendor_id)


# ========================================
# ÁREAS DE COBERTURA
# ========================================

async def get_coverage_areas(db: AsyncSession, vendor_id: str) -> List[VendorCoverageArea]:
    result = await db.execute(
        select(VendorCoverageArea)
        .filter(VendorCoverageArea.vendor_id == vendor_id)
        .order_by(VendorCoverageArea.created_at)
    )
    return list(result.scalars().all())


async def replace_coverage_areas(db: AsyncSession, vendor_id: str, areas: Sequence[Dict[str, Any]]) -> List[VendorCoverageArea]:
    """Sustituye todas las áreas de cobertura del vendedor en una única transacción."""
    try:
        await db.execute(delete(VendorCoverageArea).where(VendorCoverageArea.vendor_id == vendor_id))
        for area in areas:
            db.add(VendorCoverageArea(vendor_id=vendor_id, **area))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"❌ ERROR: No se pudo sustituir la cobertura del vendedor {vendor_id}")
        raise
    return await get_coverage_areas(db, vendor_id)


async def delete_coverage_areas(db: AsyncSession, vendor_id: str) -> int:
    result = await db.execute(delete(VendorCoverageArea).where(VendorCoverageArea.vendor_id == vendor_id))
    await db.commit()
    return result.rowcount
