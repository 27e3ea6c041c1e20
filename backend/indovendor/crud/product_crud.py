# backend/indovendor/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Toda consulta que devuelve productos para serializarlos precarga la categoría
y el vendedor. Las búsquedas públicas se restringen a productos activos de
vendedores activos.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from indovendor.db.models.product_model import Product, FeaturedProduct
from indovendor.db.models.vendor_model import Vendor
from indovendor.schemas.product_schema import ProductFilters

import logging

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "name": Product.name,
    "base_price": Product.base_price,
    "created_at": Product.created_at,
}

# ========================================
# CONSTRUCCIÓN DE CONSULTAS
# ========================================

def _product_query():
    return (
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.vendor))
        .execution_options(populate_existing=True)
    )


def _public(query):
    """Limita una consulta a productos activos de vendedores activos."""
    return (
        query.join(Vendor, Product.vendor_id == Vendor.id)
        .filter(Product.is_active.is_(True), Vendor.is_active.is_(True))
    )


def _apply_filters(query, filters: ProductFilters):
    if filters.category_id:
        query = query.filter(Product.category_id == filters.category_id)
    if filters.vendor_id:
        query = query.filter(Product.vendor_id == filters.vendor_id)
    if filters.min_price is not None:
        query = query.filter(Product.base_price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Product.base_price <= filters.max_price)
    if filters.is_active is not None:
        query = query.filter(Product.is_active == filters.is_active)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
    return query


def _apply_sort(query, filters: ProductFilters):
    column = _SORT_COLUMNS[filters.sort_by]
    return query.order_by(column.asc() if filters.sort_order == "asc" else column.desc(), Product.id)


# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    """Obtiene un producto por ID con categoría y vendedor precargados."""
    result = await db.execute(_product_query().filter(Product.id == product_id))
    return result.scalars().first()


async def get_products_by_ids(db: AsyncSession, product_ids: Sequence[str]) -> List[Product]:
    if not product_ids:
        return []
    result = await db.execute(_product_query().filter(Product.id.in_(list(product_ids))))
    return list(result.scalars().all())


async def get_products(
    db: AsyncSession,
    filters: ProductFilters,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Product], int]:
    """
    Obtiene una lista filtrada, ordenada y paginada de productos junto con
    el total de coincidencias.
    """
    count_query = _apply_filters(select(func.count(Product.id)), filters)
    total = (await db.execute(count_query)).scalar_one()

    query = _apply_sort(_apply_filters(_product_query(), filters), filters)
    result = await db.execute(query.offset(offset).limit(limit))
    return list(result.scalars().all()), total


async def get_products_page(db: AsyncSession, filters: ProductFilters, limit: int, offset: int) -> List[Product]:
    """Página de productos públicos sin calcular el total."""
    query = _apply_sort(_apply_filters(_public(_product_query()), filters), filters)
    result = await db.execute(query.offset(offset).limit(limit))
    return list(result.scalars().all())


async def search_products(db: AsyncSession, term: str, limit: int = 50) -> List[Product]:
    """
    Busca el término en nombre, descripción y especificaciones de los
    productos públicos.
    """
    pattern = f"%{term}%"
    query = _public(_product_query()).filter(
        or_(
            Product.name.ilike(pattern),
            Product.description.ilike(pattern),
            Product.specifications.ilike(pattern),
        )
    )
    result = await db.execute(query.order_by(Product.created_at.desc()).limit(limit))
    products = list(result.scalars().all())
    logger.info(f"Búsqueda por término '{term}' encontró {len(products)} productos.")
    return products


async def get_featured_products(db: AsyncSession, limit: int = 10) -> List[Product]:
    """Productos con un periodo destacado pagado que incluye el momento actual."""
    now = datetime.now(timezone.utc)
    featured_ids = (
        select(FeaturedProduct.product_id)
        .filter(
            FeaturedProduct.payment_status == "PAID",
            FeaturedProduct.start_date <= now,
            FeaturedProduct.end_date >= now,
        )
    )
    query = _public(_product_query()).filter(Product.id.in_(featured_ids))
    result = await db.execute(query.order_by(Product.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def get_recent_public_products(db: AsyncSession, limit: int = 10) -> List[Product]:
    result = await db.execute(
        _public(_product_query()).order_by(Product.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_products_by_category(db: AsyncSession, category_id: str) -> List[Product]:
    result = await db.execute(
        _public(_product_query())
        .filter(Product.category_id == category_id)
        .order_by(Product.created_at.desc())
    )
    return list(result.scalars().all())


async def get_similar_products(db: AsyncSession, product: Product, limit: int = 5) -> List[Product]:
    result = await db.execute(
        _public(_product_query())
        .filter(Product.category_id == product.category_id, Product.id != product.id)
        .order_by(Product.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_products_by_vendor(db: AsyncSession, vendor_id: str) -> List[Product]:
    """Todos los productos de un vendedor, activos o no."""
    result = await db.execute(
        _product_query().filter(Product.vendor_id == vendor_id).order_by(Product.created_at.desc())
    )
    return list(result.scalars().all())


async def get_vendor_product_stats(db: AsyncSession, vendor_id: str) -> Dict[str, int]:
    total = (await db.execute(
        select(func.count(Product.id)).filter(Product.vendor_id == vendor_id)
    )).scalar_one()
    active = (await db.execute(
        select(func.count(Product.id)).filter(Product.vendor_id == vendor_id, Product.is_active.is_(True))
    )).scalar_one()
    return {"total_products": total, "active_products": active, "inactive_products": total - active}


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, vendor_id: str, data: Dict[str, Any]) -> Product:
    """Crea un nuevo producto y lo devuelve con sus relaciones cargadas."""
    db_product = Product(vendor_id=vendor_id, images=[], **data)
    db.add(db_product)
    await db.commit()
    return await get_product(db, db_product.id)


async def update_product(db: AsyncSession, db_product: Product, data: Dict[str, Any]) -> Product:
    """Actualiza un producto existente con los campos indicados."""
    for key, value in data.items():
        setattr(db_product, key, value)
    await db.commit()
    return await get_product(db, db_product.id)


async def set_product_images(db: AsyncSession, db_product: Product, images: List[Dict[str, Any]]) -> Product:
    """Sustituye la lista de imágenes (se asigna una lista nueva para que SQLAlchemy detecte el cambio)."""
    db_product.images = [dict(img) for img in images]
    await db.commit()
    return await get_product(db, db_product.id)


async def delete_product(db: AsyncSession, db_product: Product) -> Product:
    await db.delete(db_product)
    await db.commit()
    return db_product


async def bulk_update_status(db: AsyncSession, product_ids: Sequence[str], is_active: bool) -> int:
    result = await db.execute(
        update(Product)
        .where(Product.id.in_(list(product_ids)))
        .values(is_active=is_active, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount


async def bulk_delete(db: AsyncSession, products: Sequence[Product]) -> int:
    for db_product in products:
        await db.delete(db_product)
    await db.commit()
    return len(products)


async def add_featured_period(
    db: AsyncSession,
    product_id: str,
    start_date: datetime,
    end_date: datetime,
    payment_status: str = "PENDING",
) -> FeaturedProduct:
    entry = FeaturedProduct(
        product_id=product_id,
        start_date=start_date,
        end_date=end_date,
        payment_status=payment_status,
    )
    db.add(entry)
    await db.commit()
    return entry
