# backend/indovendor/crud/category_crud.py

"""
Operaciones CRUD para el modelo Category.

Este módulo implementa las operaciones de Create, Read, Update, Delete para categorías,
proporcionando una capa de abstracción entre los endpoints de la API y la base de datos.

Funcionalidades principales:
- Consultas por ID, slug y lista de IDs
- Listados ordenados por nombre (todas o solo activas)
- Conteo de productos asociados antes de eliminar
"""

from typing import List, Optional, Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from indovendor.db.models.category_model import Category
from indovendor.db.models.product_model import Product
from indovendor.schemas import category_schema

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_category(db: AsyncSession, category_id: str) -> Optional[Category]:
    """
    Obtiene una categoría por su ID.

    Args:
        db: Sesión de SQLAlchemy
        category_id: ID único de la categoría

    Returns:
        Objeto Category si existe, None si no se encuentra
    """
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalars().first()


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    """
    Obtiene una categoría por su slug.

    El slug es único en toda la tabla; esta consulta se usa para detectar
    duplicados antes de crear o renombrar una categoría.
    """
    result = await db.execute(select(Category).filter(Category.slug == slug))
    return result.scalars().first()


async def get_categories(db: AsyncSession, active_only: bool = False) -> List[Category]:
    """
    Obtiene todas las categorías ordenadas alfabéticamente.

    Args:
        db: Sesión de SQLAlchemy
        active_only: Si es True, excluye las categorías desactivadas
    """
    query = select(Category)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    result = await db.execute(query.order_by(Category.name))
    return list(result.scalars().all())


async def get_categories_by_ids(db: AsyncSession, category_ids: Sequence[str]) -> List[Category]:
    if not category_ids:
        return []
    result = await db.execute(select(Category).filter(Category.id.in_(list(category_ids))))
    return list(result.scalars().all())


async def count_products_in_category(db: AsyncSession, category_id: str) -> int:
    result = await db.execute(
        select(func.count(Product.id)).filter(Product.category_id == category_id)
    )
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_category(db: AsyncSession, category: category_schema.CategoryCreate, slug: str) -> Category:
    """
    Crea una nueva categoría con el slug ya resuelto por el servicio.
    """
    db_category = Category(
        name=category.name,
        slug=slug,
        description=category.description,
        icon=category.icon,
        is_active=category.is_active,
    )
    db.add(db_category)
    await db.commit()
    await db.refresh(db_category)
    return db_category


async def update_category(db: AsyncSession, db_category: Category, category_update: category_schema.CategoryUpdate) -> Category:
    """
    Actualiza una categoría existente aplicando solo los campos enviados.
    """
    update_data = category_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_category, field, value)

    await db.commit()
    await db.refresh(db_category)
    return db_category


async def delete_category(db: AsyncSession, db_category: Category) -> Category:
    """
    Elimina una categoría. Las asignaciones a vendedores se eliminan en cascada.
    """
    await db.delete(db_category)
    await db.commit()
    return db_category
