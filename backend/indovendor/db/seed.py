# backend/indovendor/db/seed.py

"""
Script de carga de datos iniciales.

Crea el catálogo de categorías de servicios, un usuario de cada rol y un
vendedor de ejemplo con dos productos. Si el administrador ya existe no hace
nada, por lo que se puede ejecutar varias veces.

Uso:
    python -m indovendor.db.seed
"""

import asyncio
import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from indovendor.core.config import settings
from indovendor.core.passwords import hash_password
from indovendor.core.permissions import UserRole
from indovendor.crud import category_crud, product_crud, user_crud, vendor_crud
from indovendor.db.database import AsyncSessionLocal, init_db
from indovendor.db.models.category_model import Category
from indovendor.db.models.vendor_model import VerificationStatus
from indovendor.schemas.category_schema import CategoryCreate

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@indovendor.com"

CATEGORIES = [
    ("Wedding Organizer", "wedding-organizer", "Complete wedding planning and coordination services", "💒"),
    ("Event Organizer", "event-organizer", "Corporate and private event planning", "🎉"),
    ("Catering", "catering", "Food and beverage services for events", "🍽️"),
    ("Photography", "photography", "Professional photo and video documentation", "📸"),
    ("Decoration", "decoration", "Venue decoration and floral arrangements", "🎨"),
    ("Entertainment", "entertainment", "Music, MC, and performers", "🎵"),
    ("Venue", "venue", "Event and wedding venues", "🏛️"),
    ("Transportation", "transportation", "Wedding cars and guest transportation", "🚗"),
]

PRODUCTS = [
    {
        "category": "wedding-organizer",
        "name": "Complete Wedding Package - Premium",
        "description": "Full wedding organization from planning to the wedding day, including coordination team, "
                       "vendor management and rundown.",
        "base_price": 50000000,
        "unit_type": "package",
        "min_order": 1,
        "max_order": 1,
        "discount_percentage": 10,
        "specifications": "Coordination team of 10 people, 3 planning meetings, rundown and technical meeting",
        "terms_conditions": "50% down payment on booking, balance due 2 weeks before the event",
    },
    {
        "category": "decoration",
        "name": "Elegant Wedding Decoration",
        "description": "Elegant decoration for the wedding reception: stage, entrance gate and photo booth.",
        "base_price": 15000000,
        "unit_type": "package",
        "min_order": 1,
        "max_order": 3,
        "discount_percentage": 5,
        "specifications": "Main stage 8x4m, fresh flowers, entrance gate, photo booth",
        "terms_conditions": "Setup is done one day before the event",
    },
]


async def _seed_categories(db: AsyncSession) -> Dict[str, Category]:
    categories: Dict[str, Category] = {}
    for name, slug, description, icon in CATEGORIES:
        category = await category_crud.get_category_by_slug(db, slug)
        if category is None:
            category = await category_crud.create_category(
                db,
                CategoryCreate(name=name, description=description, icon=icon),
                slug=slug,
            )
            logger.info(f"🌱 SEED: Categoría '{name}' creada")
        categories[slug] = category
    return categories


async def seed_database(db: AsyncSession) -> bool:
    """
    Carga los datos iniciales.

    Returns:
        False si la base de datos ya estaba sembrada, True en caso contrario
    """
    if await user_crud.get_user_by_email(db, ADMIN_EMAIL):
        logger.info("ℹ️ SEED: El administrador ya existe, no se siembra de nuevo")
        return False

    categories = await _seed_categories(db)

    await user_crud.create_user(
        db,
        email=ADMIN_EMAIL,
        password_hash=hash_password("admin123"),
        role=UserRole.SUPERADMIN,
        first_name="Super",
        last_name="Admin",
        is_verified=True,
    )

    vendor_user = await user_crud.create_user(
        db,
        email="vendor@indovendor.com",
        password_hash=hash_password("vendor123"),
        role=UserRole.VENDOR,
        phone="081234567890",
        first_name="Budi",
        last_name="Santoso",
        business_name="Elegant Weddings Jakarta",
        is_verified=True,
    )
    vendor = await vendor_crud.update_vendor(
        db,
        vendor_user.vendor,
        {
            "business_type": "Wedding Organizer",
            "description": "Premium wedding organizer in Jakarta with more than 10 years of experience",
            "coverage_radius": 50,
            "verification_status": VerificationStatus.VERIFIED,
        },
    )
    await vendor_crud.replace_vendor_categories(
        db, vendor.id, [categories["wedding-organizer"].id, categories["decoration"].id]
    )

    for product in PRODUCTS:
        data = {k: v for k, v in product.items() if k != "category"}
        await product_crud.create_product(
            db, vendor.id, {**data, "category_id": categories[product["category"]].id}
        )

    await user_crud.create_user(
        db,
        email="client@indovendor.com",
        password_hash=hash_password("client123"),
        role=UserRole.CLIENT,
        phone="081298765432",
        first_name="Siti",
        last_name="Rahayu",
        is_verified=True,
    )

    logger.info("✅ SEED: Datos iniciales cargados")
    return True


async def main() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        await seed_database(db)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    asyncio.run(main())
