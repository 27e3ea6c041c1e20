# backend/indovendor/crud/user_crud.py

"""
Operaciones CRUD para usuarios y perfiles personales.

Las consultas que devuelven un usuario para serializarlo precargan siempre
el perfil y el vendedor (selectinload), ya que la sesión es asíncrona y no
admite cargas perezosas fuera de las operaciones de la propia sesión.
"""

from typing import Any, Dict, Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from indovendor.core.permissions import UserRole
from indovendor.db.models.user_model import User, UserProfile
from indovendor.db.models.vendor_model import Vendor

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

def _user_query():
    return (
        select(User)
        .options(selectinload(User.profile), selectinload(User.vendor))
        .execution_options(populate_existing=True)
    )


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    """Obtiene un usuario por ID con perfil y vendedor precargados."""
    result = await db.execute(_user_query().filter(User.id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(_user_query().filter(User.email == email))
    return result.scalars().first()


async def get_user_by_email_or_phone(db: AsyncSession, email: str, phone: Optional[str]) -> Optional[User]:
    """Busca un usuario que ya use el email o el teléfono indicados."""
    conditions = [User.email == email]
    if phone:
        conditions.append(User.phone == phone)
    result = await db.execute(select(User).filter(or_(*conditions)))
    return result.scalars().first()


async def get_profile(db: AsyncSession, user_id: str) -> Optional[UserProfile]:
    result = await db.execute(select(UserProfile).filter(UserProfile.user_id == user_id))
    return result.scalars().first()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE)
# ========================================

async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password_hash: str,
    role: UserRole,
    phone: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    business_name: Optional[str] = None,
    is_verified: bool = False,
) -> User:
    """
    Crea el usuario junto con su perfil y, para vendedores, su ficha de negocio.

    Todo se confirma en un único commit.
    """
    db_user = User(
        email=email,
        password_hash=password_hash,
        phone=phone,
        role=role,
        is_verified=is_verified,
    )
    db_user.profile = UserProfile(first_name=first_name, last_name=last_name)
    if role == UserRole.VENDOR:
        db_user.vendor = Vendor(business_name=business_name or "New Business")

    db.add(db_user)
    await db.commit()
    return await get_user(db, db_user.id)


async def update_password(db: AsyncSession, db_user: User, password_hash: str) -> User:
    db_user.password_hash = password_hash
    await db.commit()
    return db_user


async def update_profile_picture(db: AsyncSession, db_user: User, url: Optional[str]) -> User:
    db_user.profile_picture = url
    await db.commit()
    return db_user


async def upsert_profile(db: AsyncSession, user_id: str, data: Dict[str, Any]) -> UserProfile:
    """Actualiza el perfil del usuario, creándolo si todavía no existe."""
    profile = await get_profile(db, user_id)
    if profile is None:
        profile = UserProfile(user_id=user_id)
        db.add(profile)

    for field, value in data.items():
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile
