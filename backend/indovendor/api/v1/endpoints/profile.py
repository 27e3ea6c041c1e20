"""
Endpoints REST del perfil personal y de los selectores de regiones.
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from indovendor.api import deps
from indovendor.db.models.user_model import User
from indovendor.schemas import user_schema
from indovendor.schemas.common_schema import ApiResponse, ok
from indovendor.schemas.region_schema import Region
from indovendor.services.profile_service import calculate_profile_completeness, profile_service
from indovendor.services.region_service import region_service

router = APIRouter()


def _with_completeness(user: User) -> dict:
    return user_schema.UserWithCompleteness(
        **user_schema.UserResponse.model_validate(user).model_dump(),
        profile_completeness=calculate_profile_completeness(user),
    ).model_dump()

# ========================================
# PERFIL
# ========================================

@router.get("/", response_model=ApiResponse[user_schema.UserWithCompleteness])
async def read_profile(current_user: User = Depends(deps.get_current_user)):
    """Perfil del usuario autenticado con su porcentaje de completitud."""
    return ok("Profile retrieved successfully", _with_completeness(current_user))


@router.put("/", response_model=ApiResponse[user_schema.UserWithCompleteness])
async def update_profile(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    profile_in: user_schema.ProfileUpdate,
):
    user = await profile_service.update_profile(db, current_user, profile_in)
    return ok("Profile updated successfully", _with_completeness(user))


@router.post("/avatar", response_model=ApiResponse[user_schema.AvatarUploadResponse])
async def upload_avatar(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    avatar: UploadFile = File(...),
):
    url = await profile_service.upload_avatar(db, current_user, avatar)
    return ok("Avatar uploaded successfully", {"profile_picture": url})

# ========================================
# REGIONES (PÚBLICAS)
# ========================================

@router.get("/regions/provinces", response_model=ApiResponse[List[Region]])
async def read_provinces():
    provinces = await region_service.get_provinces()
    return ok("Provinces retrieved successfully", provinces)


@router.get("/regions/regencies/{province_id}", response_model=ApiResponse[List[Region]])
async def read_regencies(province_id: str):
    regencies = await region_service.get_regencies(province_id)
    return ok("Regencies retrieved successfully", regencies)


@router.get("/regions/districts/{regency_id}", response_model=ApiResponse[List[Region]])
async def read_districts(regency_id: str):
    districts = await region_service.get_districts(regency_id)
    return ok("Districts retrieved successfully", districts)


@router.get("/regions/villages/{district_id}", response_model=ApiResponse[List[Region]])
async def read_villages(district_id: str):
    villages = await region_service.get_villages(district_id)
    return ok("Villages retrieved successfully", villages)
