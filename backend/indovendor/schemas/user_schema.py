# backend/indovendor/schemas/user_schema.py
"""
Esquemas de usuario y de perfil personal.
"""

from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from indovendor.core.permissions import UserRole
from .vendor_schema import VendorSummary


class UserProfileResponse(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    province_id: Optional[str] = None
    regency_id: Optional[str] = None
    district_id: Optional[str] = None
    village_id: Optional[str] = None
    full_address: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Usuario sin datos sensibles, con perfil y vendedor si existen."""
    id: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_verified: bool
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    profile: Optional[UserProfileResponse] = None
    vendor: Optional[VendorSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileCompleteness(BaseModel):
    percentage: int
    missing_fields: List[str]


class UserWithCompleteness(UserResponse):
    profile_completeness: ProfileCompleteness


class ProfileUpdate(BaseModel):
    """Todos los campos son opcionales; las reglas se aplican en ProfileService."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    province_id: Optional[str] = None
    regency_id: Optional[str] = None
    district_id: Optional[str] = None
    village_id: Optional[str] = None
    full_address: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None


class AvatarUploadResponse(BaseModel):
    profile_picture: str
