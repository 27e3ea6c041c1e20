# backend/indovendor/schemas/vendor_schema.py
"""
Esquemas Pydantic del vendedor: perfil de negocio, áreas de cobertura,
documentos y verificación.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from indovendor.db.models.vendor_model import VerificationStatus


class VendorSummary(BaseModel):
    """Datos mínimos del vendedor para anidar en productos y usuarios."""
    id: str
    business_name: str
    verification_status: VerificationStatus
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# ========================================
# PERFIL DE NEGOCIO
# ========================================

class VendorProfileResponse(VendorSummary):
    user_id: str
    business_type: Optional[str] = None
    description: Optional[str] = None
    coverage_radius: Optional[int] = None
    transport_fee_info: Optional[str] = None
    verification_notes: Optional[str] = None
    website: Optional[str] = None
    whatsapp_number: Optional[str] = None
    established_year: Optional[int] = None
    team_size: Optional[str] = None
    minimum_budget: Optional[float] = None
    business_address: Optional[str] = None
    specializations: Optional[List[str]] = None
    working_hours: Optional[str] = None
    business_license: Optional[str] = None
    tax_id_document: Optional[str] = None
    portfolio_images: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime


class VendorProfileUpdate(BaseModel):
    """Actualización parcial; los rangos se validan en VendorService."""
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    description: Optional[str] = None
    coverage_radius: Optional[int] = None
    transport_fee_info: Optional[str] = None
    website: Optional[str] = None
    whatsapp_number: Optional[str] = None
    established_year: Optional[int] = None
    team_size: Optional[str] = None
    minimum_budget: Optional[float] = None
    business_address: Optional[str] = None
    specializations: Optional[List[str]] = None
    working_hours: Optional[str] = None


# ========================================
# ÁREAS DE COBERTURA
# ========================================

class CoverageAreaIn(BaseModel):
    province_id: Optional[str] = None
    regency_id: Optional[str] = None
    district_id: Optional[str] = None
    custom_radius: Optional[float] = None


class CoverageUpdateRequest(BaseModel):
    coverage_areas: List[CoverageAreaIn]


class CoverageAreaResponse(BaseModel):
    id: str
    vendor_id: str
    province_id: str
    regency_id: Optional[str] = None
    district_id: Optional[str] = None
    custom_radius: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CoverageResponse(BaseModel):
    coverage_areas: List[CoverageAreaResponse]
    coverage_score: float


# ========================================
# DOCUMENTOS Y VERIFICACIÓN
# ========================================

class DocumentUploadResponse(BaseModel):
    file_url: str


class PortfolioUploadResponse(BaseModel):
    image_urls: List[str]


class VerificationUpdate(BaseModel):
    status: VerificationStatus
    notes: Optional[str] = Field(default=None, max_length=1000)


class VerificationResponse(BaseModel):
    vendor_id: str
    verification_status: VerificationStatus
    verification_notes: Optional[str] = None
