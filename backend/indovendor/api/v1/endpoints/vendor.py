"""
Endpoints REST del vendedor: cobertura geográfica, perfil de negocio,
documentos y verificación.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from indovendor.api import deps
from indovendor.core.permissions import Permission
from indovendor.db.models.user_model import User
from indovendor.db.models.vendor_model import Vendor
from indovendor.schemas import vendor_schema
from indovendor.schemas.common_schema import ApiResponse, ok
from indovendor.services.coverage_service import coverage_service
from indovendor.services.vendor_service import vendor_service

router = APIRouter()


def _coverage(result) -> dict:
    return vendor_schema.CoverageResponse.model_validate(result, from_attributes=True).model_dump()


def _verification(vendor: Vendor) -> dict:
    return {
        "vendor_id": vendor.id,
        "verification_status": vendor.verification_status,
        "verification_notes": vendor.verification_notes,
    }

# ========================================
# COBERTURA
# ========================================

@router.get("/coverage", response_model=ApiResponse[vendor_schema.CoverageResponse])
async def read_coverage(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    result = await coverage_service.get_coverage(db, vendor.id)
    return ok("Coverage areas retrieved successfully", _coverage(result))


@router.put("/coverage", response_model=ApiResponse[vendor_schema.CoverageResponse])
async def update_coverage(
    *,
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: vendor_schema.CoverageUpdateRequest,
):
    """Sustituye todas las áreas de cobertura tras validarlas contra la API de regiones."""
    result = await coverage_service.update_coverage(db, vendor.id, data.coverage_areas)
    return ok("Coverage areas updated successfully", _coverage(result))


@router.delete("/coverage", response_model=ApiResponse[None])
async def delete_coverage(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    await coverage_service.remove_coverage(db, vendor.id)
    return ok("Coverage areas removed successfully")

# ========================================
# PERFIL DE NEGOCIO
# ========================================

@router.get("/profile", response_model=ApiResponse[vendor_schema.VendorProfileResponse])
async def read_business_profile(vendor: Vendor = Depends(deps.get_current_vendor)):
    return ok(
        "Vendor profile retrieved successfully",
        vendor_schema.VendorProfileResponse.model_validate(vendor).model_dump(),
    )


@router.put("/profile", response_model=ApiResponse[vendor_schema.VendorProfileResponse])
async def update_business_profile(
    *,
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    data: vendor_schema.VendorProfileUpdate,
):
    updated = await vendor_service.update_profile(db, vendor, data)
    return ok(
        "Vendor profile updated successfully",
        vendor_schema.VendorProfileResponse.model_validate(updated).model_dump(),
    )

# ========================================
# DOCUMENTOS
# ========================================

@router.post("/documents/business-license", response_model=ApiResponse[vendor_schema.DocumentUploadResponse])
async def upload_business_license(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    business_license: Optional[UploadFile] = File(None),
):
    url = await vendor_service.upload_business_license(db, vendor, business_license)
    return ok("Business license uploaded successfully", {"file_url": url})


@router.post("/documents/tax-id", response_model=ApiResponse[vendor_schema.DocumentUploadResponse])
async def upload_tax_id(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    tax_id: Optional[UploadFile] = File(None),
):
    url = await vendor_service.upload_tax_id(db, vendor, tax_id)
    return ok("Tax ID document uploaded successfully", {"file_url": url})


@router.post("/documents/portfolio", response_model=ApiResponse[vendor_schema.PortfolioUploadResponse])
async def upload_portfolio(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
    portfolio_images: Optional[List[UploadFile]] = File(None),
):
    urls = await vendor_service.upload_portfolio(db, vendor, portfolio_images)
    return ok("Portfolio images uploaded successfully", {"image_urls": urls})

# ========================================
# VERIFICACIÓN
# ========================================

@router.post("/verification/submit", response_model=ApiResponse[vendor_schema.VerificationResponse])
async def submit_verification(
    db: AsyncSession = Depends(deps.get_db),
    vendor: Vendor = Depends(deps.get_current_vendor),
):
    updated = await vendor_service.submit_verification(db, vendor)
    return ok("Verification request submitted successfully", _verification(updated))


@router.put("/{vendor_id}/verification", response_model=ApiResponse[vendor_schema.VerificationResponse])
async def update_verification(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_superadmin),
    permitted_user: User = Depends(deps.require_permission(Permission.USER_VERIFY)),
    vendor_id: str,
    data: vendor_schema.VerificationUpdate,
):
    """Resuelve la verificación de un vendedor (solo SUPERADMIN)."""
    updated = await vendor_service.update_verification(db, vendor_id, data.status, data.notes)
    return ok("Vendor verification updated successfully", _verification(updated))
