# backend/indovendor/services/vendor_service.py
"""
Servicio del perfil de negocio del vendedor.

Incluye la actualización validada de la ficha, la subida de documentos
(licencia, NPWP y portfolio) y el flujo de verificación:

- El vendedor solicita la verificación (pasa a PENDING)
- Un SUPERADMIN la resuelve como VERIFIED o REJECTED con notas
"""

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.exceptions import ApiError, validation_error
from indovendor.crud import vendor_crud
from indovendor.db.models.vendor_model import Vendor, VerificationStatus
from indovendor.schemas.vendor_schema import VendorProfileUpdate
from indovendor.services.file_storage_service import (
    DOCUMENT_RULE,
    PORTFOLIO_RULE,
    FileStorageService,
    file_storage_service,
    random_suffix,
    timestamp_ms,
)

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^(\+62|62|0)8[1-9][0-9]{6,11}$")
MAX_PORTFOLIO_IMAGES = 10
MAX_COVERAGE_RADIUS_KM = 500
DOCUMENTS_DIR = "vendor-documents"


class VendorService:
    """
    Casos de uso del vendedor sobre su propia ficha.
    """

    def __init__(self, storage: FileStorageService):
        self.storage = storage

    # ========================================
    # PERFIL DE NEGOCIO
    # ========================================

    def _validate_profile(self, data: Dict[str, Any]) -> None:
        errors: List[str] = []

        if "business_name" in data:
            name = (data["business_name"] or "").strip()
            if not 2 <= len(name) <= 100:
                errors.append("Business name must be between 2 and 100 characters")

        whatsapp = data.get("whatsapp_number")
        if whatsapp and not PHONE_RE.match(whatsapp):
            errors.append("Invalid WhatsApp number format")

        year = data.get("established_year")
        if year is not None and not 1900 <= year <= date.today().year:
            errors.append("Invalid established year")

        budget = data.get("minimum_budget")
        if budget is not None and budget < 0:
            errors.append("Minimum budget cannot be negative")

        radius = data.get("coverage_radius")
        if radius is not None and not 0 <= radius <= MAX_COVERAGE_RADIUS_KM:
            errors.append(f"Coverage radius must be between 0 and {MAX_COVERAGE_RADIUS_KM} km")

        if errors:
            raise validation_error(errors)

    async def update_profile(self, db: AsyncSession, vendor: Vendor, profile_in: VendorProfileUpdate) -> Vendor:
        data = profile_in.model_dump(exclude_unset=True)
        if not data:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "No update data provided", code="NO_UPDATE_DATA")

        self._validate_profile(data)
        if data.get("business_name"):
            data["business_name"] = data["business_name"].strip()
        if "specializations" in data and data["specializations"] is not None:
            data["specializations"] = list(data["specializations"])

        updated = await vendor_crud.update_vendor(db, vendor, data)
        logger.info(f"🏢 VENDEDOR: Perfil {vendor.id} actualizado ({', '.join(data)})")
        return updated

    # ========================================
    # DOCUMENTOS
    # ========================================

    async def _upload_document(
        self,
        db: AsyncSession,
        vendor: Vendor,
        file: Optional[UploadFile],
        subdir: str,
        prefix: str,
        field: str,
    ) -> str:
        if file is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

        stem = f"{prefix}-{vendor.id}-{timestamp_ms()}-{random_suffix()}"
        url = await self.storage.save(file, f"{DOCUMENTS_DIR}/{subdir}", stem, DOCUMENT_RULE)
        previous = getattr(vendor, field)
        await vendor_crud.update_vendor(db, vendor, {field: url})
        if previous and previous != url:
            self.storage.delete(previous)
        return url

    async def upload_business_license(self, db: AsyncSession, vendor: Vendor, file: Optional[UploadFile]) -> str:
        return await self._upload_document(db, vendor, file, "business-licenses", "license", "business_license")

    async def upload_tax_id(self, db: AsyncSession, vendor: Vendor, file: Optional[UploadFile]) -> str:
        return await self._upload_document(db, vendor, file, "tax-ids", "taxid", "tax_id_document")

    async def upload_portfolio(self, db: AsyncSession, vendor: Vendor, files: Optional[List[UploadFile]]) -> List[str]:
        """
        Sustituye el portfolio por las imágenes subidas (1 a 10).

        Si alguna imagen no es válida no se conserva ninguna de las nuevas.
        """
        if not files:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")
        if len(files) > MAX_PORTFOLIO_IMAGES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {MAX_PORTFOLIO_IMAGES} portfolio images allowed",
            )

        urls: List[str] = []
        try:
            for file in files:
                stem = f"portfolio-{vendor.id}-{timestamp_ms()}-{random_suffix()}"
                urls.append(await self.storage.save(file, f"{DOCUMENTS_DIR}/portfolio", stem, PORTFOLIO_RULE))
        except ApiError:
            for url in urls:
                self.storage.delete(url)
            raise

        previous = list(vendor.portfolio_images or [])
        await vendor_crud.update_vendor(db, vendor, {"portfolio_images": urls})
        for url in previous:
            self.storage.delete(url)
        logger.info(f"🖼️ VENDEDOR: Portfolio de {vendor.id} con {len(urls)} imágenes")
        return urls

    # ========================================
    # VERIFICACIÓN
    # ========================================

    async def submit_verification(self, db: AsyncSession, vendor: Vendor) -> Vendor:
        updated = await vendor_crud.update_vendor(
            db, vendor, {"verification_status": VerificationStatus.PENDING, "verification_notes": None}
        )
        logger.info(f"📨 VENDEDOR: {vendor.id} solicita verificación")
        return updated

    async def update_verification(
        self,
        db: AsyncSession,
        vendor_id: str,
        verification_status: VerificationStatus,
        notes: Optional[str] = None,
    ) -> Vendor:
        vendor = await vendor_crud.get_vendor(db, vendor_id)
        if not vendor:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")

        updated = await vendor_crud.update_vendor(
            db, vendor, {"verification_status": verification_status, "verification_notes": notes}
        )
        logger.info(f"✅ VENDEDOR: {vendor_id} marcado como {verification_status.value}")
        return updated

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

vendor_service = VendorService(file_storage_service)
