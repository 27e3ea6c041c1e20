# backend/indovendor/services/coverage_service.py
"""
Servicio de áreas de cobertura de los vendedores.

Un área de cobertura declara una provincia y, opcionalmente, una regencia y
un distrito dentro de ella, más un radio propio en km. Antes de guardar se
comprueba la jerarquía contra la API de regiones; la puntuación de cobertura
premia las áreas más concretas y los radios amplios.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from indovendor.core.exceptions import ApiError
from indovendor.crud import vendor_crud
from indovendor.db.models.vendor_model import VendorCoverageArea
from indovendor.schemas.vendor_schema import CoverageAreaIn
from indovendor.services.region_service import RegionService, region_service

logger = logging.getLogger(__name__)

MAX_COVERAGE_AREAS = 10
MAX_CUSTOM_RADIUS_KM = 200
MAX_COVERAGE_SCORE = 100
MAX_RADIUS_BONUS = 2
RADIUS_BONUS_STEP_KM = 50


def _get(area: Any, field: str) -> Any:
    if isinstance(area, dict):
        return area.get(field)
    return getattr(area, field, None)


def calculate_coverage_score(areas: Optional[Iterable[Any]]) -> float:
    """
    Puntuación de cobertura de un vendedor.

    Por área: 1 punto si solo hay provincia, 2 si hay regencia, 3 si hay
    distrito; más min(radio / 50, 2) si el radio es positivo. El total se
    limita a 100.
    """
    score = 0.0
    for area in areas or []:
        if not _get(area, "regency_id"):
            score += 1
        elif not _get(area, "district_id"):
            score += 2
        else:
            score += 3

        radius = _get(area, "custom_radius")
        if radius and radius > 0:
            score += min(radius / RADIUS_BONUS_STEP_KM, MAX_RADIUS_BONUS)

    return min(score, MAX_COVERAGE_SCORE)


class CoverageService:
    """
    Gestión de las áreas de cobertura con validación geográfica.
    """

    def __init__(self, regions: RegionService):
        self.regions = regions

    def _bad_request(self, message: str) -> ApiError:
        return ApiError(status.HTTP_400_BAD_REQUEST, message, code="INVALID_COVERAGE_AREA")

    async def validate_areas(self, areas: List[CoverageAreaIn]) -> None:
        """
        Valida cada área en orden y se detiene en el primer error.

        - La provincia es obligatoria y debe existir
        - La regencia, si se indica, debe pertenecer a la provincia
        - El distrito, si se indica junto a la regencia, debe pertenecer a ella
        - El radio propio debe estar entre 0 y 200 km
        """
        if len(areas) > MAX_COVERAGE_AREAS:
            raise self._bad_request(f"Maximum {MAX_COVERAGE_AREAS} coverage areas allowed")

        provinces = None
        for area in areas:
            if not area.province_id:
                raise self._bad_request("Province ID is required for coverage area")

            if provinces is None:
                provinces = {p.id for p in await self.regions.get_provinces()}
            if area.province_id not in provinces:
                raise self._bad_request(f"Province {area.province_id} not found")

            if area.regency_id:
                regencies = {r.id for r in await self.regions.get_regencies(area.province_id)}
                if area.regency_id not in regencies:
                    raise self._bad_request(
                        f"Regency {area.regency_id} not found in province {area.province_id}"
                    )

            if area.district_id and area.regency_id:
                districts = {d.id for d in await self.regions.get_districts(area.regency_id)}
                if area.district_id not in districts:
                    raise self._bad_request(
                        f"District {area.district_id} not found in regency {area.regency_id}"
                    )

            if area.custom_radius is not None and not 0 <= area.custom_radius <= MAX_CUSTOM_RADIUS_KM:
                raise self._bad_request(f"Custom radius must be between 0 and {MAX_CUSTOM_RADIUS_KM} km")

    # ========================================
    # OPERACIONES
    # ========================================

    async def get_coverage(self, db: AsyncSession, vendor_id: str) -> Dict[str, Any]:
        areas = await vendor_crud.get_coverage_areas(db, vendor_id)
        return {"coverage_areas": areas, "coverage_score": calculate_coverage_score(areas)}

    async def update_coverage(self, db: AsyncSession, vendor_id: str, areas: List[CoverageAreaIn]) -> Dict[str, Any]:
        """Valida y sustituye todas las áreas de cobertura del vendedor."""
        await self.validate_areas(areas)

        rows = [
            {
                "province_id": area.province_id,
                "regency_id": area.regency_id or None,
                # Un distrito sin regencia no se puede ubicar en la jerarquía
                "district_id": (area.district_id or None) if area.regency_id else None,
                "custom_radius": area.custom_radius,
            }
            for area in areas
        ]
        saved: List[VendorCoverageArea] = await vendor_crud.replace_coverage_areas(db, vendor_id, rows)
        logger.info(f"🗺️ COBERTURA: Vendedor {vendor_id} ahora cubre {len(saved)} áreas")
        return {"coverage_areas": saved, "coverage_score": calculate_coverage_score(saved)}

    async def remove_coverage(self, db: AsyncSession, vendor_id: str) -> int:
        removed = await vendor_crud.delete_coverage_areas(db, vendor_id)
        logger.info(f"🗑️ COBERTURA: Eliminadas {removed} áreas del vendedor {vendor_id}")
        return removed

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

coverage_service = CoverageService(region_service)
