# backend/indovendor/services/region_service.py
"""
Cliente de la API pública de regiones administrativas de Indonesia
(emsifa api-wilayah-indonesia).

Se usa tanto para exponer los selectores de dirección del perfil como para
validar las áreas de cobertura de los vendedores.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from starlette import status

from indovendor.core.config import settings
from indovendor.core.exceptions import ApiError
from indovendor.schemas.region_schema import Region

logger = logging.getLogger(__name__)


class RegionService:
    """
    Acceso a provincias, regencias, distritos y aldeas.

    Cada nivel se consulta por el ID de su padre:
    - provinces.json
    - regencies/{province_id}.json
    - districts/{regency_id}.json
    - villages/{district_id}.json
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Permite inyectar un transporte alternativo (p. ej. httpx.MockTransport)
        self.transport = transport

    def _get_api_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=settings.REGION_API_BASE_URL,
            timeout=settings.REGION_API_TIMEOUT,
            transport=self.transport,
        )

    async def _fetch(self, path: str, label: str) -> List[Dict[str, Any]]:
        try:
            async with self._get_api_client() as client:
                response = await client.get(path)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ REGIONES: HTTP {e.response.status_code} al obtener {path}")
            raise ApiError(
                status.HTTP_502_BAD_GATEWAY,
                f"Failed to fetch {label}: HTTP error! status: {e.response.status_code}",
                code="REGION_API_ERROR",
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ REGIONES: Error de red al obtener {path}: {e}")
            raise ApiError(
                status.HTTP_502_BAD_GATEWAY,
                f"Failed to fetch {label}: {e}",
                code="REGION_API_ERROR",
            )

    # ========================================
    # CONSULTAS POR NIVEL
    # ========================================

    async def get_provinces(self) -> List[Region]:
        data = await self._fetch("/provinces.json", "provinces")
        return [Region(id=p["id"], name=p["name"], code=p["id"]) for p in data]

    async def get_regencies(self, province_id: str) -> List[Region]:
        data = await self._fetch(f"/regencies/{province_id}.json", "regencies")
        return [Region(id=r["id"], name=r["name"], code=r["id"], province_id=province_id) for r in data]

    async def get_districts(self, regency_id: str) -> List[Region]:
        data = await self._fetch(f"/districts/{regency_id}.json", "districts")
        return [Region(id=d["id"], name=d["name"], code=d["id"], regency_id=regency_id) for d in data]

    async def get_villages(self, district_id: str) -> List[Region]:
        data = await self._fetch(f"/villages/{district_id}.json", "villages")
        return [Region(id=v["id"], name=v["name"], code=v["id"], district_id=district_id) for v in data]

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

region_service = RegionService()
