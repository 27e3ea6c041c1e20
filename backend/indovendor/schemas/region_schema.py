# backend/indovendor/schemas/region_schema.py
"""Regiones administrativas de Indonesia (provincia > regencia > distrito > aldea)."""

from typing import Optional
from pydantic import BaseModel


class Region(BaseModel):
    id: str
    name: str
    code: str
    province_id: Optional[str] = None
    regency_id: Optional[str] = None
    district_id: Optional[str] = None
