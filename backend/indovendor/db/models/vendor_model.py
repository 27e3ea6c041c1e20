# backend/indovendor/db/models/vendor_model.py
"""
Modelos del vendedor: perfil de negocio, categorías asignadas y áreas de
cobertura geográfica.
"""

import enum

from sqlalchemy import Column, String, ForeignKey, Text, Boolean, DateTime, Integer, Float, Numeric, Enum, UniqueConstraint
from sqlalchemy.orm import relationship

from indovendor.db.database import Base, JSONType, generate_uuid, utcnow


class VerificationStatus(str, enum.Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    business_name = Column(String(100), nullable=False)
    business_type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    coverage_radius = Column(Integer, nullable=True)
    transport_fee_info = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    verification_status = Column(
        Enum(VerificationStatus, name="verification_status"),
        nullable=False,
        default=VerificationStatus.PENDING,
    )
    verification_notes = Column(Text, nullable=True)

    # Información extendida del negocio
    website = Column(String(255), nullable=True)
    whatsapp_number = Column(String(20), nullable=True)
    established_year = Column(Integer, nullable=True)
    team_size = Column(String(50), nullable=True)
    minimum_budget = Column(Numeric(15, 2), nullable=True)
    business_address = Column(Text, nullable=True)
    specializations = Column(JSONType, nullable=True)
    working_hours = Column(String(255), nullable=True)

    # Documentos (URLs bajo /uploads/vendor-documents)
    business_license = Column(Text, nullable=True)
    tax_id_document = Column(Text, nullable=True)
    portfolio_images = Column(JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="vendor")
    categories = relationship("VendorCategory", back_populates="vendor", cascade="all, delete-orphan")
    coverage_areas = relationship("VendorCoverageArea", back_populates="vendor", cascade="all, delete-orphan")
    products = relationship("Product", back_populates="vendor", cascade="all, delete-orphan")


class VendorCategory(Base):
    __tablename__ = "vendor_categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    vendor = relationship("Vendor", back_populates="categories")
    category = relationship("Category", back_populates="vendor_links")

    __table_args__ = (
        UniqueConstraint("vendor_id", "category_id", name="uq_vendor_category"),
    )


class VendorCoverageArea(Base):
    __tablename__ = "vendor_coverage_areas"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    province_id = Column(String(10), nullable=False)
    regency_id = Column(String(10), nullable=True)
    district_id = Column(String(10), nullable=True)
    custom_radius = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    vendor = relationship("Vendor", back_populates="coverage_areas")
