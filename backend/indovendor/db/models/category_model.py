# backend/indovendor/db/models/category_model.py
"""
Se encarga de definir el modelo de categoría de servicios (EO/WO, catering, ...).
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from indovendor.db.database import Base, generate_uuid, utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    products = relationship("Product", back_populates="category")
    vendor_links = relationship("VendorCategory", back_populates="category", cascade="all, delete-orphan")
