# backend/indovendor/db/models/product_model.py
from sqlalchemy import Column, Integer, String, ForeignKey, Text, Numeric, Boolean, DateTime
from sqlalchemy.orm import relationship

from indovendor.db.database import Base, JSONType, generate_uuid, utcnow

class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(15, 2), nullable=False)
    unit_type = Column(String(50), nullable=True)
    min_order = Column(Integer, nullable=False, default=1)
    max_order = Column(Integer, nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    # Lista de {id, url, alt, sort_order}
    images = Column(JSONType, nullable=False, default=list)
    specifications = Column(Text, nullable=True)
    terms_conditions = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    vendor = relationship("Vendor", back_populates="products")
    category = relationship("Category", back_populates="products")
    featured_entries = relationship("FeaturedProduct", back_populates="product", cascade="all, delete-orphan")

    def sorted_images(self):
        """Imágenes ordenadas por sort_order."""
        return sorted(self.images or [], key=lambda img: img.get("sort_order", 0))


class FeaturedProduct(Base):
    """Periodo pagado durante el cual un producto aparece destacado."""
    __tablename__ = "featured_products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    payment_status = Column(String(20), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    product = relationship("Product", back_populates="featured_entries")
