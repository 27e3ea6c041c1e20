# backend/indovendor/db/models/user_model.py
"""
Modelos de usuario y de su perfil personal.
"""

from sqlalchemy import Column, String, ForeignKey, Text, Boolean, DateTime, Date, Enum
from sqlalchemy.orm import relationship

from indovendor.core.permissions import UserRole
from indovendor.db.database import Base, generate_uuid, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), unique=True, nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.CLIENT)
    is_verified = Column(Boolean, nullable=False, default=False)
    profile_picture = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    vendor = relationship("Vendor", back_populates="user", uselist=False, cascade="all, delete-orphan")


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    # Jerarquía administrativa: provincia > regencia > distrito > aldea
    province_id = Column(String(10), nullable=True)
    regency_id = Column(String(10), nullable=True)
    district_id = Column(String(10), nullable=True)
    village_id = Column(String(15), nullable=True)
    full_address = Column(Text, nullable=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")
