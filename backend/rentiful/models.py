# backend/rentiful/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .enums import ApplicationStatus, PaymentStatus
from .geo import PointType


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Integer primary keys are 32-bit on PostgreSQL
MAX_ROW_ID = 2**31 - 1


# -----------------------------
# Association tables
# -----------------------------
tenant_favorites = Table(
    "tenant_favorites",
    Base.metadata,
    Column("tenant_id", Integer, ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Integer, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
)


class PropertyAmenity(Base):
    __tablename__ = "property_amenities"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True
    )
    amenity: Mapped[str] = mapped_column(String(40), primary_key=True, index=True)

    def __init__(self, amenity: str) -> None:
        self.amenity = amenity


# -----------------------------
# Users (linked to identity-provider subject ids)
# -----------------------------
class Manager(Base):
    __tablename__ = "managers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cognito_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    managed_properties: Mapped[List["Property"]] = relationship(back_populates="manager")


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cognito_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    favorites: Mapped[List["Property"]] = relationship(
        secondary=tenant_favorites, order_by="Property.id", back_populates="favorited_by"
    )
    leases: Mapped[List["Lease"]] = relationship(back_populates="tenant")
    applications: Mapped[List["Application"]] = relationship(back_populates="tenant")


# -----------------------------
# Core domain: Locations / Properties
# -----------------------------
class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)

    # SRID 4326 point; see geo.PointType
    coordinates: Mapped[str] = mapped_column(PointType(), nullable=False)
    geocode_attempted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    property: Mapped[Optional["Property"]] = relationship(back_populates="location", uselist=False)


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_per_month: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    security_deposit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    application_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    photo_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    highlights: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    is_pets_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_parking_included: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    beds: Mapped[int] = mapped_column(Integer, nullable=False)
    baths: Mapped[float] = mapped_column(Float, nullable=False)
    square_feet: Mapped[int] = mapped_column(Integer, nullable=False)
    property_type: Mapped[str] = mapped_column(String(40), nullable=False, index=True)

    posted_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    average_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0.0)
    number_of_reviews: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=0)

    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("locations.id"), nullable=False, unique=True)
    manager_cognito_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("managers.cognito_id"), nullable=False, index=True
    )

    location: Mapped["Location"] = relationship(back_populates="property")
    manager: Mapped["Manager"] = relationship(back_populates="managed_properties")

    amenity_links: Mapped[List["PropertyAmenity"]] = relationship(
        cascade="all, delete-orphan", order_by="PropertyAmenity.amenity"
    )
    amenities: AssociationProxy[List[str]] = association_proxy("amenity_links", "amenity")

    favorited_by: Mapped[List["Tenant"]] = relationship(secondary=tenant_favorites, back_populates="favorites")
    leases: Mapped[List["Lease"]] = relationship(back_populates="property")
    applications: Mapped[List["Application"]] = relationship(back_populates="property")


# -----------------------------
# Leasing
# -----------------------------
class Lease(Base):
    __tablename__ = "leases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    rent: Mapped[float] = mapped_column(Float, nullable=False)
    deposit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    property_id: Mapped[int] = mapped_column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    tenant_cognito_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tenants.cognito_id"), nullable=False, index=True
    )

    property: Mapped["Property"] = relationship(back_populates="leases")
    tenant: Mapped["Tenant"] = relationship(back_populates="leases")
    application: Mapped[Optional["Application"]] = relationship(back_populates="lease", uselist=False)
    payments: Mapped[List["Payment"]] = relationship(
        back_populates="lease", cascade="all, delete-orphan", order_by="Payment.due_date"
    )


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ApplicationStatus.Pending.value)

    property_id: Mapped[int] = mapped_column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    tenant_cognito_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tenants.cognito_id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    lease_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("leases.id"), nullable=True, unique=True)

    property: Mapped["Property"] = relationship(back_populates="applications")
    tenant: Mapped["Tenant"] = relationship(back_populates="applications")
    lease: Mapped[Optional["Lease"]] = relationship(back_populates="application")


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    amount_due: Mapped[float] = mapped_column(Float, nullable=False)
    amount_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default=PaymentStatus.Pending.value)

    lease_id: Mapped[int] = mapped_column(Integer, ForeignKey("leases.id", ondelete="CASCADE"), nullable=False, index=True)

    lease: Mapped["Lease"] = relationship(back_populates="payments")
