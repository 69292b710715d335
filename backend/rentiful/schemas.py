# backend/rentiful/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import Amenity, ApplicationStatus, Highlight, PropertyType, Role
from .models import MAX_ROW_ID


class CamelModel(BaseModel):
    """Wire format is camelCase (pricePerMonth, cognitoId, ...); python side stays snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _split_csv(v):
    if v is None:
        return []
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# -------------------- Users --------------------

class UserCreate(CamelModel):
    cognito_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone_number: Optional[str] = None


class UserUpdate(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone_number: Optional[str] = None


class UserOut(CamelModel):
    id: int
    cognito_id: str
    name: str
    email: str
    phone_number: Optional[str] = None


class PropertyBriefOut(CamelModel):
    """Property row without its location (favorites lists)."""

    id: int
    name: str
    description: str
    price_per_month: float
    security_deposit: float
    application_fee: float
    photo_urls: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    is_pets_allowed: bool
    is_parking_included: bool
    beds: int
    baths: float
    square_feet: int
    property_type: str
    posted_date: datetime
    average_rating: Optional[float] = None
    number_of_reviews: Optional[int] = None
    location_id: int
    manager_cognito_id: str

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_list(cls, v):
        return list(v or [])


class TenantOut(UserOut):
    favorites: List[PropertyBriefOut] = Field(default_factory=list)


class AuthUserOut(CamelModel):
    cognito_info: dict
    user_info: dict
    user_role: Role


# -------------------- Locations / Properties --------------------

class CoordinatesOut(CamelModel):
    longitude: Optional[float] = None
    latitude: Optional[float] = None


class LocationOut(CamelModel):
    id: int
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    coordinates: CoordinatesOut


class PropertyCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    price_per_month: float = Field(ge=0)
    security_deposit: float = Field(default=0.0, ge=0)
    application_fee: float = Field(default=0.0, ge=0)
    amenities: List[Amenity] = Field(default_factory=list)
    highlights: List[Highlight] = Field(default_factory=list)
    is_pets_allowed: bool = False
    is_parking_included: bool = False
    beds: int = Field(ge=0, le=MAX_ROW_ID)
    baths: float = Field(ge=0)
    square_feet: int = Field(ge=0, le=MAX_ROW_ID)
    property_type: PropertyType

    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = ""
    country: str = Field(min_length=1)
    postal_code: str = ""

    manager_cognito_id: str = Field(min_length=1)

    @field_validator("amenities", "highlights", mode="before")
    @classmethod
    def _csv(cls, v):
        return _split_csv(v)


# -------------------- Leases / Payments --------------------

class LeaseOut(CamelModel):
    id: int
    start_date: datetime
    end_date: datetime
    rent: float
    deposit: float
    property_id: int
    tenant_cognito_id: str


class LeaseWithTenantOut(LeaseOut):
    tenant: UserOut


class PaymentOut(CamelModel):
    id: int
    amount_due: float
    amount_paid: float
    due_date: datetime
    payment_date: Optional[datetime] = None
    payment_status: str
    lease_id: int


# -------------------- Applications --------------------

class ApplicationCreate(CamelModel):
    property_id: int = Field(ge=1, le=MAX_ROW_ID)
    tenant_cognito_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone_number: Optional[str] = None
    message: Optional[str] = None
    application_date: Optional[datetime] = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationOut(CamelModel):
    id: int
    application_date: datetime
    status: str
    property_id: int
    tenant_cognito_id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    message: Optional[str] = None
    lease_id: Optional[int] = None
    lease: Optional[LeaseOut] = None
