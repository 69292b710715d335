# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile
from datetime import datetime
from typing import Optional

_DB_DIR = tempfile.mkdtemp(prefix="rentiful-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["APP_ENV"] = "test"
os.environ["AUTH_MODE"] = "dev"
os.environ["GEOCODING_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from rentiful import models  # noqa: E402,F401
from rentiful.clients.nominatim import get_geocoder  # noqa: E402
from rentiful.db import Base, SessionLocal, engine  # noqa: E402
from rentiful.geo import Coordinates, to_point  # noqa: E402
from rentiful.main import create_app  # noqa: E402
from rentiful.models import Lease, Location, Manager, Property, PropertyAmenity, Tenant  # noqa: E402
from rentiful.services.photo_storage import get_photo_storage  # noqa: E402


class FakeGeocoder:
    def __init__(self, result: Optional[Coordinates] = None) -> None:
        self.result = result
        self.calls: list[dict] = []

    def geocode(self, **kwargs) -> Optional[Coordinates]:
        self.calls.append(kwargs)
        return self.result


class FakeStorage:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, bytes, Optional[str]]] = []

    def upload(self, *, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        self.uploads.append((filename, content, content_type))
        return f"https://storage.test/properties/{filename}"


def _headers(sub: str, role: str = "tenant", **extra) -> dict[str, str]:
    headers = {"X-User-Sub": sub, "X-User-Role": role}
    if "email" in extra:
        headers["X-User-Email"] = extra["email"]
    if "name" in extra:
        headers["X-User-Name"] = extra["name"]
    return headers


@pytest.fixture
def as_user():
    """as_user("sub", "manager") -> dev-auth headers"""
    return _headers


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def app(geocoder, storage):
    a = create_app()
    a.dependency_overrides[get_geocoder] = lambda: geocoder
    a.dependency_overrides[get_photo_storage] = lambda: storage
    return a


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


class Factory:
    def __init__(self, db) -> None:
        self.db = db

    def manager(self, cognito_id: str = "mgr-1", name: str = "Mia Manager") -> Manager:
        row = Manager(cognito_id=cognito_id, name=name, email=f"{cognito_id}@example.com", phone_number="")
        self.db.add(row)
        self.db.commit()
        return row

    def tenant(self, cognito_id: str = "ten-1", name: str = "Tom Tenant") -> Tenant:
        row = Tenant(cognito_id=cognito_id, name=name, email=f"{cognito_id}@example.com", phone_number="")
        self.db.add(row)
        self.db.commit()
        return row

    def property(
        self,
        manager: Manager,
        *,
        name: str = "Listing",
        price: float = 1500.0,
        beds: int = 2,
        baths: float = 1.0,
        square_feet: int = 800,
        property_type: str = "Apartment",
        amenities: tuple[str, ...] = (),
        lonlat: Optional[tuple[float, float]] = (-118.25, 34.05),
        raw_point: Optional[str] = None,
    ) -> Property:
        point = raw_point if raw_point is not None else to_point(*lonlat)
        row = Property(
            name=name,
            description="",
            price_per_month=price,
            security_deposit=price,
            application_fee=25.0,
            photo_urls=[],
            highlights=[],
            beds=beds,
            baths=baths,
            square_feet=square_feet,
            property_type=property_type,
            manager_cognito_id=manager.cognito_id,
            location=Location(
                address="1 Main St",
                city="Los Angeles",
                state="CA",
                country="United States",
                postal_code="90001",
                coordinates=point,
            ),
        )
        row.amenity_links = [PropertyAmenity(a) for a in amenities]
        self.db.add(row)
        self.db.commit()
        return row

    def lease(self, prop: Property, tenant: Tenant, *, start: datetime, end: datetime) -> Lease:
        row = Lease(
            start_date=start,
            end_date=end,
            rent=prop.price_per_month,
            deposit=prop.security_deposit,
            property_id=prop.id,
            tenant_cognito_id=tenant.cognito_id,
        )
        self.db.add(row)
        self.db.commit()
        return row


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)
