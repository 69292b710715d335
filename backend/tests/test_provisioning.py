# backend/tests/test_provisioning.py
from __future__ import annotations

import threading

from sqlalchemy import func, select

from rentiful.auth import Principal
from rentiful.db import SessionLocal
from rentiful.models import Manager, Tenant
from rentiful.services.provisioning import provision_user


def test_first_authenticated_fetch_creates_tenant(client, db, as_user):
    h = as_user("ten-new", "tenant", email="new@example.com", name="Newbie")

    r = client.get("/auth/me", headers=h)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["userRole"] == "tenant"
    assert body["cognitoInfo"]["userId"] == "ten-new"
    assert body["userInfo"]["cognitoId"] == "ten-new"
    assert body["userInfo"]["email"] == "new@example.com"

    again = client.get("/auth/me", headers=h).json()
    assert again["userInfo"]["id"] == body["userInfo"]["id"]
    assert db.scalar(select(func.count()).select_from(Tenant)) == 1


def test_role_claim_selects_manager(client, db, as_user):
    r = client.get("/auth/me", headers=as_user("mgr-new", "manager"))
    assert r.status_code == 200
    assert r.json()["userRole"] == "manager"
    assert r.json()["userInfo"]["name"] == "mgr-new"

    assert db.scalar(select(Manager).where(Manager.cognito_id == "mgr-new")) is not None
    assert db.scalar(select(Tenant).where(Tenant.cognito_id == "mgr-new")) is None


def test_existing_record_is_returned_untouched(db, factory):
    t = factory.tenant("ten-1", name="Original Name")

    row, created = provision_user(db, Principal(sub="ten-1", role="tenant", name="Other Name"))
    assert created is False
    assert row.id == t.id
    assert row.name == "Original Name"


def test_concurrent_first_requests_provision_exactly_once():
    principal = Principal(sub="ten-race", role="tenant", email="race@example.com")
    n = 6
    barrier = threading.Barrier(n)
    results: list[tuple[int, bool]] = []
    errors: list[BaseException] = []
    lock = threading.Lock()

    def worker():
        s = SessionLocal()
        try:
            barrier.wait()
            row, created = provision_user(s, principal)
            with lock:
                results.append((row.id, created))
        except BaseException as e:  # surfaced by the assertion below
            with lock:
                errors.append(e)
        finally:
            s.close()

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert errors == []
    assert len({rid for rid, _ in results}) == 1
    assert sum(1 for _, created in results if created) == 1

    s = SessionLocal()
    try:
        assert s.scalar(select(func.count()).select_from(Tenant).where(Tenant.cognito_id == "ten-race")) == 1
    finally:
        s.close()


def test_me_requires_authentication(client):
    assert client.get("/auth/me").status_code == 401
