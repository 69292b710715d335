# backend/tests/test_favorites.py
from __future__ import annotations

from sqlalchemy import func, select

from rentiful.models import tenant_favorites


def _fav_count(db) -> int:
    return db.scalar(select(func.count()).select_from(tenant_favorites))


def test_add_favorite_then_conflict_on_repeat(client, db, factory, as_user):
    m = factory.manager()
    t = factory.tenant("ten-1")
    p = factory.property(m)
    h = as_user("ten-1")

    r = client.post(f"/tenants/ten-1/favorites/{p.id}", headers=h)
    assert r.status_code == 200, r.text
    assert [f["id"] for f in r.json()["favorites"]] == [p.id]

    r = client.post(f"/tenants/ten-1/favorites/{p.id}", headers=h)
    assert r.status_code == 409
    assert _fav_count(db) == 1


def test_remove_non_member_is_a_noop(client, db, factory, as_user):
    m = factory.manager()
    factory.tenant("ten-1")
    kept = factory.property(m)
    never = factory.property(m)
    h = as_user("ten-1")

    client.post(f"/tenants/ten-1/favorites/{kept.id}", headers=h)

    r = client.delete(f"/tenants/ten-1/favorites/{never.id}", headers=h)
    assert r.status_code == 200
    assert [f["id"] for f in r.json()["favorites"]] == [kept.id]

    r = client.delete(f"/tenants/ten-1/favorites/{kept.id}", headers=h)
    assert r.status_code == 200
    assert r.json()["favorites"] == []
    assert _fav_count(db) == 0


def test_favorites_not_found_cases(client, factory, as_user):
    m = factory.manager()
    factory.tenant("ten-1")
    p = factory.property(m)
    h = as_user("ten-1")

    assert client.post(f"/tenants/nobody/favorites/{p.id}", headers=h).status_code == 404
    assert client.post("/tenants/ten-1/favorites/9999", headers=h).status_code == 404
    assert client.delete(f"/tenants/nobody/favorites/{p.id}", headers=h).status_code == 404
    assert client.post("/tenants/ten-1/favorites/abc", headers=h).status_code == 400
    assert client.post("/tenants/ten-1/favorites/99999999999999999999", headers=h).status_code == 400


def test_tenant_payload_is_camel_case(client, factory, as_user):
    m = factory.manager()
    factory.tenant("ten-1")
    p = factory.property(m, amenities=("Pool", "WiFi"))
    client.post(f"/tenants/ten-1/favorites/{p.id}", headers=as_user("ten-1"))

    body = client.get("/tenants/ten-1", headers=as_user("ten-1")).json()
    assert body["cognitoId"] == "ten-1"
    fav = body["favorites"][0]
    assert fav["pricePerMonth"] == 1500.0
    assert fav["amenities"] == ["Pool", "WiFi"]
