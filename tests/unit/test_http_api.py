from __future__ import annotations

from typing import Any

import httpx
import pytest
from jose import jwt

from school_admin.auth.gateway import AuthorizationGateway
from school_admin.configs.settings import get_settings
from school_admin.main import create_app
from school_admin.policies.registry import default_registry
from school_admin.services.dashboard_service import DashboardService
from school_admin.services.sale_service import SaleService
from school_admin.services.school_service import SchoolService
from school_admin.utils.time_utils import utc_now

from conftest import InMemorySaleRepository, InMemorySchoolCollection


def _auth(claims: dict[str, Any]) -> dict[str, str]:
    settings = get_settings()
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_alg)
    return {"Authorization": f"Bearer {token}"}


ADMIN = {
    "sub": "admin-1",
    "userType": "system_admin",
    "permissions": ["view_schools", "delete_schools", "bulk_edit_schools", "view_own_sales", "void_sales"],
}
TEACHER = {"sub": "t-1", "userType": "teacher", "schoolId": "school-1", "permissions": []}
REP = {"sub": "rep-1", "userType": "sales_rep", "permissions": ["view_own_sales", "void_sales"]}


@pytest.fixture
def client(make_school, make_sale):
    app = create_app()
    gateway = AuthorizationGateway(default_registry())
    schools = InMemorySchoolCollection(
        [make_school(id="school-1", created_at=utc_now(), with_contact=True), make_school(id="school-2")]
    )
    app.state.gateway = gateway
    app.state.dashboard_service = DashboardService(schools)
    app.state.school_service = SchoolService(schools, gateway)
    app.state.sale_service = SaleService(
        InMemorySaleRepository([make_sale(id="s-9", owner_id="rep-2")]), gateway
    )
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health(client) -> None:
    async with client:
        resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"ok": True}


@pytest.mark.asyncio
async def test_dashboard_requires_token(client) -> None:
    async with client:
        resp = await client.get("/dashboard")
    assert resp.status_code == 401
    assert resp.json()["code"] == "AUTHENTICATION_REQUIRED"


@pytest.mark.asyncio
async def test_dashboard_forbidden_without_view_rights(client) -> None:
    async with client:
        resp = await client.get("/dashboard", headers=_auth(TEACHER))
    assert resp.status_code == 403
    body = resp.json()
    assert body["status"] == "failure"
    assert body["code"] == "AUTHORIZATION_FAILED"


@pytest.mark.asyncio
async def test_dashboard_payload(client) -> None:
    async with client:
        resp = await client.get("/dashboard", headers=_auth(ADMIN))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["stats"]["total_schools"] == 2
    assert data["stats"]["data_completeness_percentage"] == 25
    assert data["charts"]["schools_by_type"] == {"primary": 2}
    assert [s["id"] for s in data["recent_schools"]] == ["school-1"]


@pytest.mark.asyncio
async def test_school_outside_scope_is_not_found(client) -> None:
    async with client:
        resp = await client.get("/schools/school-2", headers=_auth(TEACHER))
    assert resp.status_code == 404
    assert resp.json()["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_void_other_reps_sale_is_not_found(client) -> None:
    async with client:
        resp = await client.post("/sales/s-9/void", headers=_auth(REP))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_bulk_delete_empty_is_validation_error(client) -> None:
    async with client:
        resp = await client.post("/schools/bulk-delete", json={"ids": []}, headers=_auth(ADMIN))
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_bulk_delete_ok(client) -> None:
    async with client:
        resp = await client.post(
            "/schools/bulk-delete", json={"ids": ["school-1", "school-2"]}, headers=_auth(ADMIN)
        )
    assert resp.status_code == 200
    assert resp.json()["data"] == {"requested": 2, "deleted": 2}
