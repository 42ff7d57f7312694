from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count
from typing import Any, Callable

import pytest

from school_admin.auth.models import Principal
from school_admin.domain.entities.sale import Sale
from school_admin.domain.entities.school import School, SchoolAddress, SchoolContact
from school_admin.domain.enums import SaleStatus, SchoolType, UserType
from school_admin.errors import NotFoundError

NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


class InMemorySchoolCollection:
    """
    Stands in for SchoolRepository: same query surface, backed by a list that
    keeps insertion order.
    """

    def __init__(self, schools: list[School] | None = None):
        self.schools: list[School] = list(schools or [])
        self.calls: list[str] = []

    def _live(self) -> list[School]:
        return [s for s in self.schools if s.deleted_at is None]

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        self.calls.append("count")
        rows = self._live()
        for key, value in (filters or {}).items():
            rows = [s for s in rows if getattr(s, key) == value]
        return len(rows)

    async def group_count(self, field: str, *, exclude_null: bool = False) -> dict[str, int]:
        self.calls.append("group_count")
        out: dict[str, int] = {}
        for school in self._live():
            value = getattr(school, field)
            if value is None:
                if exclude_null:
                    continue
                key = ""
            else:
                key = value.value if hasattr(value, "value") else str(value)
            out[key] = out.get(key, 0) + 1
        return out

    async def count_with_related(self, relation: str) -> int:
        self.calls.append("count_with_related")
        return sum(1 for s in self._live() if getattr(s, relation))

    async def fetch_recent(self, since: datetime, limit: int) -> list[School]:
        self.calls.append("fetch_recent")
        rows = [s for s in self._live() if s.created_at >= since]
        # stable sort keeps ties in insertion order, which is what the
        # repository gets from sorting on _id after created_at
        # (see test_recent_pipeline_sorts_newest_first_then_limits_then_joins)
        rows = sorted(rows, key=lambda s: s.created_at, reverse=True)
        return rows[:limit]

    # SchoolRepository single-resource API

    async def get(self, school_id: str) -> School:
        for school in self._live():
            if school.id == school_id:
                return school
        raise NotFoundError("school not found")

    async def get_many(self, school_ids: list[str]) -> list[School]:
        return [await self.get(s) for s in school_ids]

    async def set_active(self, school_id: str, *, is_active: bool, updated_by: str) -> School:
        school = await self.get(school_id)
        updated = school.model_copy(update={"is_active": is_active})
        self.schools[self.schools.index(school)] = updated
        return updated

    async def soft_delete(self, school_id: str, *, deleted_by: str) -> None:
        await self.soft_delete_many([school_id], deleted_by=deleted_by)

    async def soft_delete_many(self, school_ids: list[str], *, deleted_by: str) -> int:
        deleted = 0
        for school_id in school_ids:
            school = await self.get(school_id)
            self.schools[self.schools.index(school)] = school.model_copy(update={"deleted_at": NOW})
            deleted += 1
        return deleted


class InMemorySaleRepository:
    def __init__(self, sales: list[Sale] | None = None):
        self.sales = {s.id: s for s in sales or []}
        self.voided: list[str] = []

    async def get(self, sale_id: str) -> Sale:
        if sale_id not in self.sales:
            raise NotFoundError("sale not found")
        return self.sales[sale_id]

    async def void(self, sale_id: str, *, voided_by: str) -> Sale:
        sale = await self.get(sale_id)
        voided = sale.model_copy(update={"status": SaleStatus.VOIDED, "voided_by": voided_by, "voided_at": NOW})
        self.sales[sale_id] = voided
        self.voided.append(sale_id)
        return voided


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_school() -> Callable[..., School]:
    seq = count(1)

    def factory(**overrides: Any) -> School:
        n = next(seq)
        school_id = overrides.pop("id", f"school-{n}")
        with_contact = overrides.pop("with_contact", False)
        with_address = overrides.pop("with_address", False)
        data: dict[str, Any] = {
            "id": school_id,
            "school_code": f"SCH{n:04d}",
            "school_name": f"School {n}",
            "school_type": SchoolType.PRIMARY,
            "created_at": NOW - timedelta(days=60),
        }
        if with_contact:
            data["contacts"] = [SchoolContact(school_id=school_id, phone="555-0100")]
        if with_address:
            data["addresses"] = [
                SchoolAddress(school_id=school_id, address_line1="1 Main Road", city="Pune")
            ]
        data.update(overrides)
        return School(**data)

    return factory


@pytest.fixture
def make_sale() -> Callable[..., Sale]:
    seq = count(1)

    def factory(**overrides: Any) -> Sale:
        n = next(seq)
        data: dict[str, Any] = {
            "id": f"sale-{n}",
            "receipt_number": f"RCPT-{n:05d}",
            "owner_id": "rep-1",
            "total_amount": Decimal("125.50"),
            "created_at": NOW,
        }
        data.update(overrides)
        return Sale(**data)

    return factory


@pytest.fixture
def system_admin() -> Principal:
    return Principal(
        user_id="admin-1",
        permissions=(
            "view_schools",
            "create_schools",
            "edit_schools",
            "delete_schools",
            "bulk_edit_schools",
            "view_all_sales",
            "void_sales",
        ),
        system_scope=True,
        user_type=UserType.SYSTEM_ADMIN,
    )


@pytest.fixture
def sales_rep() -> Principal:
    return Principal(
        user_id="rep-1",
        permissions=("view_own_sales", "create_sales", "edit_own_sales", "void_sales"),
        user_type=UserType.SALES_REP,
    )


@pytest.fixture
def school_admin() -> Principal:
    return Principal(
        user_id="sa-1",
        permissions=("edit_own_school",),
        school_id="school-1",
        user_type=UserType.SCHOOL_ADMIN,
        roles=("school_admin",),
    )
