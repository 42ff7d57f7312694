from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Protocol

from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.report import AggregateReport
from school_admin.domain.entities.school import School
from school_admin.utils.time_utils import days_ago

log = get_logger(__name__)

RECENT_DAYS = 30
RECENT_LIMIT = 5


class SchoolCollection(Protocol):
    """The query surface the dashboard needs from the school store."""

    async def count(self, filters: dict[str, Any] | None = None) -> int: ...

    async def group_count(self, field: str, *, exclude_null: bool = False) -> dict[str, int]: ...

    async def count_with_related(self, relation: str) -> int: ...

    async def fetch_recent(self, since: datetime, limit: int) -> list[School]: ...


def completeness_percentage(with_contacts: int, with_addresses: int, total: int) -> int:
    """
    Share of the (contacts, addresses) slots that are filled, rounded half up.

    An empty collection is 0% complete.
    """
    if total <= 0:
        return 0
    # round(100 * filled / (2 * total)) with half-up rounding, in integers
    return (100 * (with_contacts + with_addresses) + total) // (2 * total)


class DashboardService:
    def __init__(
        self,
        schools: SchoolCollection,
        *,
        recent_days: int = RECENT_DAYS,
        recent_limit: int = RECENT_LIMIT,
    ):
        self._schools = schools
        self._recent_days = recent_days
        self._recent_limit = recent_limit

    async def compute_summary(self, *, now: datetime | None = None) -> AggregateReport:
        """
        Recomputed from the live collection on every call; nothing is cached.
        The sub-queries are independent and run concurrently, and the report
        is only built once all of them have returned.
        """
        since = days_ago(self._recent_days, now=now)
        log.info("svc.dashboard.summary start since=%s limit=%s", since.isoformat(), self._recent_limit)

        (
            total,
            active,
            inactive,
            recent,
            by_type,
            by_board,
            with_contacts,
            with_addresses,
        ) = await asyncio.gather(
            self._schools.count(),
            self._schools.count({"is_active": True}),
            self._schools.count({"is_active": False}),
            self._schools.fetch_recent(since, self._recent_limit),
            self._schools.group_count("school_type"),
            self._schools.group_count("board_affiliation", exclude_null=True),
            self._schools.count_with_related("contacts"),
            self._schools.count_with_related("addresses"),
        )

        report = AggregateReport(
            total_schools=total,
            active_schools=active,
            inactive_schools=inactive,
            schools_with_contacts=with_contacts,
            schools_with_addresses=with_addresses,
            data_completeness_percentage=completeness_percentage(with_contacts, with_addresses, total),
            schools_by_type=by_type,
            schools_by_board=by_board,
            recent_schools=tuple(recent[: self._recent_limit]),
        )
        log.info(
            "svc.dashboard.summary done total=%s active=%s inactive=%s recent=%s completeness=%s",
            report.total_schools,
            report.active_schools,
            report.inactive_schools,
            len(report.recent_schools),
            report.data_completeness_percentage,
        )
        return report
