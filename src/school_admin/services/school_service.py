from __future__ import annotations

from typing import Any

from school_admin.auth.gateway import AuthorizationGateway
from school_admin.auth.models import Principal
from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.school import School
from school_admin.policies.base import bulk_action
from school_admin.repositories.school_repository import SchoolRepository

log = get_logger(__name__)


class SchoolService:
    def __init__(self, repo: SchoolRepository, gateway: AuthorizationGateway):
        self._repo = repo
        self._gateway = gateway

    async def get(self, principal: Principal, school_id: str) -> School:
        school = await self._repo.get(school_id)
        self._gateway.authorize_school_resource(principal, school, "view")
        return school

    async def set_active(self, principal: Principal, school_id: str, is_active: bool) -> School:
        log.info(
            "svc.school.set_active start user_id=%s school_id=%s is_active=%s",
            principal.user_id,
            school_id,
            is_active,
        )
        school = await self._repo.get(school_id)
        self._gateway.authorize_update(principal, school)
        updated = await self._repo.set_active(school_id, is_active=is_active, updated_by=principal.user_id)
        log.info("svc.school.set_active done school_id=%s", school_id)
        return updated

    async def delete(self, principal: Principal, school_id: str) -> None:
        log.info("svc.school.delete start user_id=%s school_id=%s", principal.user_id, school_id)
        school = await self._repo.get(school_id)
        self._gateway.authorize_delete(principal, school)
        await self._repo.soft_delete(school_id, deleted_by=principal.user_id)
        log.info("svc.school.delete done school_id=%s", school_id)

    async def bulk_delete(self, principal: Principal, school_ids: list[str]) -> dict[str, Any]:
        log.info("svc.school.bulk_delete start user_id=%s count=%s", principal.user_id, len(school_ids))
        ids = list(dict.fromkeys(school_ids))
        # nothing is counted or loaded until the class-level bulk check passes
        self._gateway.authorize(principal, bulk_action("delete"), School)
        self._gateway.validate_bulk_limits(ids)
        schools = await self._repo.get_many(ids)
        for school in schools:
            self._gateway.authorize(principal, "delete", school)
        deleted = await self._repo.soft_delete_many(ids, deleted_by=principal.user_id)
        log.info("svc.school.bulk_delete done requested=%s deleted=%s", len(ids), deleted)
        return {"requested": len(ids), "deleted": deleted}
