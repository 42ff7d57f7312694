from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from school_admin.auth.dependencies import get_principal
from school_admin.auth.models import Principal
from school_admin.services.school_service import SchoolService
from school_admin.utils.response import success
from school_admin.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/schools", tags=["schools"])


class SchoolStatusRequest(BaseModel):
    is_active: bool


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)


def _service(request: Request) -> SchoolService:
    return request.app.state.school_service


@router.post("/bulk-delete")
async def bulk_delete_schools(
    request: Request,
    body: BulkDeleteRequest,
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info("school.bulk_delete.start user_id=%s count=%s", principal.user_id, len(body.ids))
    data = await _service(request).bulk_delete(principal, body.ids)
    log.info("school.bulk_delete.done user_id=%s deleted=%s", principal.user_id, data["deleted"])
    return success(data, message="Schools deleted successfully")


@router.get("/{school_id}")
async def get_school(
    request: Request,
    school_id: str,
    principal: Principal = Depends(get_principal),
) -> dict:
    school = await _service(request).get(principal, school_id)
    return success(school.model_dump(mode="json", exclude={"has_users"}), message="Request successful")


@router.patch("/{school_id}/status")
async def set_school_status(
    request: Request,
    school_id: str,
    body: SchoolStatusRequest,
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info(
        "school.status.start user_id=%s school_id=%s is_active=%s",
        principal.user_id,
        school_id,
        body.is_active,
    )
    school = await _service(request).set_active(principal, school_id, body.is_active)
    return success(school.model_dump(mode="json", exclude={"has_users"}), message="School updated successfully")


@router.delete("/{school_id}")
async def delete_school(
    request: Request,
    school_id: str,
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info("school.delete.start user_id=%s school_id=%s", principal.user_id, school_id)
    await _service(request).delete(principal, school_id)
    return success({"id": school_id}, message="School deleted successfully")
