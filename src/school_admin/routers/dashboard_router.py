from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from school_admin.auth.dependencies import get_principal
from school_admin.auth.models import Principal
from school_admin.domain.entities.school import School
from school_admin.utils.response import success
from school_admin.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard(request: Request, principal: Principal = Depends(get_principal)) -> dict:
    log.info("dashboard.start user_id=%s", principal.user_id)
    request.app.state.gateway.authorize_statistics(principal, School)
    report = await request.app.state.dashboard_service.compute_summary()
    log.info("dashboard.done user_id=%s total=%s", principal.user_id, report.total_schools)
    return success(report.to_payload(), message="Request successful")
