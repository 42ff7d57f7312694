from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from school_admin.auth.dependencies import get_principal
from school_admin.auth.models import Principal
from school_admin.services.sale_service import SaleService
from school_admin.utils.response import success
from school_admin.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/sales", tags=["sales"])


def _service(request: Request) -> SaleService:
    return request.app.state.sale_service


@router.get("/{sale_id}")
async def get_sale(
    request: Request,
    sale_id: str,
    principal: Principal = Depends(get_principal),
) -> dict:
    sale = await _service(request).get(principal, sale_id)
    return success(sale.model_dump(mode="json"), message="Request successful")


@router.post("/{sale_id}/void")
async def void_sale(
    request: Request,
    sale_id: str,
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info("sale.void.start user_id=%s sale_id=%s", principal.user_id, sale_id)
    sale = await _service(request).void(principal, sale_id)
    log.info("sale.void.done user_id=%s receipt=%s", principal.user_id, sale.receipt_number)
    return success(sale.model_dump(mode="json"), message="Sale voided successfully")
