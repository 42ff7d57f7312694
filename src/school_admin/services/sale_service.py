from __future__ import annotations

from school_admin.auth.gateway import AuthorizationGateway
from school_admin.auth.models import Principal
from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.sale import Sale
from school_admin.repositories.sale_repository import SaleRepository

log = get_logger(__name__)


class SaleService:
    def __init__(self, repo: SaleRepository, gateway: AuthorizationGateway):
        self._repo = repo
        self._gateway = gateway

    async def get(self, principal: Principal, sale_id: str) -> Sale:
        sale = await self._repo.get(sale_id)
        self._gateway.authorize_view(principal, sale)
        return sale

    async def void(self, principal: Principal, sale_id: str) -> Sale:
        log.info("svc.sale.void start user_id=%s sale_id=%s", principal.user_id, sale_id)
        sale = await self._repo.get(sale_id)
        self._gateway.authorize(principal, "void", sale)
        # voiding someone else's receipt needs the all-sales override
        self._gateway.validate_ownership(principal, sale)
        voided = await self._repo.void(sale_id, voided_by=principal.user_id)
        log.info("svc.sale.void done sale_id=%s receipt=%s", sale_id, voided.receipt_number)
        return voided
