from __future__ import annotations

from school_admin.auth.models import Principal
from school_admin.domain.entities.sale import Sale
from school_admin.domain.enums import SaleStatus
from school_admin.policies.base import Ability, Policy, instance_ability, permission_ability


class SalePolicy(Policy):
    """
    `viewAny` means "all receipts", so it doubles as the override used when a
    user touches a receipt someone else rang up.
    """

    resource_class = "sale"

    def abilities(self) -> dict[str, Ability]:
        return {
            "viewAny": permission_ability("view_all_sales"),
            "view": instance_ability(self.view),
            "create": permission_ability("create_sales"),
            "update": instance_ability(self.update),
            "delete": instance_ability(permission_ability("delete_sales")),
            "void": instance_ability(self.void),
        }

    def view(self, principal: Principal, sale: Sale) -> bool:
        if principal.has_permission("view_all_sales"):
            return True
        return principal.has_permission("view_own_sales") and sale.owner_id == principal.user_id

    def update(self, principal: Principal, sale: Sale) -> bool:
        if sale.status is SaleStatus.VOIDED:
            return False
        if principal.has_permission("edit_all_sales"):
            return True
        return principal.has_permission("edit_own_sales") and sale.owner_id == principal.user_id

    def void(self, principal: Principal, sale: Sale) -> bool:
        return sale.status is SaleStatus.COMPLETED and principal.has_permission("void_sales")
