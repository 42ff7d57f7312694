from __future__ import annotations

from school_admin.auth.models import Principal
from school_admin.domain.entities.category import Category
from school_admin.policies.base import Ability, Policy, instance_ability, permission_ability


class CategoryPolicy(Policy):
    resource_class = "category"

    def abilities(self) -> dict[str, Ability]:
        return {
            "viewAny": permission_ability("view_categories"),
            "view": instance_ability(permission_ability("view_categories")),
            "create": permission_ability("create_categories"),
            "update": instance_ability(self.update),
            "delete": instance_ability(self.delete),
            "restore": instance_ability(permission_ability("restore_categories")),
            "forceDelete": instance_ability(self.force_delete),
            "toggleStatus": instance_ability(permission_ability("manage_category_status")),
            "move": instance_ability(permission_ability("manage_category_hierarchy")),
            "reorder": permission_ability("manage_category_hierarchy"),
            "viewStatistics": permission_ability("view_category_reports", "view_reports"),
            "bulkUpdate": permission_ability("bulk_edit_categories"),
            "bulkDelete": permission_ability("bulk_edit_categories"),
        }

    def update(self, principal: Principal, category: Category) -> bool:
        if not category.is_active and not principal.has_permission("edit_inactive_categories"):
            return False
        return principal.has_permission("edit_categories")

    def delete(self, principal: Principal, category: Category) -> bool:
        if category.has_children or category.has_products:
            return False
        return principal.has_permission("delete_categories")

    def force_delete(self, principal: Principal, category: Category) -> bool:
        if category.has_children or category.has_products:
            return False
        return principal.has_permission("force_delete_categories")
