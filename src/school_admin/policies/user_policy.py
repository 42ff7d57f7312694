from __future__ import annotations

from school_admin.auth.models import Principal
from school_admin.domain.entities.user import UserAccount
from school_admin.policies.base import Ability, Policy, instance_ability, permission_ability


def _same_school(principal: Principal, user: UserAccount) -> bool:
    return principal.school_id is not None and principal.school_id == user.school_id


def _is_self(principal: Principal, user: UserAccount) -> bool:
    return user.id is not None and user.id == principal.user_id


class UserPolicy(Policy):
    resource_class = "user"

    def abilities(self) -> dict[str, Ability]:
        return {
            "viewAny": permission_ability("view_users"),
            "view": instance_ability(self.view),
            "create": permission_ability("create_users"),
            "update": instance_ability(self.update),
            "delete": instance_ability(self.delete),
            "restore": instance_ability(self.restore),
            "forceDelete": instance_ability(self.force_delete),
            "manageRoles": instance_ability(self.manage_roles),
            "bulkUpdate": permission_ability("bulk_edit_users"),
            "bulkDelete": permission_ability("bulk_edit_users"),
        }

    def _scoped(self, principal: Principal, user: UserAccount, permission: str) -> bool:
        if not principal.has_permission(permission):
            return False
        if principal.is_school_user and user.is_school_user:
            return _same_school(principal, user)
        return principal.system_scope

    def view(self, principal: Principal, user: UserAccount) -> bool:
        if _is_self(principal, user):
            return True
        return self._scoped(principal, user, "view_users")

    def update(self, principal: Principal, user: UserAccount) -> bool:
        if _is_self(principal, user):
            return True
        return self._scoped(principal, user, "edit_users")

    def delete(self, principal: Principal, user: UserAccount) -> bool:
        if _is_self(principal, user):
            return False
        if not principal.has_permission("delete_users"):
            return False
        if principal.is_school_user and user.is_school_user:
            return _same_school(principal, user)
        if principal.system_scope:
            # only a super admin may remove a system admin
            return "system_admin" not in user.roles or principal.has_role("super_admin")
        return False

    def restore(self, principal: Principal, user: UserAccount) -> bool:
        if not principal.has_permission("restore_users"):
            return False
        return principal.system_scope or (principal.is_school_user and _same_school(principal, user))

    def force_delete(self, principal: Principal, user: UserAccount) -> bool:
        return (
            principal.has_permission("force_delete_users")
            and principal.system_scope
            and not _is_self(principal, user)
        )

    def manage_roles(self, principal: Principal, user: UserAccount) -> bool:
        if _is_self(principal, user):
            return False
        return self._scoped(principal, user, "assign_roles")
