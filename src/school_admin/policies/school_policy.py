from __future__ import annotations

from school_admin.auth.models import Principal
from school_admin.domain.entities.school import School
from school_admin.policies.base import Ability, Policy, instance_ability, permission_ability


def _own_school(principal: Principal, school: School) -> bool:
    return principal.is_school_user and principal.school_id is not None and principal.school_id == school.id


class SchoolPolicy(Policy):
    resource_class = "school"

    def abilities(self) -> dict[str, Ability]:
        return {
            "viewAny": permission_ability("view_schools"),
            "view": instance_ability(self.view),
            "create": self.create,
            "update": instance_ability(self.update),
            "delete": instance_ability(self.delete),
            "restore": self._system_with("restore_schools"),
            "forceDelete": self._system_with("force_delete_schools"),
            "viewStatistics": instance_ability(self.view_statistics),
            "bulkUpdate": permission_ability("bulk_edit_schools"),
            "bulkDelete": permission_ability("bulk_edit_schools"),
        }

    @staticmethod
    def _system_with(permission: str) -> Ability:
        def check(principal: Principal, _school) -> bool:
            return principal.system_scope and principal.has_permission(permission)

        return check

    def view(self, principal: Principal, school: School) -> bool:
        # school-level users only ever see their own school
        if principal.is_school_user:
            return _own_school(principal, school)
        return principal.system_scope and principal.has_permission("view_schools")

    def create(self, principal: Principal, _school=None) -> bool:
        return principal.system_scope and principal.has_permission("create_schools")

    def update(self, principal: Principal, school: School) -> bool:
        if _own_school(principal, school):
            return principal.has_permission("edit_own_school")
        return principal.system_scope and principal.has_permission("edit_schools")

    def delete(self, principal: Principal, school: School) -> bool:
        if principal.system_scope and principal.has_permission("delete_schools"):
            return not school.has_users
        return False

    def view_statistics(self, principal: Principal, school: School) -> bool:
        if _own_school(principal, school):
            return True
        return principal.system_scope and (
            principal.has_permission("view_schools") or principal.has_permission("view_reports")
        )
