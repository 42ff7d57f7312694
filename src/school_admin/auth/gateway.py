from __future__ import annotations

from typing import Sequence, Sized

from school_admin.auth.models import Principal
from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.resource import (
    OwnershipPredicate,
    Resource,
    ResourceTarget,
    resource_class_of,
)
from school_admin.domain.entities.school import School
from school_admin.domain.entities.user import UserAccount
from school_admin.errors import (
    AuthError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    ValidationReason,
)
from school_admin.policies.base import bulk_action
from school_admin.policies.registry import PolicyRegistry

log = get_logger(__name__)

DEFAULT_BULK_MAX_ITEMS = 100
AUDIT_ROLES = ("super_admin", "system_admin", "auditor", "school_admin")


class AuthorizationGateway:
    """
    Decides whether a principal may act on a resource or resource class.

    Every check takes the acting principal explicitly, returns None on success
    and raises a typed `AppError` otherwise. Decisions never mutate the
    principal or the resource, so one gateway is shared by all requests.
    """

    def __init__(self, registry: PolicyRegistry, *, bulk_max_items: int = DEFAULT_BULK_MAX_ITEMS):
        self._registry = registry
        self._bulk_max_items = bulk_max_items

    # ----------------------------
    # Core checks
    # ----------------------------

    def authorize(self, principal: Principal | None, action: str, target: ResourceTarget) -> None:
        actor = self._require_principal(principal)
        resource_class = resource_class_of(target)
        resource = target if isinstance(target, Resource) else None

        resolver = self._registry.resolver_for(resource_class)
        if resolver is None:
            log.warning("authz.no_policy resource=%s action=%s", resource_class, action)
            raise ForbiddenError()

        if not resolver.resolve(actor, action, resource):
            log.info(
                "authz.denied action=%s resource=%s resource_id=%s user_id=%s",
                action,
                resource_class,
                resource.id if resource is not None else None,
                actor.user_id,
            )
            raise ForbiddenError()

    def authorize_bulk(
        self,
        principal: Principal | None,
        action: str,
        resource_class: type[Resource],
        resources: Sequence[Resource],
    ) -> None:
        """
        Class-level `bulk<Action>` first; when that is denied no individual
        resource is looked at. Otherwise each resource is checked in order and
        the first denial fails the whole batch.
        """
        self.authorize(principal, bulk_action(action), resource_class)
        for resource in resources:
            self.authorize(principal, action, resource)

    def validate_ownership(
        self,
        principal: Principal | None,
        resource: Resource,
        expected_owner_id: str | None = None,
    ) -> None:
        """
        Ownership failures surface as NotFound, never Forbidden, so callers
        cannot probe for resources they are not allowed to know about.
        """
        actor = self._require_principal(principal)
        owner_id = expected_owner_id if expected_owner_id is not None else actor.user_id

        if isinstance(resource, OwnershipPredicate):
            if not resource.is_owned_by(owner_id):
                log.info(
                    "authz.ownership_denied resource=%s resource_id=%s user_id=%s",
                    resource.resource_class,
                    resource.id,
                    actor.user_id,
                )
                raise NotFoundError()
            return

        if resource.owner_id is None or resource.owner_id == owner_id:
            return

        try:
            self.authorize(actor, "viewAny", type(resource))
        except ForbiddenError:
            log.info(
                "authz.ownership_fallback_denied resource=%s resource_id=%s user_id=%s",
                resource.resource_class,
                resource.id,
                actor.user_id,
            )
            raise NotFoundError() from None

    def require_system_scope(self, principal: Principal | None) -> None:
        actor = self._require_principal(principal)
        if not actor.system_scope:
            log.info("authz.system_scope_required user_id=%s", actor.user_id)
            raise ForbiddenError("System administrator access required.")

    def require_permission(self, principal: Principal | None, permission: str) -> None:
        actor = self._require_principal(principal)
        if not actor.has_permission(permission):
            log.info("authz.permission_missing permission=%s user_id=%s", permission, actor.user_id)
            raise ForbiddenError("Insufficient permissions to perform this operation.")

    def validate_bulk_limits(self, items: Sized, max_items: int | None = None) -> None:
        limit = self._bulk_max_items if max_items is None else max_items
        count = len(items)
        if count > limit:
            raise ValidationError(
                f"Bulk operations are limited to {limit} items at a time.",
                reason=ValidationReason.TOO_MANY,
            )
        if count == 0:
            raise ValidationError(
                "No items provided for bulk operation.",
                reason=ValidationReason.EMPTY,
            )

    # ----------------------------
    # Composed checks
    # ----------------------------

    def authorize_view_any(self, principal: Principal | None, resource_class: type[Resource]) -> None:
        self.authorize(principal, "viewAny", resource_class)

    def authorize_view(self, principal: Principal | None, resource: Resource) -> None:
        self.authorize(principal, "view", resource)

    def authorize_create(self, principal: Principal | None, resource_class: type[Resource]) -> None:
        self.authorize(principal, "create", resource_class)

    def authorize_update(self, principal: Principal | None, resource: Resource) -> None:
        self.authorize(principal, "update", resource)
        self.validate_ownership(principal, resource)

    def authorize_delete(self, principal: Principal | None, resource: Resource) -> None:
        self.authorize(principal, "delete", resource)
        self.validate_ownership(principal, resource)

    def authorize_restore(self, principal: Principal | None, resource: Resource) -> None:
        self.authorize(principal, "restore", resource)

    def authorize_force_delete(self, principal: Principal | None, resource: Resource) -> None:
        self.authorize(principal, "forceDelete", resource)
        self.require_system_scope(principal)

    def authorize_bulk_operation(
        self,
        principal: Principal | None,
        action: str,
        resource_class: type[Resource],
        resources: Sequence[Resource],
        max_items: int | None = None,
    ) -> None:
        self.authorize(principal, bulk_action(action), resource_class)
        self.validate_bulk_limits(resources, max_items)
        for resource in resources:
            self.authorize(principal, action, resource)

    def authorize_statistics(self, principal: Principal | None, resource_class: type[Resource]) -> None:
        try:
            self.authorize(principal, "viewAny", resource_class)
        except ForbiddenError:
            self.require_permission(principal, "view_statistics")

    def authorize_export(self, principal: Principal | None, resource_class: type[Resource]) -> None:
        self.authorize(principal, "viewAny", resource_class)
        self.require_permission(principal, "export_data")

    def authorize_import(self, principal: Principal | None, resource_class: type[Resource]) -> None:
        self.authorize(principal, "create", resource_class)
        self.require_permission(principal, "import_data")
        self.require_system_scope(principal)

    def authorize_role_management(
        self, principal: Principal | None, resource: Resource | None = None
    ) -> None:
        if resource is not None:
            self.authorize(principal, "update", resource)
        self.require_permission(principal, "assign_roles")

    def authorize_user_status_change(self, principal: Principal | None, user: UserAccount) -> None:
        self.authorize(principal, "update", user)
        actor = self._require_principal(principal)
        if user.id == actor.user_id:
            raise ValidationError("You cannot change your own account status.")

    def authorize_audit_access(self, principal: Principal | None) -> None:
        actor = self._require_principal(principal)
        if not actor.has_role(*AUDIT_ROLES):
            log.info("authz.audit_role_missing user_id=%s", actor.user_id)
            raise ForbiddenError("Audit trail access requires appropriate role.")
        self.require_permission(actor, "view_audit_trail")

    def authorize_school_resource(
        self, principal: Principal | None, school: School, action: str
    ) -> None:
        actor = self._require_principal(principal)
        if actor.system_scope:
            self.authorize(actor, action, school)
            return
        if actor.is_school_user and actor.school_id == school.id:
            self.authorize(actor, action, school)
            return
        log.info("authz.school_scope_denied school_id=%s user_id=%s", school.id, actor.user_id)
        raise NotFoundError("School not found.")

    def authorize_nested_school_resource(
        self,
        principal: Principal | None,
        school: School,
        nested: Resource,
        action: str,
    ) -> None:
        self.authorize_school_resource(principal, school, "view")
        self.authorize(principal, action, nested)
        nested_school_id = getattr(nested, "school_id", None)
        if nested_school_id is not None and nested_school_id != school.id:
            raise NotFoundError("Resource not found in this school.")

    # ----------------------------
    # Helpers
    # ----------------------------

    @staticmethod
    def _require_principal(principal: Principal | None) -> Principal:
        if principal is None:
            raise AuthError()
        if not principal.active:
            log.info("authz.inactive_principal user_id=%s", principal.user_id)
            raise AuthError("account is inactive")
        return principal
