from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Optional

from school_admin.auth.models import Principal
from school_admin.domain.entities.resource import Resource

Ability = Callable[[Principal, Optional[Resource]], bool]


def bulk_action(action: str) -> str:
    """`delete` -> `bulkDelete`."""
    if not action:
        raise ValueError("action missing")
    return "bulk" + action[0].upper() + action[1:]


class Policy(ABC):
    """
    Policy resolver for one resource class.

    Subclasses declare their ability table; `resolve` looks the opaque action
    name up in it. Actions missing from the table are denied.
    """

    resource_class: ClassVar[str]

    def __init__(self) -> None:
        self._abilities = self.abilities()

    @abstractmethod
    def abilities(self) -> dict[str, Ability]:
        pass

    def resolve(self, principal: Principal, action: str, resource: Resource | None = None) -> bool:
        ability = self._abilities.get(action)
        if ability is None:
            return False
        return bool(ability(principal, resource))


def instance_ability(fn: Callable[[Principal, Resource], bool]) -> Ability:
    """Wrap an ability that needs a concrete resource; class-level calls are denied."""

    def wrapped(principal: Principal, resource: Resource | None) -> bool:
        if resource is None:
            return False
        return fn(principal, resource)

    return wrapped


def permission_ability(*permissions: str) -> Ability:
    """Ability granted when the principal holds any of `permissions`."""

    def check(principal: Principal, _resource: Resource | None) -> bool:
        return any(principal.has_permission(p) for p in permissions)

    return check
