from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Union

from pydantic import BaseModel


class Resource(BaseModel):
    """
    Anything subject to access control.

    `resource_class` is the key policies are registered under. Ownership is
    read from `owner_id` unless the subclass implements `OwnershipPredicate`.
    """

    resource_class: ClassVar[str] = "resource"

    id: str | None = None
    owner_id: str | None = None


class OwnershipPredicate(ABC):
    """Capability for resources whose ownership is not a plain owner_id match."""

    @abstractmethod
    def is_owned_by(self, user_id: str) -> bool: ...


ResourceTarget = Union[Resource, type[Resource]]


def resource_class_of(target: ResourceTarget) -> str:
    return target.resource_class
