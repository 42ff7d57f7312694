from __future__ import annotations

from typing import ClassVar

from school_admin.domain.entities.resource import Resource
from school_admin.domain.enums import UserType


class UserAccount(Resource):
    """A user as the target of an action (as opposed to the acting Principal)."""

    resource_class: ClassVar[str] = "user"

    name: str
    email: str
    user_type: UserType = UserType.STAFF
    school_id: str | None = None
    roles: tuple[str, ...] = ()
    is_active: bool = True

    @property
    def is_school_user(self) -> bool:
        return self.user_type.is_school_user
