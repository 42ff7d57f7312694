from __future__ import annotations

from dataclasses import dataclass

from school_admin.domain.enums import UserType


@dataclass(frozen=True)
class Principal:
    user_id: str
    permissions: tuple[str, ...] = ()
    system_scope: bool = False
    active: bool = True
    school_id: str | None = None
    user_type: UserType | None = None
    roles: tuple[str, ...] = ()

    def has_permission(self, name: str) -> bool:
        return name in self.permissions

    def has_role(self, *names: str) -> bool:
        return any(name in self.roles for name in names)

    @property
    def is_school_user(self) -> bool:
        return self.user_type is not None and self.user_type.is_school_user
