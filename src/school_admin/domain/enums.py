from __future__ import annotations

from enum import Enum


class SchoolType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    COMBINED = "combined"
    SPECIAL = "special"
    TECHNICAL = "technical"


class BoardAffiliation(str, Enum):
    CBSE = "cbse"
    ICSE = "icse"
    STATE_BOARD = "state_board"
    IB = "ib"
    CAMBRIDGE = "cambridge"


class ContactType(str, Enum):
    MAIN = "main"
    ADMISSION = "admission"
    ACCOUNTS = "accounts"
    SUPPORT = "support"


class AddressType(str, Enum):
    PHYSICAL = "physical"
    MAILING = "mailing"
    BILLING = "billing"


class UserType(str, Enum):
    SUPER_ADMIN = "super_admin"
    SYSTEM_ADMIN = "system_admin"
    SCHOOL_ADMIN = "school_admin"
    PRINCIPAL = "principal"
    ACADEMIC_COORDINATOR = "academic_coordinator"
    DEPARTMENT_HEAD = "department_head"
    TEACHER = "teacher"
    SALES_MANAGER = "sales_manager"
    SALES_REP = "sales_rep"
    FINANCE_OFFICER = "finance_officer"
    HR_MANAGER = "hr_manager"
    IT_SUPPORT = "it_support"
    DATA_ANALYST = "data_analyst"
    AUDITOR = "auditor"
    STAFF = "staff"
    GUEST = "guest"
    # legacy
    ADMIN = "admin"
    AUDIT = "audit"

    @property
    def is_system_user(self) -> bool:
        return self in SYSTEM_USER_TYPES

    @property
    def is_school_user(self) -> bool:
        return self in SCHOOL_USER_TYPES


SYSTEM_USER_TYPES = frozenset(
    {UserType.STAFF, UserType.ADMIN, UserType.AUDIT, UserType.SYSTEM_ADMIN}
)
SCHOOL_USER_TYPES = frozenset({UserType.SCHOOL_ADMIN, UserType.PRINCIPAL, UserType.TEACHER})


class SaleStatus(str, Enum):
    COMPLETED = "completed"
    VOIDED = "voided"
