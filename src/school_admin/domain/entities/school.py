from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from school_admin.domain.entities.resource import Resource
from school_admin.domain.enums import AddressType, BoardAffiliation, ContactType, SchoolType


class SchoolContact(BaseModel):
    id: str | None = None
    school_id: str
    contact_type: ContactType = ContactType.MAIN
    phone: str | None = None
    email: str | None = None
    is_primary: bool = False


class SchoolAddress(BaseModel):
    id: str | None = None
    school_id: str
    address_type: AddressType = AddressType.PHYSICAL
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str | None = None
    postal_code: str | None = None
    country: str = "India"


class School(Resource):
    """
    Mongo document model for the `schools` collection.

    `contacts` and `addresses` are only populated when a query joins them.
    """

    resource_class: ClassVar[str] = "school"

    school_code: str
    school_name: str
    school_type: SchoolType
    board_affiliation: BoardAffiliation | None = None
    principal_name: str | None = None
    website: str | None = None
    is_active: bool = True
    has_users: bool = False  # set by the loader; blocks deletion

    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    contacts: list[SchoolContact] = Field(default_factory=list)
    addresses: list[SchoolAddress] = Field(default_factory=list)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "School":
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        data["contacts"] = [_related(c) for c in data.get("contacts") or []]
        data["addresses"] = [_related(a) for a in data.get("addresses") or []]
        return cls(**data)


def _related(doc: dict[str, Any]) -> dict[str, Any]:
    data = dict(doc)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    if "school_id" in data:
        data["school_id"] = str(data["school_id"])
    return data
