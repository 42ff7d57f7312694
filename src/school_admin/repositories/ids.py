from __future__ import annotations

from bson import ObjectId

from school_admin.errors import NotFoundError


def to_object_id(value: str, *, what: str = "resource") -> ObjectId:
    # malformed ids are indistinguishable from unknown ones
    if not ObjectId.is_valid(value):
        raise NotFoundError(f"{what} not found")
    return ObjectId(value)
