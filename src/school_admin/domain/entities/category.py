from __future__ import annotations

from typing import ClassVar

from school_admin.domain.entities.resource import Resource


class Category(Resource):
    resource_class: ClassVar[str] = "category"

    name: str
    slug: str | None = None
    parent_id: str | None = None
    is_active: bool = True
    has_children: bool = False
    has_products: bool = False
