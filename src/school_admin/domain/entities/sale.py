from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from school_admin.domain.entities.resource import Resource
from school_admin.domain.enums import SaleStatus


class SaleItem(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal


class Sale(Resource):
    """
    Point-of-sale receipt. `owner_id` is the user who rang up the sale.
    """

    resource_class: ClassVar[str] = "sale"

    receipt_number: str
    school_id: str | None = None
    status: SaleStatus = SaleStatus.COMPLETED
    total_amount: Decimal = Decimal("0")
    items: list[SaleItem] = Field(default_factory=list)
    created_at: datetime
    voided_at: datetime | None = None
    voided_by: str | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Sale":
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        for key in ("owner_id", "school_id", "voided_by"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return cls(**data)
