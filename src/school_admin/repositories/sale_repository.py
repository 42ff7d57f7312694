from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import Decimal128

from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.sale import Sale
from school_admin.domain.enums import SaleStatus
from school_admin.errors import NotFoundError
from school_admin.repositories.ids import to_object_id
from school_admin.utils.time_utils import utc_now

log = get_logger(__name__)


class SaleRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._col = db["sales"]

    async def get(self, sale_id: str) -> Sale:
        log.info("repo.sale.get sale_id=%s", sale_id)
        doc = await self._col.find_one({"_id": to_object_id(sale_id, what="sale")})
        if not doc:
            log.info("repo.sale.get not_found sale_id=%s", sale_id)
            raise NotFoundError("sale not found")
        return Sale.from_document(_decode_decimals(doc))

    async def void(self, sale_id: str, *, voided_by: str) -> Sale:
        log.info("repo.sale.void sale_id=%s voided_by=%s", sale_id, voided_by)
        now = utc_now()
        doc = await self._col.find_one_and_update(
            {"_id": to_object_id(sale_id, what="sale"), "status": SaleStatus.COMPLETED.value},
            {
                "$set": {
                    "status": SaleStatus.VOIDED.value,
                    "voided_at": now,
                    "voided_by": voided_by,
                    "updated_at": now,
                }
            },
            return_document=True,
        )
        if not doc:
            raise NotFoundError("sale not found")
        return Sale.from_document(_decode_decimals(doc))


def _decode_decimals(doc: dict) -> dict:
    # money is stored as Decimal128
    out = dict(doc)
    if isinstance(out.get("total_amount"), Decimal128):
        out["total_amount"] = out["total_amount"].to_decimal()
    items = []
    for item in out.get("items") or []:
        item = dict(item)
        if isinstance(item.get("unit_price"), Decimal128):
            item["unit_price"] = item["unit_price"].to_decimal()
        items.append(item)
    out["items"] = items
    return out
