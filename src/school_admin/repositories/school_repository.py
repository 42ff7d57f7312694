from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase

from school_admin.configs.logging_config import get_logger
from school_admin.domain.entities.school import School
from school_admin.errors import NotFoundError
from school_admin.repositories.ids import to_object_id
from school_admin.utils.time_utils import utc_now

log = get_logger(__name__)

SCHOOLS = "schools"
USERS = "users"
RELATED_COLLECTIONS: dict[str, str] = {
    "contacts": "school_contacts",
    "addresses": "school_addresses",
}

LIVE: dict[str, Any] = {"deleted_at": None}


def _lookup(relation: str, *, limit: int | None = None, as_field: str | None = None) -> dict[str, Any]:
    stage: dict[str, Any] = {
        "from": RELATED_COLLECTIONS[relation],
        "localField": "_id",
        "foreignField": "school_id",
        "as": as_field or relation,
    }
    if limit is not None:
        stage["pipeline"] = [{"$limit": limit}]
    return {"$lookup": stage}


def build_group_count_pipeline(field: str, *, exclude_null: bool = False) -> list[dict[str, Any]]:
    match: dict[str, Any] = dict(LIVE)
    if exclude_null:
        match[field] = {"$ne": None}
    return [
        {"$match": match},
        {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]


def build_has_related_pipeline(relation: str) -> list[dict[str, Any]]:
    if relation not in RELATED_COLLECTIONS:
        raise ValueError(f"Unknown relation: {relation}")
    return [
        {"$match": dict(LIVE)},
        # one row is enough to prove existence
        _lookup(relation, limit=1, as_field="_related"),
        {"$match": {"_related.0": {"$exists": True}}},
        {"$count": "count"},
    ]


def build_recent_pipeline(
    since: datetime,
    limit: int,
    relations: Iterable[str] = ("contacts", "addresses"),
) -> list[dict[str, Any]]:
    """
    Newest first; equal timestamps keep insertion order (ObjectIds ascend).
    Related rows are joined after the limit so only the preview is expanded.
    """
    pipeline: list[dict[str, Any]] = [
        {"$match": {**LIVE, "created_at": {"$gte": since}}},
        {"$sort": {"created_at": -1, "_id": 1}},
        {"$limit": limit},
    ]
    for relation in relations:
        pipeline.append(_lookup(relation))
    return pipeline


class SchoolRepository:
    """
    Mongo-backed school collection. Soft-deleted schools are invisible to
    every read.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._col = db[SCHOOLS]

    async def ensure_indexes(self) -> None:
        log.info("repo.school.ensure_indexes start")
        await self._col.create_index([("school_code", 1)], unique=True)
        await self._col.create_index([("is_active", 1), ("school_type", 1)])
        await self._col.create_index([("created_at", -1)])
        for collection in RELATED_COLLECTIONS.values():
            await self._db[collection].create_index([("school_id", 1)])
        log.info("repo.school.ensure_indexes done")

    # ----------------------------
    # Aggregate reads
    # ----------------------------

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        query = {**LIVE, **(filters or {})}
        log.debug("repo.school.count query_keys=%s", sorted(query.keys()))
        return await self._col.count_documents(query)

    async def group_count(self, field: str, *, exclude_null: bool = False) -> dict[str, int]:
        log.debug("repo.school.group_count field=%s exclude_null=%s", field, exclude_null)
        pipeline = build_group_count_pipeline(field, exclude_null=exclude_null)
        rows = await self._col.aggregate(pipeline).to_list(length=None)
        return {"" if row["_id"] is None else str(row["_id"]): int(row["count"]) for row in rows}

    async def count_with_related(self, relation: str) -> int:
        log.debug("repo.school.count_with_related relation=%s", relation)
        rows = await self._col.aggregate(build_has_related_pipeline(relation)).to_list(length=1)
        return int(rows[0]["count"]) if rows else 0

    async def fetch_recent(self, since: datetime, limit: int) -> list[School]:
        log.debug("repo.school.fetch_recent since=%s limit=%s", since.isoformat(), limit)
        rows = await self._col.aggregate(build_recent_pipeline(since, limit)).to_list(length=limit)
        return [School.from_document(row) for row in rows]

    # ----------------------------
    # Single-resource access
    # ----------------------------

    async def _has_users(self, oid) -> bool:
        return await self._db[USERS].count_documents({"school_id": oid, **LIVE}, limit=1) > 0

    async def get(self, school_id: str) -> School:
        log.info("repo.school.get school_id=%s", school_id)
        oid = to_object_id(school_id, what="school")
        doc = await self._col.find_one({"_id": oid, **LIVE})
        if not doc:
            log.info("repo.school.get not_found school_id=%s", school_id)
            raise NotFoundError("school not found")
        doc["has_users"] = await self._has_users(oid)
        return School.from_document(doc)

    async def get_many(self, school_ids: list[str]) -> list[School]:
        """Load schools in the order given; any unknown id fails the lookup."""
        log.info("repo.school.get_many count=%s", len(school_ids))
        oids = [to_object_id(s, what="school") for s in school_ids]
        docs = await self._col.find({"_id": {"$in": oids}, **LIVE}).to_list(length=None)
        by_id = {doc["_id"]: doc for doc in docs}
        missing = [str(oid) for oid in oids if oid not in by_id]
        if missing:
            log.info("repo.school.get_many not_found ids=%s", missing)
            raise NotFoundError("school not found")

        with_users = set(
            await self._db[USERS].distinct("school_id", {"school_id": {"$in": oids}, **LIVE})
        )
        out: list[School] = []
        for oid in oids:
            doc = dict(by_id[oid])
            doc["has_users"] = oid in with_users
            out.append(School.from_document(doc))
        return out

    async def set_active(self, school_id: str, *, is_active: bool, updated_by: str) -> School:
        log.info("repo.school.set_active school_id=%s is_active=%s", school_id, is_active)
        oid = to_object_id(school_id, what="school")
        doc = await self._col.find_one_and_update(
            {"_id": oid, **LIVE},
            {"$set": {"is_active": is_active, "updated_by": updated_by, "updated_at": utc_now()}},
            return_document=True,
        )
        if not doc:
            raise NotFoundError("school not found")
        return School.from_document(doc)

    async def soft_delete(self, school_id: str, *, deleted_by: str) -> None:
        await self.soft_delete_many([school_id], deleted_by=deleted_by)

    async def soft_delete_many(self, school_ids: list[str], *, deleted_by: str) -> int:
        log.info("repo.school.soft_delete count=%s deleted_by=%s", len(school_ids), deleted_by)
        oids = [to_object_id(s, what="school") for s in school_ids]
        now = utc_now()
        res = await self._col.update_many(
            {"_id": {"$in": oids}, **LIVE},
            {"$set": {"deleted_at": now, "deleted_by": deleted_by, "updated_at": now}},
        )
        return res.modified_count
