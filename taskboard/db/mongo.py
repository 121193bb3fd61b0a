"""MongoDB repository for persisting task records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from typing import Any
from uuid import uuid4

import structlog
from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument

from taskboard.db.repository import writable
from taskboard.models.task_models import Task

log = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_bson(fields: Mapping[str, Any]) -> dict[str, Any]:
    # BSON has no date type; due dates are stored as midnight UTC.
    doc = dict(fields)
    due = doc.get("due_date")
    if isinstance(due, date) and not isinstance(due, datetime):
        doc["due_date"] = datetime.combine(due, time.min, tzinfo=timezone.utc)
    return doc


def _from_bson(doc: Mapping[str, Any]) -> Task:
    data = dict(doc)
    data.pop("_id", None)
    due = data.get("due_date")
    if isinstance(due, datetime):
        data["due_date"] = due.date()
    return Task.model_validate(data)


class MongoTaskRepository:
    """Async MongoDB repository for the `tasks` collection."""

    def __init__(self, mongo_url: str, db_name: str = "taskboard") -> None:
        self.client = AsyncMongoClient(mongo_url, tz_aware=True)
        self.db = self.client[db_name]
        self.tasks = self.db.tasks

    async def ping(self) -> None:
        await self.client.admin.command("ping")

    async def close(self) -> None:
        await self.client.close()

    async def ensure_schema(self) -> None:
        """Create the `tasks` indexes.

        Only the identifier is constrained; title and status rules live in
        the application layer.
        """
        await self.tasks.create_index([("id", ASCENDING)], unique=True, name="tasks_id_unique")
        await self.tasks.create_index([("created_at", ASCENDING)], name="tasks_created_at")
        log.info("task_schema_ready", collection=self.tasks.name)

    async def create(self, record: Mapping[str, Any]) -> Task:
        now = _utcnow()
        doc = {
            "title": None,
            "description": None,
            "status": None,
            "due_date": None,
            **_to_bson(writable(record)),
            "id": str(uuid4()),
            "created_at": now,
            "updated_at": now,
        }
        # insert_one adds `_id` to the dict it is given.
        await self.tasks.insert_one(dict(doc))
        return _from_bson(doc)

    async def get(self, task_id: str) -> Task | None:
        doc = await self.tasks.find_one({"id": task_id}, projection={"_id": 0})
        return _from_bson(doc) if doc else None

    async def list_tasks(self, *, status: str | None = None, limit: int = 100) -> list[Task]:
        """List tasks oldest first, optionally filtered by status."""
        query: dict[str, Any] = {}
        if status is not None:
            query["status"] = status
        cursor = (
            self.tasks.find(query, projection={"_id": 0})
            .sort([("created_at", ASCENDING), ("_id", ASCENDING)])
            .limit(limit)
        )
        return [_from_bson(doc) async for doc in cursor]

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> Task | None:
        update = _to_bson(writable(changes))
        update["updated_at"] = _utcnow()
        # Never upsert: updating a missing task must not create one.
        doc = await self.tasks.find_one_and_update(
            {"id": task_id},
            {"$set": update},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        return _from_bson(doc) if doc else None

    async def delete(self, task_id: str) -> bool:
        result = await self.tasks.delete_one({"id": task_id})
        return result.deleted_count == 1
