"""In-memory stand-ins for the async PyMongo objects used by the task store."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from bson import ObjectId


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


def _project(doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    out = copy.deepcopy(doc)
    if projection and projection.get("_id") == 0:
        out.pop("_id", None)
    return out


@dataclass
class DeleteResult:
    deleted_count: int


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]], projection: dict[str, int] | None = None) -> None:
        self._docs = docs
        self._projection = projection
        self.sort_spec: list[tuple[str, int]] = []

    def sort(self, key_or_list, direction: int = 1) -> FakeCursor:
        spec = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        self.sort_spec = list(spec)
        # Stable sorts applied last key first give a compound ordering.
        for key, dirn in reversed(spec):
            self._docs.sort(key=lambda d: d.get(key), reverse=dirn < 0)
        return self

    def limit(self, n: int) -> FakeCursor:
        self._docs = self._docs[:n]
        return self

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for doc in self._docs:
            yield _project(doc, self._projection)


class FakeCollection:
    def __init__(self, name: str = "tasks") -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[tuple[list[tuple[str, int]], dict[str, Any]]] = []

    async def create_index(self, keys, **kwargs) -> str:
        self.indexes.append((keys, kwargs))
        return kwargs.get("name", "idx")

    async def insert_one(self, doc: dict[str, Any]) -> None:
        doc["_id"] = ObjectId()
        self.docs.append(copy.deepcopy(doc))

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query, projection=None) -> FakeCursor:
        self.last_cursor = FakeCursor([d for d in self.docs if _matches(d, query)], projection)
        return self.last_cursor

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        _ = return_document
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update["$set"]))
                return _project(doc, projection)
        return None

    async def delete_one(self, query) -> DeleteResult:
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return DeleteResult(1)
        return DeleteResult(0)


class FakeAdmin:
    def __init__(self) -> None:
        self.fail_with: Exception | None = None

    async def command(self, name: str) -> dict[str, Any]:
        if self.fail_with is not None:
            raise self.fail_with
        return {"ok": 1.0, "cmd": name}


class FakeDatabase:
    def __init__(self) -> None:
        self.tasks = FakeCollection("tasks")


class FakeMongoClient:
    """Replaces `AsyncMongoClient` in `taskboard.db.mongo` during tests."""

    def __init__(self, url: str, **kwargs: Any) -> None:
        self.url = url
        self.kwargs = kwargs
        self.admin = FakeAdmin()
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase())

    async def close(self) -> None:
        self.closed = True
