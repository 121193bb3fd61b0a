from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure required settings exist for get_settings().
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")

from taskboard.core.service import TaskService
from taskboard.core.settings import get_client_settings, get_settings
from taskboard.db import mongo as mongo_mod

from fakes import FakeMongoClient


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    get_client_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_client_settings.cache_clear()


@pytest.fixture()
def repository(monkeypatch) -> mongo_mod.MongoTaskRepository:
    monkeypatch.setattr(mongo_mod, "AsyncMongoClient", FakeMongoClient)
    return mongo_mod.MongoTaskRepository("mongodb://fake:27017", "taskboard_test")


@pytest.fixture()
def service(repository) -> TaskService:
    return TaskService(repository)


class SteppingClock:
    """Stands in for `taskboard.db.mongo._utcnow`; each call moves `step` forward."""

    def __init__(self, start: datetime, step: timedelta) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture()
def clock(monkeypatch) -> SteppingClock:
    ticking = SteppingClock(datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc), timedelta(seconds=1))
    monkeypatch.setattr(mongo_mod, "_utcnow", ticking)
    return ticking


@pytest.fixture()
def frozen_clock(monkeypatch) -> SteppingClock:
    frozen = SteppingClock(datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc), timedelta(0))
    monkeypatch.setattr(mongo_mod, "_utcnow", frozen)
    return frozen
