"""Pytest configuration and shared fixtures.

Provides an in-memory stand-in for the handful of motor collection calls the
service makes, plus an app client whose auth, database and catalog
dependencies are overridden.
"""

import asyncio
import copy
import itertools
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from codepets.auth.firebase_auth import Identity, get_current_identity
from codepets.courses.catalog import CourseCatalog, get_catalog
from codepets.database import get_db
from codepets.main import app


# =============================================================================
# In-memory database
# =============================================================================


def _matches(doc: dict, query: dict) -> bool:
    for key, value in query.items():
        if isinstance(value, dict) and "$exists" in value:
            if (key in doc) != value["$exists"]:
                return False
        elif doc.get(key) != value:
            return False
    return True


def _project(doc: dict, projection: Optional[dict]) -> dict:
    doc = copy.deepcopy(doc)
    if projection and projection.get("_id") == 0:
        doc.pop("_id", None)
    return doc


class FakeCursor:
    def __init__(self, docs: List[dict]):
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d.get(key, 0), reverse=direction < 0)
        return self

    async def to_list(self, length: Optional[int] = None) -> List[dict]:
        await asyncio.sleep(0)
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    _ids = itertools.count(1)

    def __init__(self, unique_key: Optional[str] = None):
        self.docs: List[dict] = []
        self.unique_key = unique_key
        self.replace_calls = 0

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def find_one(self, query: dict, projection: Optional[dict] = None) -> Optional[dict]:
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query: Optional[dict] = None, projection: Optional[dict] = None) -> FakeCursor:
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query or {})])

    async def insert_one(self, doc: dict) -> SimpleNamespace:
        key = self.unique_key
        if key and any(d.get(key) == doc.get(key) for d in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error: {key}")
        doc.setdefault("_id", next(self._ids))
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def replace_one(self, query: dict, replacement: dict) -> SimpleNamespace:
        self.replace_calls += 1
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                stored = copy.deepcopy(replacement)
                stored["_id"] = doc["_id"]
                self.docs[index] = stored
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeDatabase:
    def __init__(self):
        self.user_profiles = FakeCollection(unique_key="uid")
        self.courses = FakeCollection(unique_key="course_id")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def course_catalog() -> CourseCatalog:
    return CourseCatalog(ttl_seconds=3600)


@pytest.fixture
def identity() -> Identity:
    return Identity(uid="learner-1", email="learner@example.com")


@pytest.fixture
def client(fake_db, course_catalog, identity):
    """App client authenticated as `identity`."""
    async def override_db():
        return fake_db

    async def override_catalog():
        return course_catalog

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_catalog] = override_catalog
    app.dependency_overrides[get_current_identity] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db, course_catalog):
    """App client with the real token check in place."""
    async def override_db():
        return fake_db

    async def override_catalog():
        return course_catalog

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_catalog] = override_catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Java submissions for course 1
# =============================================================================


SOLUTIONS: Dict[int, str] = {
    1: """
public class Egg {
    private String color;
    private int size;
    private boolean hatched;
}
""",
    2: """
public class Egg {
    private String color;
    private int size;
    private boolean hatched;

    public Egg(String color, int size) {
        this.color = color;
        this.size = size;
        this.hatched = false;
    }
}
""",
    3: """
public class Egg {
    private String color;
    private int size;
    private boolean hatched;

    public String getColor() {
        return color;
    }

    public int getSize() {
        return this.size;
    }

    public boolean isHatched() {
        return hatched;
    }
}
""",
    4: """
public class Pet {
    private String name;
    private int energy;

    public Pet(String name) {
        this.name = name;
    }

    public void eat() {
        energy++;
    }
}
""",
    5: """
public class Egg {
    private boolean hatched;

    public Pet hatch() {
        this.hatched = true;
        return new Pet("Sparky");
    }
}
""",
    6: """
public class Dragon extends Pet {
    public Dragon(String name) {
        super(name);
    }

    @Override
    public void eat() {
        System.out.println("Chomp");
    }
}
""",
}


@pytest.fixture
def solutions() -> Dict[int, str]:
    return SOLUTIONS
