# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipe_catalog` imports when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool

from recipe_catalog import models
from recipe_catalog.app import create_app
from recipe_catalog.config import Settings
from recipe_catalog.db import Database


@pytest.fixture
def database():
    # Use StaticPool so the same in-memory database is shared across connections
    db = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        data_file=str(tmp_path / "US_recipes.json"),
    )


@pytest.fixture
def add_recipes(database):
    """Insert rows directly and return their ids in insertion order."""

    def _add(*rows):
        with database.session() as db:
            recipes = [models.Recipe(**row) for row in rows]
            db.add_all(recipes)
            db.flush()
            ids = [r.id for r in recipes]
        return ids

    return _add


@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    with TestClient(app) as c:
        yield c
