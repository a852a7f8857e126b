# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the module-level engine off disk before the application is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from forum_desk.api.v1.dependencies import ACTOR_HEADER, get_forum_service_dep
from forum_desk.core.settings import Settings
from forum_desk.db.session import Base
from forum_desk.db.store import SqlForumStore
from forum_desk.domain.entities import ParameterCategory
from forum_desk.main import app as fastapi_app
from forum_desk.services.forum import ForumService

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[Callable[[], Session]]:
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def store(session_factory: Callable[[], Session]) -> SqlForumStore:
    return SqlForumStore(session_factory)


@pytest.fixture()
def test_settings() -> Settings:
    """Settings with write-through rollback enabled, as in production."""
    return Settings(write_through_rollback=True)


@pytest.fixture()
def forum_service(store: SqlForumStore, test_settings: Settings) -> ForumService:
    return ForumService(store, test_settings)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, forum_service: ForumService) -> Iterator[TestClient]:
    app.dependency_overrides[get_forum_service_dep] = lambda: forum_service
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_forum_service_dep, None)


@pytest.fixture()
def as_user() -> Callable[[str], dict[str, str]]:
    """Build request headers naming the acting user."""

    def _headers(username: str) -> dict[str, str]:
        return {ACTOR_HEADER: username}

    return _headers


@pytest.fixture()
def categories() -> list[ParameterCategory]:
    return [ParameterCategory("Clarity", 0.5), ParameterCategory("Accuracy", 0.5)]
