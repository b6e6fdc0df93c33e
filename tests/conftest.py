"""Shared fixtures: a throwaway SQLite database and user helpers."""
from __future__ import annotations

import os
from datetime import datetime
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_socialgraph.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from socialgraph.database import Base, SessionLocal, engine  # noqa: E402
from socialgraph.main import app  # noqa: E402
from socialgraph.models import Post, PostComment, PostLike, Relationship, SavedPost, User  # noqa: E402
from socialgraph.services import get_current_user  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (SavedPost, PostLike, PostComment, Post, Relationship, User):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def db() -> Iterator[Session]:
    with SessionLocal() as session:
        yield session


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(username: str, **fields) -> User:
        with SessionLocal() as session:
            user = User(
                username=username,
                hashed_password="test-hash",
                display_name=fields.pop("display_name", username.title()),
                handle=fields.pop("handle", f"@{username}"),
                **fields,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _factory


@pytest.fixture
def post_factory() -> Callable[..., Post]:
    def _factory(author: User, content: str, *, created_at: datetime | None = None) -> Post:
        with SessionLocal() as session:
            post = Post(author_id=author.id, content=content)
            if created_at is not None:
                post.created_at = created_at
            session.add(post)
            session.commit()
            session.refresh(post)
            return post

    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:

        def _with_user(user: User) -> TestClient:
            app.dependency_overrides[get_current_user] = lambda: user
            return client

        yield _with_user
    app.dependency_overrides.clear()
