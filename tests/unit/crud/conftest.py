"""Shared fixtures for crud unit tests"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdarticle.crud.models import Article, ArticleKind, Category


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="category")
def category_fixture(session):
    c = Category(name="tech", slug="tech")
    session.add(c)
    session.flush()
    return c


@pytest.fixture(name="article")
def article_fixture(session, category):
    """A post in the 'tech' category persisted to the session."""
    a = Article(
        kind=ArticleKind.post,
        title="Hello",
        slug="hello",
        text="# Hello\n\n!!secret!!",
        created=datetime(2024, 1, 1),
        modified=datetime(2024, 1, 2),
        category_id=category.id,
        extra={"tags": ["x"]},
    )
    session.add(a)
    session.flush()
    return a
