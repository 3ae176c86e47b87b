"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.models.base import Base
from storefront.models.category import Category
from storefront.services.category_repository import CategoryRepository

# In-memory SQLite by default; point TEST_DATABASE_URL at PostgreSQL to match production
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def db_engine():
    """Create a fresh database engine with all tables for one test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so the TestClient threadpool sees the same in-memory database
        engine = create_engine(
            TEST_DATABASE_URL,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(TEST_DATABASE_URL, future=True, pool_pre_ping=True)

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing."""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def categories(db_session: Session) -> list[Category]:
    """Seed the catalog with two categories."""
    repository = CategoryRepository(db_session)
    return [
        repository.create("Electronics", display_order=0),
        repository.create("Home & Garden", display_order=1),
    ]
