"""Shared fixtures for reservoir tests."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reservoir import persist as P


@pytest.fixture
def storage() -> P.MemoryStorage:
    return P.MemoryStorage()


@pytest.fixture
def sql_storage() -> P.SQLAlchemyStorage:
    engine = create_engine("sqlite://")
    P.create_tables(engine)
    return P.SQLAlchemyStorage(sessionmaker(engine))
