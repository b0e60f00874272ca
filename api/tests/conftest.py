"""Pytest fixtures: in-memory SQLite database, seeded languages and a TestClient."""
import os
import random
import logging
import pytest
from fastapi.testclient import TestClient

logging.getLogger('sqlalchemy').setLevel(logging.ERROR)
logging.getLogger('sqlalchemy.engine').setLevel(logging.ERROR)

os.environ["DATABASE_URL"] = "sqlite://"

from sqlmodel import SQLModel, Session, select

from app.main import app
from app.core.database import engine, get_session, seed_languages
from app.models.models import Language, CardSet
from app.api.v1.endpoints.practice import get_rng
from app.services.practice_service import session_store


@pytest.fixture(scope="function")
def db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    session = Session(engine)
    seed_languages(session)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def rng():
    return random.Random(1234)


@pytest.fixture(scope="function")
def client(db, rng):
    app.dependency_overrides[get_session] = lambda: db
    app.dependency_overrides[get_rng] = lambda: rng
    yield TestClient(app)
    app.dependency_overrides = {}
    session_store.clear()


@pytest.fixture(scope="function")
def languages(db):
    """Seeded language ids keyed by ISO-2 code."""
    return {lang.iso_2: lang.id for lang in db.exec(select(Language)).all()}


@pytest.fixture(scope="function")
def card_set(db):
    card_set = CardSet(name="Italian basics", description="First words")
    db.add(card_set)
    db.commit()
    db.refresh(card_set)
    return card_set
