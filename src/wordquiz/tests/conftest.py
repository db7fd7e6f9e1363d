"""Test configuration."""
import os
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///wordquiz_test.db"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from faker import Faker
from sqlalchemy.orm import Session

from wordquiz.models.base import SessionLocal, drop_db, engine, init_db
from wordquiz.models.models import Difficulty, Word

fake = Faker()


@pytest.fixture(autouse=True)
def setup_database():
    """Drop and recreate the schema around each test."""
    fake.unique.clear()
    engine.dispose()
    drop_db()
    init_db()

    yield

    engine.dispose()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_word(db: Session):
    """Factory for persisted words."""

    def _make_word(text=None, clues=None, difficulty=Difficulty.MEDIUM, is_active=True) -> Word:
        word = Word(
            text=text or fake.unique.word() + "x",
            clues=clues or [fake.sentence()],
            difficulty=difficulty,
            is_active=is_active,
        )
        db.add(word)
        db.commit()
        db.refresh(word)
        return word

    return _make_word
