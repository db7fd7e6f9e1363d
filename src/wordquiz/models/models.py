"""Database models for the quiz platform."""
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from wordquiz.models.base import Base, TimestampMixin, utcnow


class Difficulty(str, Enum):
    """How hard a word is to unscramble."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizStatus(str, Enum):
    """Lifecycle states of a quiz session."""
    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"  # reserved, no transition produces it
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (QuizStatus.COMPLETED, QuizStatus.CANCELLED)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Word(Base, TimestampMixin):
    """Word bank entry."""

    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    text = Column(String, unique=True, nullable=False)
    clues = Column(JSON, nullable=False, default=list)  # ordered list of clue strings
    difficulty = Column(
        SAEnum(Difficulty, values_callable=_enum_values, native_enum=False),
        nullable=False,
        default=Difficulty.MEDIUM,
    )
    times_used = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Word id={self.id} text={self.text!r}>"


class QuizSession(Base, TimestampMixin):
    """A single classroom quiz run."""

    __tablename__ = "quiz_sessions"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    status = Column(
        SAEnum(QuizStatus, values_callable=_enum_values, native_enum=False),
        nullable=False,
        default=QuizStatus.PENDING,
    )
    current_word_id = Column(Integer, nullable=True)
    current_word_index = Column(Integer, nullable=False, default=0)
    used_word_ids = Column(JSON, nullable=False, default=list)  # selection order
    total_words = Column(Integer, nullable=False, default=10)
    correct_answers = Column(Integer, nullable=False, default=0)
    total_attempts = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True))
    ended_at = Column(DateTime(timezone=True))

    # Relationships
    attempts = relationship(
        "QuizAttempt",
        back_populates="session",
        order_by="QuizAttempt.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<QuizSession id={self.id} status={self.status}>"


class QuizAttempt(Base):
    """Append-only record of one submitted answer."""

    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("quiz_sessions.id"), nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    contestant_name = Column(String, nullable=False)
    answer = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    attempt_number = Column(Integer, nullable=False, default=1)
    time_spent = Column(Float, nullable=True)  # in seconds
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    session = relationship("QuizSession", back_populates="attempts")
    word = relationship("Word")
