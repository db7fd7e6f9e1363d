"""Tests for seeding and truncation."""
from sqlalchemy.orm import Session

from wordquiz.models.dto import CreateQuizSessionDto
from wordquiz.models.models import QuizAttempt, QuizSession, Word
from wordquiz.seed import SAMPLE_WORDS, seed_words, truncate_tables
from wordquiz.services.quiz_service import QuizService


def test_seed_words(db: Session) -> None:
    result = seed_words(db)

    assert result.imported == len(SAMPLE_WORDS) == 30
    assert result.errors == []
    assert db.query(Word).filter(Word.text == "elephant").one().clues == [
        "A large animal with a trunk",
        "It never forgets",
    ]


def test_seed_words_is_idempotent(db: Session) -> None:
    seed_words(db)

    result = seed_words(db)

    assert result.imported == 0
    assert len(result.errors) == len(SAMPLE_WORDS)
    assert db.query(Word).count() == len(SAMPLE_WORDS)


def test_truncate_tables(db: Session) -> None:
    seed_words(db)
    quiz = QuizService(db)
    session = quiz.create_session(CreateQuizSessionDto(name="Demo", total_words=3))
    quiz.start_session(session.id)
    quiz.end_session(session.id)
    db.add(
        QuizAttempt(
            session_id=session.id,
            word_id=session.current_word_id,
            contestant_name="Solo",
            answer="x",
            is_correct=False,
        )
    )
    db.commit()

    counts = truncate_tables(db)

    assert counts == {"quiz_attempts": 1, "quiz_sessions": 1, "words": len(SAMPLE_WORDS)}
    assert db.query(Word).count() == 0
    assert db.query(QuizSession).count() == 0
