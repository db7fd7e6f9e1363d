"""Quiz session lifecycle and scoring."""
import logging
import threading
from contextlib import contextmanager
from typing import ClassVar, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from wordquiz.config import settings
from wordquiz.errors import InvalidStateError, NotFoundError, ValidationError
from wordquiz.models.base import utcnow
from wordquiz.models.dto import (
    ContestantWordView,
    CreateQuizSessionDto,
    NextWord,
    OperatorWordView,
    SessionStats,
    SubmitAnswerDto,
    SubmitResult,
)
from wordquiz.models.models import QuizAttempt, QuizSession, QuizStatus, Word
from wordquiz.monitoring import (
    answer_time,
    answers_submitted,
    sessions_created,
    sessions_finished,
    sessions_started,
    words_selected,
)
from wordquiz.services.word_selector import WordSelector

logger = logging.getLogger(__name__)


def normalize_answer(text: str) -> str:
    """Comparison form of an answer: trimmed and case-insensitive."""
    return text.strip().lower()


class QuizSessionMachine:
    """Enforces the lifecycle of a quiz session.

    Every transition mutates the given session and commits once, so the session
    row, any new attempt and the usage counter land together.
    """

    def __init__(self, db: Session, selector: WordSelector):
        self.db = db
        self.selector = selector

    def current_word(self, session: QuizSession) -> Word:
        """Load the word the session currently presents."""
        word = self.db.get(Word, session.current_word_id)
        if word is None:
            raise NotFoundError(f"Word with ID {session.current_word_id} not found")
        return word

    def _require_active(self, session: QuizSession) -> None:
        if session.status != QuizStatus.ACTIVE:
            raise InvalidStateError("Session is not active")

    def _complete(self, session: QuizSession) -> None:
        session.status = QuizStatus.COMPLETED
        session.ended_at = utcnow()
        sessions_finished.labels(status=QuizStatus.COMPLETED.value).inc()
        logger.info(
            f"Session {session.id} completed: {session.correct_answers}/"
            f"{session.total_attempts} correct"
        )

    def _advance_to(self, session: QuizSession, word: Word) -> None:
        session.current_word_id = word.id
        # Reassign so the JSON column is flagged as changed
        session.used_word_ids = [*session.used_word_ids, word.id]
        self.selector.record_usage(word.id)
        words_selected.inc()

    def start(self, session: QuizSession) -> QuizSession:
        """Move a PENDING session to ACTIVE with a freshly selected first word."""
        if session.status != QuizStatus.PENDING:
            raise InvalidStateError("Session can only be started from PENDING status")

        word = self.selector.select()

        session.status = QuizStatus.ACTIVE
        session.current_word_index = 0
        session.used_word_ids = []
        session.started_at = utcnow()
        self._advance_to(session, word)
        self.db.commit()

        sessions_started.inc()
        logger.info(f"Session {session.id} started with word {word.id}")
        return session

    def submit_answer(self, session: QuizSession, dto: SubmitAnswerDto) -> SubmitResult:
        """Evaluate an answer, log the attempt and move the session along.

        A correct answer advances to a new word. A wrong answer keeps the same
        word for a retry, except on the last word of the budget where any answer
        completes the session.
        """
        self._require_active(session)
        if session.current_word_id is None:
            raise InvalidStateError("No current word in session")

        contestant = dto.contestant_name.strip() if isinstance(dto.contestant_name, str) else ""
        if not contestant:
            raise ValidationError("Contestant name is required")
        if not isinstance(dto.answer, str):
            raise ValidationError("Answer must be text")
        if dto.time_spent is not None:
            if isinstance(dto.time_spent, bool) or not isinstance(dto.time_spent, (int, float)):
                raise ValidationError("Time spent must be a number of seconds")
            if dto.time_spent < 0:
                raise ValidationError("Time spent cannot be negative")

        word = self.current_word(session)
        is_correct = normalize_answer(dto.answer) == normalize_answer(word.text)

        previous = (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.session_id == session.id, QuizAttempt.word_id == word.id)
            .count()
        )
        self.db.add(
            QuizAttempt(
                session_id=session.id,
                word_id=word.id,
                contestant_name=contestant,
                answer=dto.answer,
                is_correct=is_correct,
                attempt_number=previous + 1,
                time_spent=dto.time_spent,
            )
        )

        session.total_attempts += 1
        if is_correct:
            session.correct_answers += 1

        answers_submitted.labels(result="correct" if is_correct else "incorrect").inc()
        if dto.time_spent is not None:
            answer_time.observe(dto.time_spent)
        logger.debug(
            f"Session {session.id}: {contestant} answered {dto.answer!r} for word "
            f"{word.id} ({'correct' if is_correct else 'incorrect'})"
        )

        result = SubmitResult(is_correct=is_correct, correct_answer=word.text)
        is_last_word = session.current_word_index >= session.total_words - 1

        if is_last_word:
            self._complete(session)
            result.session_complete = True
        elif is_correct:
            try:
                next_word = self.selector.select(session.used_word_ids)
            except NotFoundError:
                logger.info(f"Session {session.id} ran out of words before its budget")
                self._complete(session)
                result.session_complete = True
            else:
                session.current_word_index += 1
                self._advance_to(session, next_word)
                result.next_word = NextWord(
                    word=next_word,
                    scrambled=self.selector.scramble(next_word.text),
                )

        self.db.commit()
        return result

    def end(self, session: QuizSession) -> QuizSession:
        """Force a session to COMPLETED from any non-terminal state."""
        if session.status == QuizStatus.COMPLETED:
            raise InvalidStateError("Session is already completed")
        if session.status == QuizStatus.CANCELLED:
            raise InvalidStateError("Session was cancelled")

        self._complete(session)
        self.db.commit()
        return session

    def cancel(self, session: QuizSession) -> QuizSession:
        """Abandon a session that has not finished yet."""
        if session.status.is_terminal:
            raise InvalidStateError(f"Session is already {session.status.value}")

        session.status = QuizStatus.CANCELLED
        session.ended_at = utcnow()
        self.db.commit()

        sessions_finished.labels(status=QuizStatus.CANCELLED.value).inc()
        logger.info(f"Session {session.id} cancelled")
        return session

    def update_current_word(self, session: QuizSession, word_id: int) -> QuizSession:
        """Operator override of the current word. Index and used ids stay as they are."""
        self._require_active(session)

        session.current_word_id = word_id
        self.db.commit()

        logger.info(f"Session {session.id} current word overridden to {word_id}")
        return session

    def stats(self, session: QuizSession) -> SessionStats:
        """Accuracy in percent and mean answer time, both to 2 decimals.

        Attempts without a recorded time count as 0 seconds.
        """
        accuracy = 0.0
        if session.total_attempts > 0:
            accuracy = session.correct_answers / session.total_attempts * 100

        times = [
            time_spent or 0
            for (time_spent,) in self.db.query(QuizAttempt.time_spent)
            .filter(QuizAttempt.session_id == session.id)
            .all()
        ]
        average_time = sum(times) / len(times) if times else 0.0

        return SessionStats(
            session=session,
            accuracy=round(accuracy, 2),
            average_time=round(average_time, 2),
        )


class QuizService:
    """Service for managing quiz sessions by ID.

    Mutating calls on one quiz session are serialized by a per-session lock
    shared by every instance. The lock does not make the SQLAlchemy ``Session``
    thread-safe: a thread must use its own service built on its own
    ``SessionLocal()``.
    """

    # Mutations of one session are serialized across service instances
    _session_locks: ClassVar[Dict[int, threading.Lock]] = {}
    _locks_guard = threading.Lock()

    def __init__(self, db: Session, selector: Optional[WordSelector] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.selector = selector or WordSelector(db)
        self.machine = QuizSessionMachine(db, self.selector)

    @contextmanager
    def _locked(self, session_id: int) -> Iterator[QuizSession]:
        with self._locks_guard:
            lock = self._session_locks.setdefault(session_id, threading.Lock())
        with lock:
            session = None
            try:
                session = self.get_session(session_id)
                # Pick up writes made through other database sessions
                self.db.refresh(session)
                yield session
            finally:
                # Missing and terminal sessions accept no further mutation
                if session is None or session.status.is_terminal:
                    with self._locks_guard:
                        if self._session_locks.get(session_id) is lock:
                            del self._session_locks[session_id]

    def create_session(self, dto: CreateQuizSessionDto) -> QuizSession:
        """Create a PENDING session."""
        name = (dto.name or "").strip()
        if not name:
            raise ValidationError("Session name is required")

        total_words = dto.total_words
        if total_words is None:
            total_words = settings.quiz.default_total_words
        if isinstance(total_words, bool) or not isinstance(total_words, int):
            raise ValidationError("Total words must be a whole number")
        if not 1 <= total_words <= settings.quiz.max_total_words:
            raise ValidationError(
                f"Total words must be between 1 and {settings.quiz.max_total_words}"
            )

        session = QuizSession(
            name=name,
            status=QuizStatus.PENDING,
            current_word_index=0,
            used_word_ids=[],
            total_words=total_words,
            correct_answers=0,
            total_attempts=0,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        sessions_created.inc()
        logger.info(f"Created session {session.id} ({name}, {total_words} words)")
        return session

    def list_sessions(self) -> List[QuizSession]:
        """List sessions, newest first."""
        return (
            self.db.query(QuizSession)
            .order_by(QuizSession.created_at.desc(), QuizSession.id.desc())
            .all()
        )

    def get_session(self, session_id: int) -> QuizSession:
        """Get a session by its ID."""
        session = self.db.get(QuizSession, session_id)
        if session is None:
            raise NotFoundError(f"Quiz session with ID {session_id} not found")
        return session

    def start_session(self, session_id: int) -> QuizSession:
        with self._locked(session_id) as session:
            return self.machine.start(session)

    def submit_answer(self, session_id: int, dto: SubmitAnswerDto) -> SubmitResult:
        with self._locked(session_id) as session:
            return self.machine.submit_answer(session, dto)

    def end_session(self, session_id: int) -> QuizSession:
        with self._locked(session_id) as session:
            return self.machine.end(session)

    def cancel_session(self, session_id: int) -> QuizSession:
        with self._locked(session_id) as session:
            return self.machine.cancel(session)

    def update_current_word(self, session_id: int, word_id: int) -> QuizSession:
        with self._locked(session_id) as session:
            return self.machine.update_current_word(session, word_id)

    def get_session_stats(self, session_id: int) -> SessionStats:
        return self.machine.stats(self.get_session(session_id))

    def _view_fields(self, session: QuizSession) -> Tuple[dict, Word]:
        if session.status != QuizStatus.ACTIVE:
            raise InvalidStateError("Session is not active")
        if session.current_word_id is None:
            raise InvalidStateError("No current word in session")

        word = self.machine.current_word(session)
        return dict(
            session_id=session.id,
            word_id=word.id,
            scrambled=self.selector.scramble(word.text),
            clues=list(word.clues),
            difficulty=word.difficulty,
            current_word_index=session.current_word_index,
            total_words=session.total_words,
        ), word

    def get_current_word(self, session_id: int) -> ContestantWordView:
        """Current word for contestants: scrambled form and clues, no answer."""
        fields, _ = self._view_fields(self.get_session(session_id))
        return ContestantWordView(**fields)

    def get_current_word_for_operator(self, session_id: int) -> OperatorWordView:
        """Current word for the quiz master, including the answer."""
        fields, word = self._view_fields(self.get_session(session_id))
        return OperatorWordView(**fields, correct_word=word.text)

    def get_active_current_word(self) -> Optional[OperatorWordView]:
        """Operator view of the most recently created active session, if any."""
        session = (
            self.db.query(QuizSession)
            .filter(QuizSession.status == QuizStatus.ACTIVE)
            .order_by(QuizSession.created_at.desc(), QuizSession.id.desc())
            .first()
        )
        if session is None or session.current_word_id is None:
            return None
        return self.get_current_word_for_operator(session.id)
