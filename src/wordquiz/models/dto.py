"""Request and response records passed across the service boundary."""
from dataclasses import dataclass, field
from typing import List, Optional

from wordquiz.models.models import Difficulty, QuizSession, Word


@dataclass
class CreateWordDto:
    """Fields for a new word bank entry."""
    text: str
    clues: List[str]
    difficulty: Difficulty = Difficulty.MEDIUM
    is_active: bool = True


@dataclass
class UpdateWordDto:
    """Partial update; None leaves the field untouched."""
    text: Optional[str] = None
    clues: Optional[List[str]] = None
    difficulty: Optional[Difficulty] = None
    is_active: Optional[bool] = None


@dataclass
class ImportResult:
    """Outcome of a bulk import."""
    message: str
    imported: int
    errors: List[str] = field(default_factory=list)


@dataclass
class CreateQuizSessionDto:
    """Fields for a new quiz session."""
    name: str
    total_words: Optional[int] = None


@dataclass
class SubmitAnswerDto:
    """One contestant answer."""
    contestant_name: str
    answer: str
    time_spent: Optional[float] = None


@dataclass
class NextWord:
    """Word chosen after an advance, with its scrambled display form."""
    word: Word
    scrambled: str


@dataclass
class SubmitResult:
    """Outcome of evaluating a submitted answer."""
    is_correct: bool
    correct_answer: str
    next_word: Optional[NextWord] = None
    session_complete: bool = False


@dataclass
class ContestantWordView:
    """Current word as shown to contestants; never carries the answer."""
    session_id: int
    word_id: int
    scrambled: str
    clues: List[str]
    difficulty: Difficulty
    current_word_index: int
    total_words: int


@dataclass
class OperatorWordView(ContestantWordView):
    """Current word as shown to the quiz master."""
    correct_word: str = ""


@dataclass
class SessionStats:
    """Derived scoring figures for a session."""
    session: QuizSession
    accuracy: float
    average_time: float
