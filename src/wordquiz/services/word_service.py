"""Service for managing the word bank."""
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordquiz.errors import NotFoundError, ValidationError
from wordquiz.models.dto import CreateWordDto, ImportResult, UpdateWordDto
from wordquiz.models.models import Difficulty, Word
from wordquiz.monitoring import words_imported
from wordquiz.services.word_selector import WordSelector

logger = logging.getLogger(__name__)

CLUE_SEPARATOR = "|"


def normalize_text(text: Optional[str]) -> str:
    """Strip surrounding whitespace; empty text is rejected."""
    text = (text or "").strip()
    if not text:
        raise ValidationError("Word text is required")
    return text


def normalize_clues(clues: Union[str, Sequence[str], None]) -> List[str]:
    """Turn a clue list or a ``|``-separated string into a clean ordered list."""
    if isinstance(clues, str):
        clues = clues.split(CLUE_SEPARATOR)
    cleaned = [clue.strip() for clue in clues or () if clue and clue.strip()]
    if not cleaned:
        raise ValidationError("At least one clue is required")
    return cleaned


def parse_difficulty(value: Union[str, Difficulty, None]) -> Difficulty:
    """Map user input onto a Difficulty, defaulting to medium."""
    if isinstance(value, Difficulty):
        return value
    if value is None or value == "":
        return Difficulty.MEDIUM
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown difficulty {value!r}, expected one of: "
            + ", ".join(d.value for d in Difficulty)
        ) from None


class WordService:
    """Service for managing words in the system."""

    def __init__(self, db: Session, selector: Optional[WordSelector] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.selector = selector or WordSelector(db)

    def get_word(self, word_id: int) -> Word:
        """Get a word by its ID."""
        word = self.db.query(Word).filter(Word.id == word_id).first()
        if word is None:
            raise NotFoundError(f"Word with ID {word_id} not found")
        return word

    def get_word_by_text(self, text: str) -> Optional[Word]:
        """Get a word by its text, ignoring case."""
        return (
            self.db.query(Word)
            .filter(func.lower(Word.text) == text.strip().lower())
            .first()
        )

    def _ensure_unique(self, text: str, word_id: Optional[int] = None) -> None:
        existing = self.get_word_by_text(text)
        if existing is not None and existing.id != word_id:
            raise ValidationError(f'Word "{text}" already exists')

    def create_word(self, dto: CreateWordDto) -> Word:
        """Create a new word bank entry."""
        text = normalize_text(dto.text)
        self._ensure_unique(text)

        word = Word(
            text=text,
            clues=normalize_clues(dto.clues),
            difficulty=parse_difficulty(dto.difficulty),
            is_active=dto.is_active,
        )
        self.db.add(word)
        self.db.commit()
        self.db.refresh(word)

        logger.info(f"Created word {word.id} ({word.text})")
        return word

    def list_words(self, active_only: bool = True) -> List[Word]:
        """List words, newest first."""
        query = self.db.query(Word)
        if active_only:
            query = query.filter(Word.is_active.is_(True))
        return query.order_by(Word.created_at.desc(), Word.id.desc()).all()

    def update_word(self, word_id: int, dto: UpdateWordDto) -> Word:
        """Update the fields set on ``dto``."""
        word = self.get_word(word_id)

        if dto.text is not None:
            text = normalize_text(dto.text)
            self._ensure_unique(text, word_id=word.id)
            word.text = text
        if dto.clues is not None:
            word.clues = normalize_clues(dto.clues)
        if dto.difficulty is not None:
            word.difficulty = parse_difficulty(dto.difficulty)
        if dto.is_active is not None:
            word.is_active = dto.is_active

        self.db.commit()
        self.db.refresh(word)
        return word

    def delete_word(self, word_id: int) -> None:
        """Hard-delete a word."""
        word = self.get_word(word_id)
        self.db.delete(word)
        self.db.commit()
        logger.info(f"Deleted word {word_id}")

    def bulk_delete(self, word_ids: Iterable[int]) -> int:
        """Delete several words at once and return how many rows went away."""
        ids = list(word_ids)
        if not ids:
            return 0

        deleted = (
            self.db.query(Word)
            .filter(Word.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Bulk deleted {deleted} of {len(ids)} requested words")
        return deleted

    def get_random_word(self, exclude_ids: Optional[Iterable[int]] = None) -> Word:
        """Pick a random active word that is not in ``exclude_ids``."""
        return self.selector.select(exclude_ids)

    def increment_usage(self, word_id: int) -> None:
        """Increment a word's usage counter."""
        self.selector.record_usage(word_id)
        self.db.commit()

    def get_word_count(self, active_only: bool = False) -> int:
        """Get the count of words in the database."""
        query = self.db.query(Word)
        if active_only:
            query = query.filter(Word.is_active.is_(True))
        return query.count()

    def import_words(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        """Import already-parsed rows into the word bank.

        Each row provides ``text``, ``clues`` (a list or a ``|``-separated string)
        and an optional ``difficulty``. Text is lower-cased. Rows are committed one
        at a time; invalid rows, duplicates and rows the database refuses are
        reported by 1-based row number and skipped.
        """
        errors: List[str] = []
        imported = 0

        for number, row in enumerate(rows, start=1):
            try:
                text = normalize_text(row.get("text")).lower()
                clues = normalize_clues(row.get("clues"))
                difficulty = parse_difficulty(row.get("difficulty"))
            except ValidationError as e:
                errors.append(f"Row {number}: {e.message}")
                continue

            if self.get_word_by_text(text) is not None:
                errors.append(f'Row {number}: Word "{text}" already exists')
                continue

            self.db.add(Word(text=text, clues=clues, difficulty=difficulty, is_active=True))
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.warning(f"Import row {number} ({text}) failed: {e}")
                errors.append(f"Row {number}: {getattr(e, 'orig', None) or e}")
                continue
            imported += 1

        words_imported.inc(imported)

        message = f"Import completed. {imported} words imported successfully."
        logger.info(f"{message} {len(errors)} rows rejected.")
        return ImportResult(message=message, imported=imported, errors=errors)
