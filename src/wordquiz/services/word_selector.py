"""Random word selection and scrambling for quiz sessions."""
import logging
import random
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wordquiz.errors import NotFoundError
from wordquiz.models.models import Word

logger = logging.getLogger(__name__)


def can_scramble(text: str) -> bool:
    """Whether any permutation of ``text`` differs from it.

    Needs at least two distinct characters; ``"A"`` and ``"AAA"`` have a single
    distinct permutation.
    """
    return len(set(text)) > 1


class WordSelector:
    """Picks unused active words and renders their scrambled form."""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        """Initialize the selector with a database session."""
        self.db = db
        self.rng = rng or random.Random()

    def select(self, exclude_ids: Optional[Iterable[int]] = None) -> Word:
        """Choose an active word uniformly at random, skipping ``exclude_ids``.

        Raises:
            NotFoundError: when every active word is excluded or the pool is empty.
        """
        exclude = set(exclude_ids or ())
        query = self.db.query(Word).filter(Word.is_active.is_(True))
        if exclude:
            query = query.filter(Word.id.notin_(list(exclude)))

        word = query.order_by(func.random()).limit(1).first()
        if word is None:
            logger.info(f"Word pool exhausted ({len(exclude)} excluded)")
            raise NotFoundError("No available words found")

        logger.debug(f"Selected word {word.id} ({len(exclude)} excluded)")
        return word

    def scramble(self, text: str) -> str:
        """Return a permutation of ``text`` that differs from it.

        Words that cannot produce a different permutation come back unchanged.
        """
        if not can_scramble(text):
            return text

        letters = list(text)
        while True:
            # Fisher-Yates: swap each position with a random earlier-or-equal one
            for i in range(len(letters) - 1, 0, -1):
                j = self.rng.randint(0, i)
                letters[i], letters[j] = letters[j], letters[i]
            scrambled = "".join(letters)
            if scrambled != text:
                return scrambled

    def record_usage(self, word_id: int) -> None:
        """Increment the usage counter of a word.

        Missing words are ignored. The caller commits.
        """
        updated = (
            self.db.query(Word)
            .filter(Word.id == word_id)
            .update({Word.times_used: Word.times_used + 1}, synchronize_session=False)
        )
        if not updated:
            logger.warning(f"Usage not recorded, word {word_id} no longer exists")
