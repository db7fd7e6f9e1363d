"""Application bootstrap."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from wordquiz.config import settings
from wordquiz.models.base import SessionLocal, init_db
from wordquiz.monitoring import start_monitoring
from wordquiz.services.quiz_service import QuizService
from wordquiz.services.word_service import WordService


class WordQuizApp:
    """Owns the database session and hands out services bound to it.

    Every service shares that one session, so the app serves a single thread.
    """

    def __init__(self):
        """Initialize the application."""
        self.db: Optional[Session] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def start(self, metrics: Optional[bool] = None) -> None:
        """Start the application."""
        if self.running:
            return

        init_db()
        self.db = SessionLocal()
        self.logger.info("Database initialized")

        if metrics is None:
            metrics = settings.monitoring.enabled
        if metrics:
            start_monitoring(settings.monitoring.port)
            self.logger.info(f"Metrics exposed on port {settings.monitoring.port}")

        self.running = True

    def stop(self) -> None:
        """Stop the application."""
        if not self.running:
            return

        if self.db:
            self.db.close()
            self.db = None
            self.logger.info("Database session closed")

        self.running = False

    def __enter__(self) -> "WordQuizApp":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _require_db(self) -> Session:
        if self.db is None:
            raise RuntimeError("Application is not started")
        return self.db

    @property
    def words(self) -> WordService:
        return WordService(self._require_db())

    @property
    def quiz(self) -> QuizService:
        return QuizService(self._require_db())
