"""Tests for the application bootstrap and the admin CLI."""
import pytest

from wordquiz.__main__ import main
from wordquiz.app import WordQuizApp
from wordquiz.models.dto import CreateQuizSessionDto
from wordquiz.services.quiz_service import QuizService
from wordquiz.services.word_service import WordService


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    """Keep the CLI from replacing pytest's log handlers."""
    return mocker.patch("wordquiz.__main__.setup_logging")


def test_app_start_stop(mocker) -> None:
    start_monitoring = mocker.patch("wordquiz.app.start_monitoring")
    app = WordQuizApp()

    app.start(metrics=True)
    assert app.running is True
    assert isinstance(app.words, WordService)
    assert isinstance(app.quiz, QuizService)
    start_monitoring.assert_called_once()

    app.stop()
    assert app.running is False
    assert app.db is None
    with pytest.raises(RuntimeError):
        app.words


def test_app_context_manager(mocker) -> None:
    start_monitoring = mocker.patch("wordquiz.app.start_monitoring")

    with WordQuizApp() as app:
        assert app.running is True

    assert app.running is False
    start_monitoring.assert_not_called()


def test_cli_seed_and_list_words(capsys) -> None:
    assert main(["seed"]) == 0
    assert "30 words imported" in capsys.readouterr().out

    assert main(["words"]) == 0
    out = capsys.readouterr().out
    assert "imagination" in out
    assert out.strip().endswith("30 words")


def test_cli_truncate_requires_confirmation(capsys) -> None:
    main(["seed"])
    capsys.readouterr()

    assert main(["truncate"]) == 1
    assert main(["truncate", "--yes"]) == 0
    assert "words: 30 rows deleted" in capsys.readouterr().out


def test_cli_sessions_and_stats(capsys) -> None:
    main(["seed"])
    with WordQuizApp() as app:
        session = app.quiz.create_session(CreateQuizSessionDto(name="Period 3", total_words=5))
        app.quiz.start_session(session.id)
        session_id = session.id
    capsys.readouterr()

    assert main(["sessions"]) == 0
    assert "Period 3" in capsys.readouterr().out

    assert main(["stats", str(session_id)]) == 0
    out = capsys.readouterr().out
    assert "Accuracy: 0.00%" in out
    assert "Average time: 0.00s" in out


def test_cli_stats_unknown_session(capsys) -> None:
    assert main(["stats", "999"]) == 2
    assert "Quiz session with ID 999 not found" in capsys.readouterr().err
