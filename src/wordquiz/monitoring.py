"""Monitoring configuration for the quiz platform."""
from prometheus_client import Counter, Histogram, start_http_server

# Session metrics
sessions_created = Counter(
    "wordquiz_sessions_created_total",
    "Total number of quiz sessions created",
)

sessions_started = Counter(
    "wordquiz_sessions_started_total",
    "Total number of quiz sessions started",
)

sessions_finished = Counter(
    "wordquiz_sessions_finished_total",
    "Total number of quiz sessions that reached a terminal state",
    ["status"],
)

# Answer metrics
answers_submitted = Counter(
    "wordquiz_answers_total",
    "Total number of answers submitted",
    ["result"],
)

answer_time = Histogram(
    "wordquiz_answer_time_seconds",
    "Time contestants spent on an answer in seconds",
    buckets=[5, 10, 20, 30, 60, 120],
)

# Word bank metrics
words_selected = Counter(
    "wordquiz_words_selected_total",
    "Total number of words selected into quiz sessions",
)

words_imported = Counter(
    "wordquiz_words_imported_total",
    "Total number of words added through bulk import",
)

# Error metrics
error_count = Counter(
    "wordquiz_errors_total",
    "Total number of errors raised by the quiz core",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
