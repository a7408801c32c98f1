"""Prometheus metrics for the training engine."""
import logging

from prometheus_client import Counter, Histogram, start_http_server

from vocabtrainer.config import settings

logger = logging.getLogger(__name__)

# Session metrics
sessions_started = Counter(
    "vocabtrainer_sessions_started_total",
    "Total number of training sessions started",
    ["review_mode"],
)

sessions_completed = Counter(
    "vocabtrainer_sessions_completed_total",
    "Total number of completion calls on training sessions",
    ["review_mode"],
)

sessions_pruned = Counter(
    "vocabtrainer_sessions_pruned_total",
    "Total number of training sessions deleted by retention pruning",
)

session_size = Histogram(
    "vocabtrainer_session_size_words",
    "Number of words actually selected for a training session",
    ["review_mode"],
    buckets=[0, 1, 5, 10, 15, 25, 50],
)

# Progress metrics
results_recorded = Counter(
    "vocabtrainer_results_recorded_total",
    "Total number of training results recorded",
    ["result"],
)

mastery_transitions = Counter(
    "vocabtrainer_mastery_transitions_total",
    "Total number of mastery level promotions",
    ["from_level", "to_level"],
)

# Error metrics
error_count = Counter(
    "vocabtrainer_errors_total",
    "Total number of errors raised by training operations",
    ["error_type"],
)


def start_metrics_server(port: int = None) -> bool:
    """Expose metrics over HTTP if monitoring is enabled."""
    if not settings.monitoring.enabled:
        logger.debug("Metrics server disabled")
        return False
    port = port or settings.monitoring.port
    start_http_server(port)
    logger.info(f"Metrics server listening on port {port}")
    return True
