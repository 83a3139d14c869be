"""Prometheus metrics for the IRRRL Gateway service.

Metrics are organized into two categories:

Business Metrics (for Lending Operations):
- irrrl_ntb_calculations_total: NTB calculations by outcome
- irrrl_eligibility_checks_total: Eligibility verifications by outcome
- irrrl_status_transitions_total: Workflow transitions by edge and outcome

Technical Metrics (for Engineering/SRE):
- irrrl_ntb_calculation_latency_seconds: NTB calculation latency
- irrrl_notification_latency_seconds: Notification delivery latency
- irrrl_notifications_total: Notification deliveries by status
- irrrl_notification_retry_total: Notification retries
- irrrl_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

ntb_calculations_total = Counter(
    "irrrl_ntb_calculations_total",
    "Total number of Net Tangible Benefit calculations",
    ["outcome"],  # pass, fail
)

eligibility_checks_total = Counter(
    "irrrl_eligibility_checks_total",
    "Total number of eligibility verifications",
    ["outcome"],  # eligible, ineligible
)

status_transitions_total = Counter(
    "irrrl_status_transitions_total",
    "Total number of requested status transitions",
    ["from_status", "to_status", "outcome"],  # accepted, rejected
)


# =============================================================================
# Technical Metrics
# =============================================================================

ntb_calculation_latency = Histogram(
    "irrrl_ntb_calculation_latency_seconds",
    "NTB calculation latency in seconds",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

notification_latency = Histogram(
    "irrrl_notification_latency_seconds",
    "Notification delivery latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

notifications_total = Counter(
    "irrrl_notifications_total",
    "Total number of notification deliveries",
    ["status"],  # success, failure
)

notification_retries = Counter(
    "irrrl_notification_retry_total",
    "Total number of notification retries",
)

http_requests_total = Counter(
    "irrrl_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "irrrl_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_ntb_calculation(passes: bool) -> None:
    """Record an NTB calculation outcome."""
    ntb_calculations_total.labels(outcome="pass" if passes else "fail").inc()


def record_eligibility_check(eligible: bool) -> None:
    """Record an eligibility verification outcome."""
    outcome = "eligible" if eligible else "ineligible"
    eligibility_checks_total.labels(outcome=outcome).inc()


def record_status_transition(from_status: str, to_status: str, accepted: bool) -> None:
    """Record a requested status transition."""
    status_transitions_total.labels(
        from_status=from_status,
        to_status=to_status,
        outcome="accepted" if accepted else "rejected",
    ).inc()


@contextmanager
def track_ntb_latency() -> Generator[None, None, None]:
    """Context manager to track NTB calculation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        ntb_calculation_latency.observe(time.perf_counter() - start)


@contextmanager
def track_notification_latency() -> Generator[None, None, None]:
    """Context manager to track notification delivery latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        notification_latency.observe(time.perf_counter() - start)


def record_notification_success() -> None:
    notifications_total.labels(status="success").inc()


def record_notification_failure() -> None:
    """Record a failed notification (after all retries)."""
    notifications_total.labels(status="failure").inc()


def record_notification_retry() -> None:
    notification_retries.inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
