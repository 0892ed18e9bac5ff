"""Prometheus metrics for the Enrollment Gateway service.

Metrics are organized into two categories:

Business Metrics (for Admissions/Finance):
- enrollment_verification_total: Verifications by outcome
- enrollment_cohort_assignments_total: Learners assigned to a batch
- enrollment_latest_batch_number: Highest batch number assigned so far
- enrollment_installments_paid_total: Ledger installments settled

Technical Metrics (for Engineering/SRE):
- enrollment_verification_latency_seconds: Verification latency
- enrollment_gateway_verify_latency_seconds: Gateway verify latency
- enrollment_gateway_verify_failures_total: Gateway verify failures
- enrollment_store_step_failures_total: Post-payment steps that failed
- enrollment_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Admissions/Finance dashboards)
# =============================================================================

verification_total = Counter(
    "enrollment_verification_total",
    "Total number of payment verifications",
    ["outcome"],  # success, failed, replay
)

cohort_assignments_total = Counter(
    "enrollment_cohort_assignments_total",
    "Total number of learners assigned to a batch",
)

latest_batch_gauge = Gauge(
    "enrollment_latest_batch_number",
    "Highest batch number assigned by this process",
)

installments_paid_total = Counter(
    "enrollment_installments_paid_total",
    "Total number of scheduled installments marked paid",
    ["plan_id"],
)

# Track the highest batch seen for the gauge
_latest_batch_number = 0


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

verification_latency = Histogram(
    "enrollment_verification_latency_seconds",
    "Payment verification latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

gateway_verify_latency = Histogram(
    "enrollment_gateway_verify_latency_seconds",
    "Payment gateway verify latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

gateway_verify_failures = Counter(
    "enrollment_gateway_verify_failures_total",
    "Total number of payment gateway verify failures",
    ["error_type"],  # timeout, error, declined
)

gateway_verify_total = Counter(
    "enrollment_gateway_verify_total",
    "Total number of payment gateway verify requests",
    ["status"],  # success, failure
)

store_step_failures = Counter(
    "enrollment_store_step_failures_total",
    "Post-payment steps that did not complete",
    ["step"],  # cohort_assignment, payment_record, ledger_update
)

http_requests_total = Counter(
    "enrollment_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "enrollment_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_verification(outcome: str) -> None:
    """Record a verification outcome."""
    verification_total.labels(outcome=outcome).inc()


def record_cohort_assignment(batch_number: int) -> None:
    """Record a learner joining a batch."""
    global _latest_batch_number

    cohort_assignments_total.inc()
    if batch_number > _latest_batch_number:
        _latest_batch_number = batch_number
        latest_batch_gauge.set(batch_number)


def record_installment_paid(plan_id: str) -> None:
    installments_paid_total.labels(plan_id=plan_id).inc()


def record_store_step_failure(step: str) -> None:
    """Record a post-payment step that failed."""
    store_step_failures.labels(step=step).inc()


@contextmanager
def track_verification_latency() -> Generator[None, None, None]:
    """Context manager to track verification latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        verification_latency.observe(duration)


@contextmanager
def track_gateway_verify_latency() -> Generator[None, None, None]:
    """Context manager to track gateway verify latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        gateway_verify_latency.observe(duration)


def record_gateway_verify_success() -> None:
    """Record a successful gateway verify call."""
    gateway_verify_total.labels(status="success").inc()


def record_gateway_verify_failure(error_type: str) -> None:
    """Record a gateway verify failure."""
    gateway_verify_total.labels(status="failure").inc()
    gateway_verify_failures.labels(error_type=error_type).inc()


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
