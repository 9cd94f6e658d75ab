"""Prometheus metrics for the sourcing engine."""

from prometheus_client import Counter, Histogram, Info

from .. import __version__

app_info = Info("sourcewise_app", "Application information")
app_info.info({"version": __version__, "service": "sourcewise"})

# =============================================================================
# Request Metrics
# =============================================================================

requests_total = Counter(
    "sourcewise_requests_total",
    "Total number of API requests",
    ["endpoint", "method", "status"],
)

request_duration_seconds = Histogram(
    "sourcewise_request_duration_seconds",
    "Request duration in seconds",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# =============================================================================
# Matching Metrics
# =============================================================================

match_runs_total = Counter(
    "sourcewise_match_runs_total",
    "Total supplier ranking runs",
)

suppliers_matched_total = Counter(
    "sourcewise_suppliers_matched_total",
    "Suppliers scored across all ranking runs",
)

suppliers_skipped_total = Counter(
    "sourcewise_suppliers_skipped_total",
    "Supplier records skipped because they failed validation",
)

# =============================================================================
# Negotiation Metrics
# =============================================================================

collaborator_calls_total = Counter(
    "sourcewise_collaborator_calls_total",
    "External collaborator calls by outcome",
    ["collaborator", "outcome"],  # outcome: success/fallback/circuit_open
)

analysis_duration_seconds = Histogram(
    "sourcewise_analysis_duration_seconds",
    "Complex RFQ analysis time in seconds",
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)


def record_request(endpoint: str, method: str, status: int, duration: float) -> None:
    """Record an API request."""
    requests_total.labels(endpoint=endpoint, method=method, status=str(status)).inc()
    request_duration_seconds.labels(endpoint=endpoint).observe(duration)


def record_match_run(matched: int, skipped: int) -> None:
    """Record one ranking run."""
    match_runs_total.inc()
    suppliers_matched_total.inc(matched)
    if skipped:
        suppliers_skipped_total.inc(skipped)


def record_collaborator_call(collaborator: str, outcome: str) -> None:
    """Record the outcome of one collaborator call."""
    collaborator_calls_total.labels(collaborator=collaborator, outcome=outcome).inc()
