"""Prometheus metrics for command outcomes, classifier health and loan simulations"""

from prometheus_client import Counter, Histogram

# Command metrics
command_counter = Counter(
    "finbridge_command_total",
    "Commands executed by the safety gate",
    ["intent", "action"],
)

ambiguous_amount_counter = Counter(
    "finbridge_ambiguous_amount_total",
    "Mutating commands rejected for a missing amount",
)

local_fallback_counter = Counter(
    "finbridge_local_fallback_total",
    "Commands interpreted by the local normalizer instead of the remote classifier",
)

# Remote model metrics
candidate_failure_counter = Counter(
    "finbridge_model_candidate_failures_total",
    "Model candidates that errored or returned unusable output",
    ["model"],
)

cascade_exhausted_counter = Counter(
    "finbridge_model_cascade_exhausted_total",
    "Cascades in which every candidate failed",
)

narration_fallback_counter = Counter(
    "finbridge_narration_fallback_total",
    "Advisory narrations replaced by the deterministic fallback sentence",
)

model_latency_histogram = Histogram(
    "finbridge_model_latency_seconds",
    "Remote model response time",
    ["model"],
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

# Loan metrics
loan_simulation_counter = Counter(
    "finbridge_loan_simulation_total",
    "Loan simulations by projected risk level",
    ["risk_level"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_command(intent: str, action: str) -> None:
    command_counter.labels(intent=intent, action=action).inc()
