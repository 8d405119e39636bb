"""Prometheus metrics for the deployment bucket reconciler."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "deployment_bucket_reconcile_total",
    "Total number of reconciliations",
    ["result"],
)

reconcile_duration_seconds = Histogram(
    "deployment_bucket_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# S3 mutation metrics
bucket_operations_total = Counter(
    "deployment_bucket_bucket_operations_total",
    "Total number of S3 bucket mutations",
    ["operation", "result"],
)

# Facets found out of line with the desired state
drift_detected_total = Counter(
    "deployment_bucket_drift_detected_total",
    "Total number of configuration drift detections",
    ["facet"],
)

# API call metrics
api_call_total = Counter(
    "deployment_bucket_api_call_total",
    "Total number of S3 API calls",
    ["operation", "result"],
)

api_call_duration_seconds = Histogram(
    "deployment_bucket_api_call_duration_seconds",
    "Duration of S3 API calls in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Error metrics
error_total = Counter(
    "deployment_bucket_error_total",
    "Total number of reconciliation errors",
    ["error_type"],
)
