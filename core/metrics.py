"""
Prometheus metrics for the license store service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Account metrics
accounts_registered_total = Counter(
    "accounts_registered_total",
    "Total accounts registered",
)

emails_confirmed_total = Counter(
    "emails_confirmed_total",
    "Total email addresses confirmed",
)

password_resets_total = Counter(
    "password_resets_total",
    "Total completed password resets",
)

login_attempts_total = Counter(
    "login_attempts_total",
    "Login attempts by outcome",
    ["outcome"],
)

emails_sent_total = Counter(
    "emails_sent_total",
    "Transactional emails by kind and outcome",
    ["kind", "outcome"],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["duration_type"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total first-time license activations",
)

license_admin_actions_total = Counter(
    "license_admin_actions_total",
    "Administrative license actions",
    ["action"],
)

license_key_collisions_total = Counter(
    "license_key_collisions_total",
    "Generated license keys rejected by the unique constraint",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
