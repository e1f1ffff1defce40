"""
Centralized Prometheus metrics definitions for the OGS client.

This module uses the prometheus-client library to define the metrics the
client records. Applications expose them with their own HTTP endpoint or
push gateway; the library never starts a metrics server itself.
"""
from prometheus_client import Counter, Histogram

# A common prefix for all library-specific metrics.
PREFIX = "ogs_client"

# --- REST Metrics ---

API_REQUESTS_TOTAL = Counter(
    f"{PREFIX}_api_requests_total",
    "Total number of REST requests sent, by endpoint and outcome.",
    ["endpoint", "outcome"],  # e.g., endpoint="game_state", outcome="ok" / "error"
)

API_REQUEST_DURATION_SECONDS = Histogram(
    f"{PREFIX}_api_request_duration_seconds",
    "Histogram of REST request latency, including retries.",
    ["endpoint"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, float("inf")),
)

TRANSIENT_ERRORS_TOTAL = Counter(
    f"{PREFIX}_transient_errors_total",
    "Total number of transient transport errors that triggered a retry.",
    ["operation"],
)

TIME_CONTROL_CACHE_TOTAL = Counter(
    f"{PREFIX}_time_control_cache_total",
    "Time-control lookups, by cache result.",
    ["result"],  # "hit" / "miss"
)

# --- Realtime Metrics ---

EVENTS_RECEIVED_TOTAL = Counter(
    f"{PREFIX}_events_received_total",
    "Total number of realtime pushes received, by event kind.",
    ["kind"],  # e.g., kind="gamedata", "move", "clock"
)

EVENT_DECODE_ERRORS_TOTAL = Counter(
    f"{PREFIX}_event_decode_errors_total",
    "Total number of realtime pushes dropped because they could not be decoded.",
    ["kind"],
)

COMMANDS_SENT_TOTAL = Counter(
    f"{PREFIX}_commands_sent_total",
    "Total number of realtime commands emitted, by command.",
    ["command"],
)
