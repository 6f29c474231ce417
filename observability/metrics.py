# observability/metrics.py
# Prometheus metrics for brake samples, window state, trips, and the reaper.

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# --- Samples fed into the brake ---
samples_total = Counter(
    "ebrake_samples_total",
    "Health samples recorded, by outcome",
    ["outcome"]  # outcome=success|failure
)
check_latency_ms = Histogram(
    "ebrake_check_latency_ms",
    "Time spent running one health check (ms)",
    buckets=[0.5, 1, 2, 5, 10, 20, 50, 100, 200, 500, 1_000, 2_000, 5_000, 10_000]
)

# --- Window state (refreshed after every sample) ---
window_failures = Gauge(
    "ebrake_window_failures",
    "Failures currently inside the sample window"
)
window_samples = Gauge(
    "ebrake_window_samples",
    "Samples currently inside the sample window (<= window size)"
)

# --- Trips ---
brake_trips_total = Counter(
    "ebrake_trips_total",
    "Trip episodes reported by the monitor loop"
)
reaper_trips_total = Counter(
    "ebrake_reaper_trips_total",
    "Number of times the reaper triggered",
    ["reason"]
)

def serve_metrics(port: int = 9100):
    """Expose /metrics on http://localhost:<port>/metrics"""
    start_http_server(port)
