from prometheus_client import Counter, Histogram, Info

from globalproxy.vars import SERVICE_NAME

PROXY_REQUESTS = Counter(
    "globalproxy_requests_total",
    "Proxied requests by method, response branch and outbound status",
    ["method", "branch", "status_code"],
)

UPSTREAM_LATENCY = Histogram(
    "globalproxy_upstream_seconds",
    "Time until the upstream response headers arrive",
    ["method"],
)

# Add app_name to the metrics
app_info = Info("fastapi_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME})


def record_outcome(method: str, branch: str, status_code: int) -> None:
    PROXY_REQUESTS.labels(method=method, branch=branch, status_code=str(status_code)).inc()
