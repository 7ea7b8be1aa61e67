import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "globalproxy")
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()

# Upstream request ceiling in seconds; a hung target never blocks longer than this
PROXY_TIMEOUT = float(os.environ.get("PROXY_TIMEOUT", "300"))

# Edge platforms inject their own request headers (Cloudflare: cf-*); these are
# never forwarded to the target
RESERVED_HEADER_PREFIXES = [
    p.strip().lower()
    for p in os.getenv("RESERVED_HEADER_PREFIXES", "cf-").split(",")
    if p.strip()
]

# Which peers may set X-Forwarded-Proto / X-Forwarded-For for uvicorn
FORWARDED_ALLOW_IPS = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")

METRICS_ENABLED = os.getenv("METRICS_ENABLED", "true").lower() == "true"
# Metrics are served on their own port; every path on PORT belongs to the proxy
METRICS_PORT = int(os.environ.get("METRICS_PORT", "9464"))

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")


def _parse_key_value_list(raw: str) -> dict:
    """Parse ``key=value,key2=value2`` into a dict, skipping malformed entries."""
    mapping: dict = {}
    if not raw:
        return mapping
    for entry in raw.split(","):
        entry = entry.strip()
        if "=" not in entry:
            continue
        key, val = entry.split("=", 1)
        key = key.strip()
        val = val.strip()
        if key and val:
            mapping[key] = val
    return mapping


OTLP_HEADERS = _parse_key_value_list(os.getenv("OTLP_HEADERS", ""))
