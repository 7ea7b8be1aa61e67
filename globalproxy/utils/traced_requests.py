import logging
from contextlib import contextmanager

from opentelemetry.trace import Tracer

logger = logging.getLogger("uvicorn.error")


@contextmanager
def traced_request(
    tracer: Tracer,
    operation: str,
    method: str,
    start_message: str,
):
    """Context manager to create a span, set common attributes, and log a start message."""
    with tracer.start_as_current_span(operation) as span:
        span.set_attribute("proxy.method", method)
        logger.debug(start_message)
        yield span
