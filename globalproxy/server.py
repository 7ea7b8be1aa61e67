from typing import Sequence

import uvicorn
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from prometheus_client import start_http_server

from globalproxy.routes import router
from globalproxy.vars import (
    FORWARDED_ALLOW_IPS,
    HOST,
    LOG_LEVEL,
    METRICS_ENABLED,
    METRICS_PORT,
    OTLP_ENDPOINT,
    OTLP_HEADERS,
    PORT,
    SERVICE_NAME,
)

app = FastAPI(title=SERVICE_NAME, docs_url=None, redoc_url=None, openapi_url=None)


class FilteringSpanExporter(SpanExporter):
    """
    Wrapper exporter that filters out noisy ASGI body spans.
    Relayed upstream bodies are sent chunk by chunk, which would otherwise
    produce one span per chunk.
    """

    def __init__(self, exporter: SpanExporter):
        self.exporter = exporter

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        filtered_spans = [
            span
            for span in spans
            if not (
                span.attributes
                and span.attributes.get("asgi.event.type") == "http.response.body"
            )
        ]
        if filtered_spans:
            return self.exporter.export(filtered_spans)
        return SpanExportResult.SUCCESS

    def shutdown(self):
        return self.exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000):
        return self.exporter.force_flush(timeout_millis)


trace.set_tracer_provider(
    TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
)
tracer_provider = trace.get_tracer_provider()
if OTLP_ENDPOINT:
    otlp_exporter = OTLPSpanExporter(
        endpoint=OTLP_ENDPOINT,
        headers=OTLP_HEADERS or None,
    )
    tracer_provider.add_span_processor(
        BatchSpanProcessor(FilteringSpanExporter(otlp_exporter))
    )

FastAPIInstrumentor.instrument_app(app)

app.include_router(router)


def run() -> None:
    """Serve the proxy with uvicorn; forwarded headers decide the inbound scheme."""
    if METRICS_ENABLED:
        start_http_server(METRICS_PORT, addr=HOST)
    uvicorn.run(
        "globalproxy.server:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL,
        proxy_headers=True,
        forwarded_allow_ips=FORWARDED_ALLOW_IPS,
    )


if __name__ == "__main__":
    run()
