"""
OpenTelemetry Instrumentation for FastAPI

Creates spans for inbound requests and MongoDB operations.
Trace export is configured through the standard OTEL_* environment variables.
"""

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

from storefront.core.logger import logger


def instrument_app(app):
    """
    Instrument FastAPI application with OpenTelemetry for automatic span creation.

    Args:
        app: FastAPI application instance
    """
    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented with OpenTelemetry")

        # Motor drives PyMongo underneath, so this covers every collection call
        PymongoInstrumentor().instrument()
        logger.info("PyMongo instrumented with OpenTelemetry")

    except Exception as e:
        logger.error(f"Failed to instrument application: {e}", error=e)
