"""
FastAPI Application - Storefront Service
Following FastAPI best practices with proper separation of concerns
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from storefront.core.config import config
from storefront.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)
from storefront.core.logger import logger
from storefront.core.telemetry import instrument_app
from storefront.db.indexes import create_indexes
from storefront.db.mongodb import db, connect_to_mongo, close_mongo_connection
from storefront.api import health, home, orders, products, reviews, users
from storefront.middleware import TraceContextMiddleware

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Storefront Service...")
    await connect_to_mongo()
    await create_indexes(db.database)

    logger.info(
        "Storefront Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    yield

    logger.info("Shutting down Storefront Service...")
    await close_mongo_connection()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        description="Product catalog, reviews and orders",
        version=config.service_version,
        lifespan=lifespan
    )

    instrument_app(app)

    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(TraceContextMiddleware)

    app.include_router(home.router, tags=["home"])
    app.include_router(health.router, tags=["health"])
    app.include_router(products.router, prefix=API_PREFIX)
    app.include_router(reviews.router, prefix=API_PREFIX)
    app.include_router(orders.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={"environment": config.environment, "port": config.port}
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
