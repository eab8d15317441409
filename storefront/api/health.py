"""
Health and readiness API endpoints
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

import psutil
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.db.mongodb import db, connect_to_mongo

router = APIRouter()

# Track service start time
start_time = time.time()

MEMORY_THRESHOLD_PERCENT = 90
DISK_THRESHOLD_PERCENT = 85


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": _now(),
        "version": config.api_version,
    }


@router.get("/health/live")
def liveness_check():
    """Liveness check: the process is up and serving"""
    return {
        "status": "alive",
        "service": config.service_name,
        "timestamp": _now(),
        "uptime": round(time.time() - start_time, 2),
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check: the database is reachable"""
    checks = await perform_health_checks()
    failed_checks = [check for check in checks if check["status"] == "unhealthy"]

    if not failed_checks:
        return {
            "status": "ready",
            "service": config.service_name,
            "timestamp": _now(),
            "checks": checks,
        }

    logger.warning(
        f"Readiness check failed - {len(failed_checks)} checks failed",
        metadata={
            "failed_checks": [check["name"] for check in failed_checks],
            "event": "readiness_check_failed"
        }
    )
    return JSONResponse(
        status_code=503,
        content={
            "status": "not ready",
            "service": config.service_name,
            "timestamp": _now(),
            "checks": checks,
            "errors": [f"{check['name']}: {check.get('error', 'Unknown error')}" for check in failed_checks],
        },
    )


async def perform_health_checks() -> List[Dict[str, Any]]:
    """Run dependency checks concurrently"""
    results = await asyncio.gather(
        check_database_health(),
        check_system_resources(),
        return_exceptions=True,
    )

    checks = []
    for result in results:
        if isinstance(result, Exception):
            checks.append({
                "name": "unknown_check",
                "status": "unhealthy",
                "error": str(result),
                "timestamp": _now(),
            })
        else:
            checks.append(result)
    return checks


async def check_database_health() -> Dict[str, Any]:
    """Check MongoDB connectivity"""
    check_start = time.time()

    try:
        if db.client is None:
            await connect_to_mongo()
        await db.client.admin.command("ping")

        return {
            "name": "database",
            "status": "healthy",
            "response_time_ms": round((time.time() - check_start) * 1000, 2),
            "database": config.mongodb_database,
            "timestamp": _now(),
        }

    except Exception as e:
        logger.error(
            f"Database health check failed: {e}",
            metadata={"event": "health_check_database_failed", "host": config.mongodb_host}
        )
        return {
            "name": "database",
            "status": "unhealthy",
            "error": str(e),
            "response_time_ms": round((time.time() - check_start) * 1000, 2),
            "timestamp": _now(),
        }


async def check_system_resources() -> Dict[str, Any]:
    """Check memory and disk pressure; pressure degrades but does not fail readiness"""
    process = psutil.Process()
    system_memory = psutil.virtual_memory()
    disk_usage = psutil.disk_usage("/")

    warnings = []
    if system_memory.percent > MEMORY_THRESHOLD_PERCENT:
        warnings.append(f"High system memory usage: {system_memory.percent:.1f}%")
    if disk_usage.percent > DISK_THRESHOLD_PERCENT:
        warnings.append(f"High disk usage: {disk_usage.percent:.1f}%")

    result = {
        "name": "system_resources",
        "status": "degraded" if warnings else "healthy",
        "metrics": {
            "process_memory_mb": round(process.memory_info().rss / 1024 / 1024, 2),
            "system_memory_percent": round(system_memory.percent, 2),
            "disk_usage_percent": round(disk_usage.percent, 2),
            "uptime_seconds": round(time.time() - start_time, 2),
        },
        "timestamp": _now(),
    }
    if warnings:
        result["warnings"] = warnings
    return result
