"""
System API Router - Status and configuration
"""

import logging
import time
from datetime import datetime
from typing import Dict

import psutil
from fastapi import APIRouter, Depends

from api.dependencies import get_config, get_managers
from api.exceptions import safe_endpoint
from schemas.system import CacheUsage, SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


def memory_usage() -> Dict[str, float]:
    """Process and system memory in MB"""
    rss = psutil.Process().memory_info().rss
    virtual_memory = psutil.virtual_memory()
    return {
        "process_mb": rss / 1024 / 1024,
        "system_percent": virtual_memory.percent,
        "available_mb": virtual_memory.available / 1024 / 1024,
    }


@router.get("/status")
@safe_endpoint
async def get_status(managers=Depends(get_managers)) -> SystemStatus:
    """Capture state, pending selection and cached file counts"""
    cache_usage = {
        kind: CacheUsage(**usage) for kind, usage in managers.file_cache.get_stats().items()
    }

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        capture_state=managers.capture_controller.state,
        selection_pending=managers.selection_picker.pending,
        memory_usage=memory_usage(),
        cache_usage=cache_usage,
    )


@router.get("/config")
@safe_endpoint
async def get_configuration(config=Depends(get_config)) -> dict:
    """Get current configuration"""
    return config


@router.get("/health")
async def health_check() -> dict:
    """Simple health check"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }
