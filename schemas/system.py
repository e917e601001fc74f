"""
System and picker API models.
"""

from typing import Dict, Optional

from pydantic import BaseModel

from core.enums import CaptureState, MediaType, SourceType


class CacheUsage(BaseModel):
    """File count of one media kind"""

    count: int
    max_files: int


class SystemStatus(BaseModel):
    """System status"""

    status: str
    uptime: float
    capture_state: CaptureState
    selection_pending: bool = False
    memory_usage: Dict[str, float]
    cache_usage: Dict[str, CacheUsage]


class PendingSelection(BaseModel):
    """Selection a capture session is waiting for"""

    pending: bool
    source_type: Optional[SourceType] = None
    media_type: Optional[MediaType] = None
    allows_editing: bool = False
