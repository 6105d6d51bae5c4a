"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone
from schemas.university import University


# ============================================================================
# ETL Run Schemas
# ============================================================================

class ETLRunSummary(BaseModel):
    """Outcome of a single ETL run"""
    status: str = Field(..., description="success or failed")
    trigger: str = Field("manual", description="What started the run: startup, schedule, manual")
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    records_fetched: int = 0
    records_normalized: int = 0
    records_total: int = Field(0, description="Records in the snapshot after the merge")
    error_message: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "trigger": "schedule",
                "started_at": "2024-01-15T00:00:00Z",
                "completed_at": "2024-01-15T00:00:12Z",
                "duration_seconds": 12.4,
                "records_fetched": 2312,
                "records_normalized": 2290,
                "records_total": 2290,
                "error_message": None,
            }
        }


# ============================================================================
# Data Schemas
# ============================================================================

class UniversityPageResponse(BaseModel):
    """Paginated slice of the snapshot"""
    items: List[University] = Field(default_factory=list)
    offset: int = 0
    limit: Optional[int] = None
    count: int = Field(0, description="Number of items in this page")


# ============================================================================
# Health Check Schemas
# ============================================================================

class SnapshotInfo(BaseModel):
    """State of the persisted snapshot"""
    path: str
    exists: bool
    records: int = 0


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall status: healthy, degraded")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    snapshot: SnapshotInfo
    etl_running: bool = False
    last_run: Optional[ETLRunSummary] = None
