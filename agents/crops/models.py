# agents/crops/models.py
"""
Pydantic models for crop lifecycle agent
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class CropStatus(str, Enum):
    PLANTED = "planted"
    GROWING = "growing"
    READY = "ready"
    HARVESTED = "harvested"


class StatusSource(str, Enum):
    DERIVED = "derived"
    MANUAL = "manual"


class ResolvedStatus(BaseModel):
    status: CropStatus
    source: StatusSource

    @property
    def is_manual(self) -> bool:
        return self.source == StatusSource.MANUAL


class CropProgress(BaseModel):
    total_cycle_days: int
    days_since_planted: int = Field(..., ge=0)
    days_until_harvest: int = Field(..., ge=0)
    days_overdue: int = Field(0, ge=0)
    raw_progress: float = Field(..., description="Unclamped elapsed share of the cycle, in percent")
    progress_percentage: int = Field(..., ge=0, le=100, description="Display progress, clamped to 0-100")
    is_overdue: bool


class CropStatusRequest(BaseModel):
    planted_date: Union[datetime, date] = Field(..., description="Date when the crop was sown")
    expected_harvest_date: Union[datetime, date] = Field(..., description="Planned harvest date")
    manual_status: Optional[CropStatus] = Field(None, description="Status set explicitly by the user")
    now: Optional[datetime] = Field(None, description="Evaluation instant, defaults to the current time")
    locale: Optional[str] = Field(None, description="Language for labels and messages (es, en)")
    crop_id: Optional[str] = Field(None, description="Caller reference echoed back in the report")


class CropStatusReport(BaseModel):
    crop_id: Optional[str] = None
    status: CropStatus
    source: StatusSource
    label: str
    icon: str
    message: str
    progress: CropProgress
    evaluated_at: datetime


class CropStatusResponse(BaseModel):
    success: bool
    data: CropStatusReport
    message: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = None


class CropStatusBatchRequest(BaseModel):
    crops: List[CropStatusRequest] = Field(..., min_length=1, max_length=500)
