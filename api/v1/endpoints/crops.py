from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Query

from agents.base import agent_registry
from agents.crops.models import CropStatus, CropStatusBatchRequest, CropStatusRequest
from core.exceptions import AgentError

router = APIRouter()


def _crops_agent():
    crops_agent = agent_registry.get("crops")
    if not crops_agent:
        raise AgentError("Crop lifecycle agent not available")
    return crops_agent


@router.get("/status")
async def get_crop_status(
    planted_date: date = Query(..., description="Date when the crop was sown (YYYY-MM-DD)"),
    expected_harvest_date: date = Query(..., description="Planned harvest date (YYYY-MM-DD)"),
    manual_status: Optional[CropStatus] = Query(None, description="Status set explicitly by the user"),
    now: Optional[datetime] = Query(None, description="Evaluation instant (ISO 8601), defaults to now"),
    locale: Optional[str] = Query(None, description="Language for labels and messages (es, en)"),
):
    """
    Get the lifecycle status and progress of a crop

    Status is derived from the crop's dates unless a manual status other
    than planted has been set, in which case that status is returned as is.
    """
    crops_agent = _crops_agent()
    request = CropStatusRequest(
        planted_date=planted_date,
        expected_harvest_date=expected_harvest_date,
        manual_status=manual_status,
        now=now,
        locale=locale,
    )
    return await crops_agent.execute(request)


@router.post("/status/batch")
async def get_crop_status_batch(batch: CropStatusBatchRequest):
    """Evaluate the status of several crops in one call"""
    crops_agent = _crops_agent()
    responses = await crops_agent.process_batch(batch.crops)
    return {
        "success": all(response.success for response in responses),
        "count": len(responses),
        "results": responses,
    }
