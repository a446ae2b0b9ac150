# agents/crops/agent.py
"""
Crop lifecycle agent - status and progress of crop cycles
"""

from datetime import datetime, timezone
from typing import List, Type

from agents.base import BaseAgent
from agents.crops import lifecycle
from agents.crops.models import (
    CropProgress, CropStatus, CropStatusReport, CropStatusRequest,
    CropStatusResponse, StatusSource
)


class CropLifecycleAgent(BaseAgent[CropStatusRequest, CropStatusResponse]):
    """
    Crop lifecycle agent

    Features:
    - Status derived from the planting and expected harvest dates
    - Sticky manual statuses (a harvested crop stays harvested)
    - Progress metrics for progress bars and overdue warnings
    - Localized labels and status messages
    """

    # Status depends on the evaluation instant, so answers are never reused
    cacheable = False

    def __init__(self):
        super().__init__("crops")
        self.default_locale = self.config.get("default_locale", lifecycle.DEFAULT_LOCALE)

    def _validate_config(self) -> None:
        """Validate crop agent configuration"""
        locale = self.config.get("default_locale")
        if locale is None:
            self.logger.warning(f"No default_locale configured, using '{lifecycle.DEFAULT_LOCALE}'")
        elif locale not in lifecycle.STATUS_MESSAGES:
            raise ValueError(f"Unsupported default_locale: {locale}")

    def _get_response_class(self) -> Type[CropStatusResponse]:
        return CropStatusResponse

    def evaluate(self, request: CropStatusRequest) -> CropStatusReport:
        """Build the status report for a single crop"""
        now = lifecycle.to_utc_datetime(request.now) if request.now else datetime.now(timezone.utc)
        locale = request.locale or self.default_locale

        resolved = lifecycle.resolve_status(
            request.planted_date, request.expected_harvest_date, request.manual_status, now
        )
        progress = lifecycle.compute_progress(request.planted_date, request.expected_harvest_date, now)

        return CropStatusReport(
            crop_id=request.crop_id,
            status=resolved.status,
            source=resolved.source,
            label=lifecycle.status_label(resolved.status, locale),
            icon=lifecycle.status_icon(resolved.status),
            message=lifecycle.status_message(resolved.status, progress, locale),
            progress=progress,
            evaluated_at=now,
        )

    async def process_request(self, request: CropStatusRequest) -> CropStatusResponse:
        """Process crop status request"""
        report = self.evaluate(request)

        if report.progress.total_cycle_days <= 0:
            self.logger.warning(
                f"Degenerate crop cycle for {request.crop_id or 'crop'}: "
                f"harvest {request.expected_harvest_date} is not after planting {request.planted_date}"
            )

        return CropStatusResponse(
            success=True,
            data=report,
            message=report.message,
            timestamp=datetime.now().isoformat(),
            metadata={
                "status_source": report.source.value,
                "degenerate_cycle": report.progress.total_cycle_days <= 0,
            }
        )

    async def process_batch(self, requests: List[CropStatusRequest]) -> List[CropStatusResponse]:
        """Evaluate several crops independently"""
        return [await self.execute(request) for request in requests]

    def get_fallback_response(self, request: CropStatusRequest, error: Exception) -> CropStatusResponse:
        """Get fallback response when evaluation fails"""
        status = request.manual_status or CropStatus.PLANTED
        source = StatusSource.MANUAL if request.manual_status else StatusSource.DERIVED
        locale = request.locale or self.default_locale

        report = CropStatusReport(
            crop_id=request.crop_id,
            status=status,
            source=source,
            label=lifecycle.status_label(status, locale),
            icon=lifecycle.status_icon(status),
            message=lifecycle.status_label(status, locale),
            progress=CropProgress(
                total_cycle_days=0,
                days_since_planted=0,
                days_until_harvest=0,
                raw_progress=0.0,
                progress_percentage=0,
                is_overdue=False,
            ),
            evaluated_at=datetime.now(timezone.utc),
        )

        return CropStatusResponse(
            success=False,
            data=report,
            message=f"Using fallback crop status due to error: {str(error)}",
            timestamp=datetime.now().isoformat(),
            metadata={"fallback": True, "error": str(error)}
        )
