# agents/crops/lifecycle.py
"""
Crop lifecycle engine - date driven status and progress for a crop cycle

Status is a pure function of (planted date, expected harvest date, manual
status, now). Nothing is memoized: calling again with the same inputs always
yields the same answer, and a later `now` can only move a crop forward
through planted -> growing -> ready. `harvested` is never derived; it only
comes from a manual status.
"""
import math
from datetime import date, datetime, timezone
from typing import Dict, Optional, Tuple, Union

from agents.crops.models import CropProgress, CropStatus, ResolvedStatus, StatusSource

DateLike = Union[datetime, date]

SECONDS_PER_DAY = 86400.0

# Upper bounds (inclusive) of the progress bands, in percent
PLANTED_UNTIL_PCT = 25.0
GROWING_UNTIL_PCT = 80.0

DEFAULT_LOCALE = "es"

STATUS_LABELS: Dict[str, Dict[CropStatus, str]] = {
    "es": {
        CropStatus.PLANTED: "Sembrado",
        CropStatus.GROWING: "Creciendo",
        CropStatus.READY: "Listo para cosecha",
        CropStatus.HARVESTED: "Cosechado",
    },
    "en": {
        CropStatus.PLANTED: "Planted",
        CropStatus.GROWING: "Growing",
        CropStatus.READY: "Ready for harvest",
        CropStatus.HARVESTED: "Harvested",
    },
}

STATUS_ICONS: Dict[CropStatus, str] = {
    CropStatus.PLANTED: "🌱",
    CropStatus.GROWING: "🌿",
    CropStatus.READY: "🌾",
    CropStatus.HARVESTED: "📦",
}

# (status, is_overdue) -> message template, formatted with CropProgress fields
STATUS_MESSAGES: Dict[str, Dict[Tuple[CropStatus, bool], str]] = {
    "es": {
        (CropStatus.PLANTED, False): "Sembrado hace {days_since_planted} días",
        (CropStatus.PLANTED, True): "Sembrado hace {days_since_planted} días",
        (CropStatus.GROWING, False): "Creciendo - {progress_percentage}% completado",
        (CropStatus.GROWING, True): "Creciendo - {progress_percentage}% completado",
        (CropStatus.READY, False): "Listo para cosecha",
        (CropStatus.READY, True): "Listo para cosecha - {days_overdue} días de retraso",
        (CropStatus.HARVESTED, False): "Cultivo cosechado",
        (CropStatus.HARVESTED, True): "Cultivo cosechado",
    },
    "en": {
        (CropStatus.PLANTED, False): "Planted {days_since_planted} days ago",
        (CropStatus.PLANTED, True): "Planted {days_since_planted} days ago",
        (CropStatus.GROWING, False): "Growing - {progress_percentage}% complete",
        (CropStatus.GROWING, True): "Growing - {progress_percentage}% complete",
        (CropStatus.READY, False): "Ready for harvest",
        (CropStatus.READY, True): "Ready for harvest - {days_overdue} days overdue",
        (CropStatus.HARVESTED, False): "Crop harvested",
        (CropStatus.HARVESTED, True): "Crop harvested",
    },
}


def to_utc_datetime(value: DateLike) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime (naive means UTC)"""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime(value.year, value.month, value.day)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _resolve_now(now: Optional[DateLike]) -> datetime:
    return to_utc_datetime(now) if now is not None else datetime.now(timezone.utc)


def _ceil_days(start: datetime, end: datetime) -> int:
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def _cycle_position(planted: datetime, harvest: datetime, now: datetime) -> Tuple[int, int, float]:
    """Return (total_cycle_days, days_since_planted, raw_progress).

    raw_progress is the unclamped percentage used everywhere internally. A
    degenerate window (harvest on or before planting) counts as a finished
    cycle, 100%, once planting has happened and 0% before it.
    """
    total_days = _ceil_days(planted, harvest)
    days_since = _ceil_days(planted, now)
    if total_days <= 0:
        return total_days, days_since, 100.0 if now >= planted else 0.0
    return total_days, days_since, days_since * 100.0 / total_days


def _classify(raw_progress: float) -> CropStatus:
    if raw_progress <= PLANTED_UNTIL_PCT:
        return CropStatus.PLANTED
    if raw_progress <= GROWING_UNTIL_PCT:
        return CropStatus.GROWING
    return CropStatus.READY


def resolve_status(
    planted_date: DateLike,
    expected_harvest_date: DateLike,
    manual_status: Optional[CropStatus] = None,
    now: Optional[DateLike] = None,
) -> ResolvedStatus:
    """Resolve the effective status, tagged with where it came from"""
    if manual_status is not None and manual_status != CropStatus.PLANTED:
        return ResolvedStatus(status=manual_status, source=StatusSource.MANUAL)

    planted = to_utc_datetime(planted_date)
    current = _resolve_now(now)
    if current < planted:
        return ResolvedStatus(status=CropStatus.PLANTED, source=StatusSource.DERIVED)

    _, _, raw_progress = _cycle_position(planted, to_utc_datetime(expected_harvest_date), current)
    return ResolvedStatus(status=_classify(raw_progress), source=StatusSource.DERIVED)


def derive_status(
    planted_date: DateLike,
    expected_harvest_date: DateLike,
    manual_status: Optional[CropStatus] = None,
    now: Optional[DateLike] = None,
) -> CropStatus:
    """Effective crop status; a manual status other than planted always wins"""
    return resolve_status(planted_date, expected_harvest_date, manual_status, now).status


def compute_progress(
    planted_date: DateLike,
    expected_harvest_date: DateLike,
    now: Optional[DateLike] = None,
) -> CropProgress:
    """Progress metrics of a crop cycle; counts are never negative"""
    planted = to_utc_datetime(planted_date)
    harvest = to_utc_datetime(expected_harvest_date)
    current = _resolve_now(now)

    total_days, days_since, raw_progress = _cycle_position(planted, harvest, current)
    is_overdue = current > harvest

    return CropProgress(
        total_cycle_days=total_days,
        days_since_planted=max(0, days_since),
        days_until_harvest=max(0, _ceil_days(current, harvest)),
        days_overdue=max(0, _ceil_days(harvest, current)) if is_overdue else 0,
        raw_progress=raw_progress,
        progress_percentage=int(round(min(100.0, max(0.0, raw_progress)))),
        is_overdue=is_overdue,
    )


def normalize_locale(locale: Optional[str]) -> str:
    if not locale:
        return DEFAULT_LOCALE
    language = locale.replace("_", "-").split("-")[0].lower()
    return language if language in STATUS_MESSAGES else DEFAULT_LOCALE


def status_label(status: CropStatus, locale: Optional[str] = None) -> str:
    return STATUS_LABELS[normalize_locale(locale)][status]


def status_icon(status: CropStatus) -> str:
    return STATUS_ICONS[status]


def status_message(status: CropStatus, progress: CropProgress, locale: Optional[str] = None) -> str:
    """Human readable sentence for a status and its progress"""
    template = STATUS_MESSAGES[normalize_locale(locale)][(status, progress.is_overdue)]
    return template.format(**progress.model_dump())
