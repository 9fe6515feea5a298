"""Ratio-based verdicts from crowd-sourced report series."""

import math
from statistics import fmean
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from downdetect.schemas.status import OutageReportSet

WINDOW = 5  # most recent samples considered from each series
DOWN_RATIO = 10.0
DEGRADED_RATIO = 3.0


def _recent_mean(points, default: float) -> float:
    window = points[-WINDOW:]
    if not window:
        return default
    return fmean(p.value for p in window)


def report_ratio(payload: OutageReportSet) -> float:
    """Mean of the last five reports over the mean of the last five baseline samples."""
    avg_reports = _recent_mean(payload.reports, 0.0)
    avg_baseline = _recent_mean(payload.baseline, 1.0)
    if avg_baseline == 0:
        # Reports against an all-zero baseline are an unbounded spike
        return math.inf if avg_reports > 0 else 0.0
    return avg_reports / avg_baseline


def classify(payload: OutageReportSet | dict[str, Any] | None) -> str:
    """Map a report set to "up", "degraded" or "down".

    Missing or empty reports are optimistic: the service is assumed up.
    """
    if payload is None:
        return "up"
    if not isinstance(payload, OutageReportSet):
        try:
            payload = OutageReportSet.model_validate(payload)
        except PydanticValidationError:
            return "up"
    if not payload.reports:
        return "up"

    ratio = report_ratio(payload)
    if ratio > DOWN_RATIO:
        return "down"
    if ratio > DEGRADED_RATIO:
        return "degraded"
    return "up"
