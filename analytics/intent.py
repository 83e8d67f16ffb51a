# careshift_project_root/analytics/intent.py
# KEYWORD TRIGGERS FOR CHAT REQUESTS

"""
Decides which view a chat message asks for: the shift handover digest, a
weekly chart for one resident, or a plain assistant reply. Matching is plain
substring testing on the lowercased message.
"""

import logging
import re
from enum import Enum
from typing import Any, Optional

import pandas as pd
from pydantic import BaseModel

from config import settings
from config.settings import ChartMetricConfig
from data_processing.helpers import to_facility_timestamp
from .shift_digest import ShiftType

logger = logging.getLogger(__name__)

RESIDENT_ID_PATTERN = re.compile(r'res_[0-9]+')


class RequestKind(str, Enum):
    SHIFT_SUMMARY = "shift_summary"
    WEEKLY_CHART = "weekly_chart"
    CHAT = "chat"


class ChatIntent(BaseModel):
    kind: RequestKind
    resident_id: Optional[str] = None
    metric: Optional[ChartMetricConfig] = None


def current_shift_type(now: Any = None) -> ShiftType:
    """Day from DAY_SHIFT_START_HOUR up to (not including) DAY_SHIFT_END_HOUR, Night otherwise."""
    hour = to_facility_timestamp(now if now is not None else pd.Timestamp.now(tz='UTC')).hour
    if settings.DAY_SHIFT_START_HOUR <= hour < settings.DAY_SHIFT_END_HOUR:
        return ShiftType.DAY
    return ShiftType.NIGHT


def extract_resident_id(text: str, residents: Optional[pd.DataFrame] = None) -> Optional[str]:
    """An explicit 'res_<n>' token wins; otherwise the first resident whose full name appears."""
    lower_text = (text or "").lower()
    match = RESIDENT_ID_PATTERN.search(lower_text)
    if match:
        return match.group(0)

    if isinstance(residents, pd.DataFrame) and not residents.empty:
        for resident_id, name in zip(residents['id'], residents['name']):
            if isinstance(name, str) and name.strip() and name.strip().lower() in lower_text:
                return str(resident_id)
    return None


def _match_metric(lower_text: str) -> Optional[ChartMetricConfig]:
    for metric in settings.CHART_METRICS.values():
        if any(keyword in lower_text for keyword in metric.keywords):
            return metric
    return None


def classify_request(text: str, residents: Optional[pd.DataFrame] = None) -> ChatIntent:
    """
    Shift-summary keywords are checked first. A chart needs a chart keyword,
    a resolvable resident and a metric keyword; anything less is a chat turn.
    """
    lower_text = (text or "").lower()

    if any(keyword in lower_text for keyword in settings.SHIFT_SUMMARY_KEYWORDS):
        return ChatIntent(kind=RequestKind.SHIFT_SUMMARY)

    if any(keyword in lower_text for keyword in settings.CHART_KEYWORDS):
        resident_id = extract_resident_id(lower_text, residents)
        metric = _match_metric(lower_text) if resident_id else None
        if resident_id and metric:
            return ChatIntent(kind=RequestKind.WEEKLY_CHART, resident_id=resident_id, metric=metric)
        logger.debug(f"Chart keywords found but resident={resident_id!r}, metric={metric!r}; falling back to chat.")

    return ChatIntent(kind=RequestKind.CHAT)
