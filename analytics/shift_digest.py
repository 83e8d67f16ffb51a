# careshift_project_root/analytics/shift_digest.py
# SHIFT HANDOVER DIGEST

import logging
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict

from config import settings
from data_processing.helpers import to_facility_timestamp
from data_processing.loaders import FacilityData

logger = logging.getLogger(__name__)


class ShiftType(str, Enum):
    DAY = "Day"
    NIGHT = "Night"

    @property
    def previous(self) -> "ShiftType":
        return ShiftType.NIGHT if self is ShiftType.DAY else ShiftType.DAY


def parse_shift_type(value: Union[str, ShiftType]) -> ShiftType:
    """Accepts exactly "Day" or "Night" (or a ShiftType); anything else is a caller bug."""
    if isinstance(value, ShiftType):
        return value
    try:
        return ShiftType(value)
    except ValueError:
        raise ValueError(f"Unknown shift type {value!r}; expected one of {[s.value for s in ShiftType]}") from None


class IncidentSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    resident_id: str
    resident_name: Optional[str] = None
    type: str
    timestamp: datetime
    description: Optional[str] = None
    location: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.resident_name or self.resident_id


class ResidentToWatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    reason: str


class ShiftDigest(BaseModel):
    """What a nurse should know at the start of a shift."""
    model_config = ConfigDict(frozen=True)

    previous_shift_notes: Optional[str] = None
    recent_incidents: List[IncidentSummary] = []
    residents_to_watch: List[ResidentToWatch] = []


def _none_if_missing(value: Any) -> Any:
    return None if value is None or (not isinstance(value, (list, dict)) and pd.isna(value)) else value


class ShiftDigestBuilder:
    """
    Derives a ShiftDigest from the facility dataset for a target shift and a
    reference instant. Each step is an independent query over read-only
    frames; nothing here mutates the dataset.
    """
    def __init__(self, data: FacilityData, lookback_hours: int = 12):
        if isinstance(lookback_hours, bool) or not isinstance(lookback_hours, (int, float)) or lookback_hours <= 0:
            raise ValueError(f"lookback_hours must be a positive number, got {lookback_hours!r}")
        self.data = data
        self.lookback = pd.Timedelta(hours=lookback_hours)

    def previous_shift_notes(self, target: ShiftType, reference_time: pd.Timestamp) -> Optional[str]:
        """Handover notes of the most recently concluded shift of the other type."""
        shifts = self.data.shifts
        if shifts.empty:
            return None

        concluded = shifts[
            (shifts['type'] == target.previous.value)
            & (shifts['end_time'] < reference_time).fillna(False).astype(bool)
        ]
        if concluded.empty:
            logger.info(f"No concluded {target.previous.value} shift before {reference_time}.")
            return None

        latest = concluded.sort_values('end_time', kind='stable').iloc[-1]
        return _none_if_missing(latest.get('handover_notes'))

    def recent_incidents(self, reference_time: pd.Timestamp) -> pd.DataFrame:
        """
        Incidents in [reference_time - lookback, reference_time], kept in
        their dataset order, with the resident name joined in.
        """
        incidents = self.data.incidents
        if incidents.empty:
            return incidents.copy()

        in_window = incidents['timestamp'].between(reference_time - self.lookback, reference_time, inclusive='both')
        recent = incidents.loc[in_window.fillna(False).astype(bool)].copy()

        names = self.data.residents.drop_duplicates('id').set_index('id')['name'] if not self.data.residents.empty else pd.Series(dtype=object)
        recent['resident_name'] = recent['resident_id'].map(names)
        return recent

    def residents_to_watch(self, raw_recent: pd.DataFrame) -> List[ResidentToWatch]:
        """
        First reason wins: high-fall-risk residents (dataset order) come
        before residents with a recent incident (raw incident order), and
        each resident id is kept once.
        """
        residents = self.data.residents
        analytics = settings.ANALYTICS

        candidates = []
        if not residents.empty:
            high_risk = residents[residents['fall_risk'].astype(str).str.strip() == analytics.high_fall_risk_label]
            candidates.append(pd.DataFrame({
                'id': high_risk['id'].astype(str),
                'name': high_risk['name'],
                'reason': analytics.high_fall_risk_reason,
            }))
        if not raw_recent.empty:
            candidates.append(pd.DataFrame({
                'id': raw_recent['resident_id'].astype(str),
                'name': raw_recent['resident_name'],
                'reason': raw_recent['type'].map(
                    lambda t: analytics.recent_incident_reason_template.format(incident_type=t)
                ),
            }))
        if not candidates:
            return []

        watch = pd.concat(candidates, ignore_index=True).drop_duplicates(subset='id', keep='first')
        watch['name'] = watch['name'].where(watch['name'].notna(), watch['id']).astype(str)
        watch = watch.sort_values('name', kind='stable')
        return [ResidentToWatch(**row) for row in watch[['id', 'name', 'reason']].to_dict('records')]

    def build(self, target_shift_type: Union[str, ShiftType], reference_time: Any) -> ShiftDigest:
        target = parse_shift_type(target_shift_type)
        reference = to_facility_timestamp(reference_time)

        raw_recent = self.recent_incidents(reference)
        ordered = raw_recent.sort_values('timestamp', ascending=False, kind='stable') if not raw_recent.empty else raw_recent

        digest = ShiftDigest(
            previous_shift_notes=self.previous_shift_notes(target, reference),
            recent_incidents=[
                IncidentSummary(
                    id=str(row['id']),
                    resident_id=str(row['resident_id']),
                    resident_name=_none_if_missing(row.get('resident_name')),
                    type=str(row['type']),
                    timestamp=row['timestamp'].to_pydatetime(),
                    description=_none_if_missing(row.get('description')),
                    location=_none_if_missing(row.get('location')),
                )
                for _, row in ordered.iterrows()
            ],
            residents_to_watch=self.residents_to_watch(raw_recent),
        )
        logger.info(
            f"Built {target.value} shift digest at {reference}: notes={'yes' if digest.previous_shift_notes else 'no'}, "
            f"{len(digest.recent_incidents)} recent incident(s), {len(digest.residents_to_watch)} resident(s) to watch."
        )
        return digest


def build_digest(
    data: FacilityData,
    target_shift_type: Union[str, ShiftType],
    reference_time: Any,
    lookback_hours: int = 12
) -> ShiftDigest:
    """
    Public factory function for the shift handover digest.

    Raises:
        ValueError: for an unknown shift type or a non-positive lookback.
    """
    return ShiftDigestBuilder(data, lookback_hours).build(target_shift_type, reference_time)
