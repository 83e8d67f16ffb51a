# careshift_project_root/tests/test_shift_digest.py
# SHIFT HANDOVER DIGEST TESTS

import pandas as pd
import pytest

from analytics import ShiftDigestBuilder, ShiftType, build_digest, parse_shift_type
from data_processing import build_facility_data

# Fixtures are sourced from conftest.py

def _empty_db(**collections) -> dict:
    db = {"residents": [], "incidents": [], "activities": [], "shifts": []}
    db.update(collections)
    return db

# --- Previous Shift Notes ---
def test_day_digest_uses_latest_concluded_night_notes(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time)
    assert digest.previous_shift_notes == "Arthur fell at 4am, watch him."

def test_night_digest_uses_latest_concluded_day_notes(facility_data, reference_time):
    # The 2026-10-18 day shift has not ended yet.
    digest = build_digest(facility_data, ShiftType.NIGHT, reference_time)
    assert digest.previous_shift_notes == "Day notes."

def test_shift_ending_exactly_at_reference_is_not_concluded(facility_data):
    digest = build_digest(facility_data, "Day", pd.Timestamp("2026-10-18T07:00:00Z"))
    assert digest.previous_shift_notes == "Old night notes."

def test_no_concluded_shift_gives_no_notes(facility_data):
    digest = build_digest(facility_data, "Day", pd.Timestamp("2026-10-17T06:00:00Z"))
    assert digest.previous_shift_notes is None

# --- Recent Incidents ---
def test_recent_incidents_are_newest_first(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time)
    assert [i.id for i in digest.recent_incidents] == ['inc_6', 'inc_5', 'inc_4', 'inc_7']
    first = digest.recent_incidents[0]
    assert first.resident_name == "Eleanor Vance"
    assert first.timestamp == pd.Timestamp("2026-10-18T05:30:00Z")

def test_incident_window_is_inclusive_at_the_lower_bound(facility_data):
    digest = build_digest(facility_data, "Day", pd.Timestamp("2026-10-18T14:00:00Z"))
    assert [i.id for i in digest.recent_incidents] == ['inc_6', 'inc_5', 'inc_4']

def test_unknown_resident_incident_falls_back_to_id(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time)
    orphan = next(i for i in digest.recent_incidents if i.id == 'inc_7')
    assert orphan.resident_name is None
    assert orphan.display_name == 'res_009'

def test_shorter_lookback_narrows_the_window(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time, lookback_hours=4)
    assert [i.id for i in digest.recent_incidents] == ['inc_6', 'inc_5']

# --- Residents to Watch ---
def test_residents_to_watch_reasons_and_order(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time)
    assert [(r.id, r.name, r.reason) for r in digest.residents_to_watch] == [
        ('res_002', 'Arthur Pendelton', 'Recent Incident (Medication Error)'),
        ('res_003', 'Beatrice Miller', 'High Fall Risk'),
        ('res_001', 'Eleanor Vance', 'High Fall Risk'),
        ('res_009', 'res_009', 'Recent Incident (Skin Tear)'),
    ]

def test_residents_to_watch_ids_are_unique(facility_data):
    for hour in range(0, 24, 3):
        reference = pd.Timestamp("2026-10-18T00:00:00Z") + pd.Timedelta(hours=hour)
        ids = [r.id for r in build_digest(facility_data, "Night", reference).residents_to_watch]
        assert len(ids) == len(set(ids))

def test_high_risk_resident_is_not_duplicated_by_incident():
    t = "2026-10-18T06:00:00Z"
    data = build_facility_data(_empty_db(
        residents=[{"id": "r1", "name": "A", "fallRisk": "High"}],
        incidents=[{"id": "i1", "residentId": "r1", "type": "Fall", "timestamp": t}],
        shifts=[{"id": "s1", "type": "Night", "startTime": "2026-10-17T17:00:00Z", "endTime": "2026-10-18T05:00:00Z", "handoverNotes": "watch A"}],
    ))
    digest = build_digest(data, "Day", t, 12)
    assert digest.previous_shift_notes == "watch A"
    assert [i.id for i in digest.recent_incidents] == ['i1']
    assert [(r.id, r.reason) for r in digest.residents_to_watch] == [('r1', 'High Fall Risk')]

def test_first_raw_incident_supplies_the_reason():
    data = build_facility_data(_empty_db(
        residents=[{"id": "r2", "name": "B", "fallRisk": "Low"}],
        incidents=[
            {"id": "i2", "residentId": "r2", "type": "Skin Tear", "timestamp": "2026-10-18T05:00:00Z"},
            {"id": "i1", "residentId": "r2", "type": "Fall", "timestamp": "2026-10-18T01:00:00Z"},
        ],
    ))
    digest = build_digest(data, "Day", "2026-10-18T07:30:00Z")
    assert [(r.id, r.reason) for r in digest.residents_to_watch] == [('r2', 'Recent Incident (Skin Tear)')]

# --- Degenerate Inputs ---
def test_empty_dataset_gives_empty_digest():
    digest = build_digest(build_facility_data(_empty_db()), "Night", "2026-10-18T20:00:00Z")
    assert digest.previous_shift_notes is None
    assert digest.recent_incidents == []
    assert digest.residents_to_watch == []

def test_unparseable_incident_timestamp_is_never_recent(facility_data, reference_time):
    digest = build_digest(facility_data, "Day", reference_time, lookback_hours=24 * 365)
    assert 'inc_8' not in {i.id for i in digest.recent_incidents}

@pytest.mark.parametrize("shift_type", ["Evening", "day", ""])
def test_unknown_shift_type_raises(facility_data, reference_time, shift_type):
    with pytest.raises(ValueError, match="shift type"):
        build_digest(facility_data, shift_type, reference_time)

@pytest.mark.parametrize("lookback_hours", [0, -1, True])
def test_non_positive_lookback_hours_raises(facility_data, lookback_hours):
    with pytest.raises(ValueError, match="lookback_hours"):
        ShiftDigestBuilder(facility_data, lookback_hours)

def test_shift_type_helpers():
    assert parse_shift_type("Night") is ShiftType.NIGHT
    assert ShiftType.DAY.previous is ShiftType.NIGHT
    assert ShiftType.NIGHT.previous is ShiftType.DAY

def test_unparseable_shift_end_time_is_never_concluded():
    data = build_facility_data(_empty_db(shifts=[
        {"id": "s1", "type": "Night", "startTime": "2026-10-16T19:00:00Z", "endTime": "2026-10-17T07:00:00Z", "handoverNotes": "older notes"},
        {"id": "s2", "type": "Night", "startTime": "2026-10-17T19:00:00Z", "endTime": "not-a-timestamp", "handoverNotes": "corrupt record"},
    ]))
    assert data.shifts['end_time'].isna().sum() == 1
    digest = build_digest(data, "Day", "2026-10-18T07:30:00Z")
    assert digest.previous_shift_notes == "older notes"

def test_only_unparseable_shift_gives_no_notes():
    data = build_facility_data(_empty_db(shifts=[
        {"id": "s1", "type": "Night", "startTime": "2026-10-17T19:00:00Z", "endTime": "", "handoverNotes": "corrupt record"},
    ]))
    assert build_digest(data, "Day", "2026-10-18T07:30:00Z").previous_shift_notes is None
