# careshift_project_root/tests/conftest.py
# PYTEST FIXTURES

import sys
from pathlib import Path

# --- Path Setup for Module Imports ---
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pandas as pd
import pytest

from data_processing import FacilityData, build_facility_data

# --- Core Data Fixtures ---

@pytest.fixture(scope="session")
def raw_facility_db() -> dict:
    """A small facility document in the on-disk (camelCase) shape."""
    return {
        "residents": [
            {"id": "res_001", "name": "Eleanor Vance", "fallRisk": "High", "notes": "Uses a walker."},
            {"id": "res_002", "name": "Arthur Pendelton", "fallRisk": "Medium", "notes": None},
            {"id": "res_003", "name": "Beatrice Miller", "fallRisk": "High", "notes": "Assist with transfers."},
            {"id": "res_004", "name": "Charles Okafor", "fallRisk": "Low", "notes": ""},
        ],
        "staff": [{"id": "staff_01", "name": "Maria Lopez", "role": "RN"}],
        "rooms": [],
        "medications": [],
        "incidents": [
            {"id": "inc_1", "residentId": "res_001", "type": "Fall", "timestamp": "2026-09-24T03:10:00Z", "location": "Bathroom", "description": "Found on the floor.", "witnessedBy": []},
            {"id": "inc_2", "residentId": "res_001", "type": " fall ", "timestamp": "2026-10-06T22:20:00Z", "location": "Bedroom", "description": "Slid off the bed.", "witnessedBy": []},
            {"id": "inc_3", "residentId": "res_003", "type": "Fall", "timestamp": "2026-09-30T14:45:00Z", "location": "Hallway", "description": "Lost balance.", "witnessedBy": ["staff_01"]},
            {"id": "inc_4", "residentId": "res_002", "type": "Medication Error", "timestamp": "2026-10-18T02:00:00Z", "location": "Room 102", "description": "Insulin given late.", "witnessedBy": []},
            {"id": "inc_5", "residentId": "res_002", "type": "Fall", "timestamp": "2026-10-18T04:00:00Z", "location": "Bedroom", "description": "Found beside bed.", "witnessedBy": []},
            {"id": "inc_6", "residentId": "res_001", "type": "Fall", "timestamp": "2026-10-18T05:30:00Z", "location": "Bathroom", "description": "Sensor-detected fall.", "witnessedBy": []},
            {"id": "inc_7", "residentId": "res_009", "type": "Skin Tear", "timestamp": "2026-10-17T23:00:00Z", "location": "Lounge", "description": "Visitor's relative, not on census.", "witnessedBy": []},
            {"id": "inc_8", "residentId": "res_001", "type": "Fall", "timestamp": "not-a-timestamp", "location": "Unknown", "description": "Bad record.", "witnessedBy": []},
            {"id": "inc_9", "residentId": "res_004", "type": "Fall", "timestamp": "2026-10-17T18:00:00Z", "location": "Dining Room", "description": "Tripped on a chair leg.", "witnessedBy": []},
        ],
        "activities": [
            {"id": "act_1", "residentId": "res_002", "type": "Bathroom Visit", "timestamp": "2026-10-01T03:45:00Z", "staffId": "staff_01", "outcome": "Assisted"},
            {"id": "act_2", "residentId": "res_002", "type": "Meal", "timestamp": "2026-10-12T12:00:00Z", "staffId": "staff_01", "outcome": "Ate 75%"},
            {"id": "act_3", "residentId": "res_002", "type": "bathroom visit", "timestamp": "2026-10-14T02:40:00Z", "staffId": "staff_01", "outcome": "Assisted"},
            {"id": "act_4", "residentId": "res_002", "type": "Bathroom Visit", "timestamp": "2026-10-16T22:05:00Z", "staffId": "staff_01", "outcome": "Independent"},
        ],
        "shifts": [
            {"id": "s1", "date": "2026-10-16", "type": "Night", "staffOnDuty": ["staff_01"], "startTime": "2026-10-16T19:00:00Z", "endTime": "2026-10-17T07:00:00Z", "handoverNotes": "Old night notes."},
            {"id": "s2", "date": "2026-10-17", "type": "Day", "staffOnDuty": ["staff_01"], "startTime": "2026-10-17T07:00:00Z", "endTime": "2026-10-17T19:00:00Z", "handoverNotes": "Day notes."},
            {"id": "s3", "date": "2026-10-17", "type": "Night", "staffOnDuty": ["staff_01"], "startTime": "2026-10-17T19:00:00Z", "endTime": "2026-10-18T07:00:00Z", "handoverNotes": "Arthur fell at 4am, watch him."},
            {"id": "s4", "date": "2026-10-18", "type": "Day", "staffOnDuty": ["staff_01"], "startTime": "2026-10-18T07:00:00Z", "endTime": "2026-10-18T19:00:00Z", "handoverNotes": None},
        ],
    }


@pytest.fixture(scope="session")
def facility_data(raw_facility_db: dict) -> FacilityData:
    """The fixture document loaded through the production pipeline."""
    return build_facility_data(raw_facility_db)


@pytest.fixture(scope="session")
def reference_time() -> pd.Timestamp:
    """Start of the 2026-10-18 day shift, half an hour in."""
    return pd.Timestamp("2026-10-18T07:30:00Z")
