# careshift_project_root/generate_data.py
# Writes a synthetic facility dataset covering the last DAYS_OF_DATA days,
# so the "last 30 days" charts and the shift summary always have recent data.

import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

import numpy as np
import pandas as pd

from config import settings

# --- Configuration for Data Generation ---
DAYS_OF_DATA = 35
RANDOM_SEED = 42
ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

END_DATE = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
START_DATE = END_DATE - timedelta(days=DAYS_OF_DATA - 1)

RESIDENTS = [
    {"id": "res_001", "name": "Eleanor Vance", "dob": "1938-05-12", "roomNumber": "101", "conditions": ["Osteoporosis", "Mild Dementia"], "allergies": ["Penicillin"], "fallRisk": "High", "notes": "Uses a walker."},
    {"id": "res_002", "name": "Arthur Pendelton", "dob": "1941-11-03", "roomNumber": "102", "conditions": ["Type 2 Diabetes", "Hypertension"], "allergies": [], "fallRisk": "Medium", "notes": "Check blood glucose before meals."},
    {"id": "res_003", "name": "Beatrice Miller", "dob": "1935-02-27", "roomNumber": "103", "conditions": ["Parkinson's Disease"], "allergies": ["Sulfa"], "fallRisk": "High", "notes": "Assist with transfers."},
    {"id": "res_004", "name": "Charles Okafor", "dob": "1944-08-19", "roomNumber": "104", "conditions": ["COPD"], "allergies": [], "fallRisk": "Low", "notes": "On 2L oxygen at night."},
    {"id": "res_005", "name": "Dorothy Reyes", "dob": "1939-12-01", "roomNumber": "105", "conditions": ["Urinary Incontinence", "Arthritis"], "allergies": ["Latex"], "fallRisk": "Medium", "notes": "Frequent night-time bathroom visits."},
]
STAFF = [
    {"id": "staff_01", "name": "Maria Lopez", "role": "RN"},
    {"id": "staff_02", "name": "James Carter", "role": "CNA"},
    {"id": "staff_03", "name": "Priya Nair", "role": "RN"},
    {"id": "staff_04", "name": "Tom Becker", "role": "CNA"},
]
ROOMS = [{"roomNumber": r["roomNumber"], "type": "Single", "sensor": "Fall detection"} for r in RESIDENTS]
MEDICATIONS = [
    {"id": "med_001", "residentId": "res_001", "name": "Donepezil", "dose": "10mg", "schedule": "Evening"},
    {"id": "med_002", "residentId": "res_002", "name": "Insulin Glargine", "dose": "20 units", "schedule": "Morning"},
    {"id": "med_003", "residentId": "res_003", "name": "Carbidopa/Levodopa", "dose": "25/100mg", "schedule": "Three times daily"},
]

# Expected falls per resident per day, by fall-risk level.
FALL_RATE = {"High": 0.12, "Medium": 0.05, "Low": 0.01}
INCIDENT_TYPES = ["Medication Error", "Skin Tear", "Behavioral"]
INCIDENT_LOCATIONS = ["Bathroom", "Bedroom", "Hallway", "Dining Room"]
ACTIVITY_TYPES = ["Meal", "Physical Therapy", "Social Activity"]
HANDOVER_TEMPLATES = [
    "Quiet shift. No concerns.",
    "{name} was restless, checked hourly.",
    "{name} refused evening medication, please follow up.",
    "{name} needed extra help with transfers.",
]


def random_time_on(day: datetime) -> datetime:
    return day + timedelta(seconds=random.randint(0, 24 * 3600 - 1))


def generate_incidents(rng: np.random.Generator) -> list:
    incidents = []
    for offset in range(DAYS_OF_DATA):
        day = (START_DATE + timedelta(days=offset)).replace(hour=0)
        for resident in RESIDENTS:
            for _ in range(rng.poisson(FALL_RATE[resident["fallRisk"]])):
                incidents.append({"residentId": resident["id"], "type": "Fall", "timestamp": random_time_on(day)})
            if rng.random() < 0.02:
                incidents.append({"residentId": resident["id"], "type": random.choice(INCIDENT_TYPES), "timestamp": random_time_on(day)})

    incidents = [i for i in incidents if i["timestamp"] <= END_DATE]
    incidents.sort(key=lambda i: i["timestamp"])
    return [
        {
            "id": f"inc_{n:03d}", **i,
            "timestamp": i["timestamp"].strftime(ISO_FORMAT),
            "location": random.choice(INCIDENT_LOCATIONS),
            "description": f"{i['type']} recorded by staff.",
            "witnessedBy": random.sample([s["id"] for s in STAFF], k=random.randint(0, 1)),
        }
        for n, i in enumerate(incidents, start=1)
    ]


def generate_activities(rng: np.random.Generator) -> list:
    activities = []
    for offset in range(DAYS_OF_DATA):
        day = (START_DATE + timedelta(days=offset)).replace(hour=0)
        for resident in RESIDENTS:
            visits = rng.poisson(2.5 if resident["id"] == "res_005" else 0.6)
            activities += [{"residentId": resident["id"], "type": "Bathroom Visit", "timestamp": random_time_on(day)} for _ in range(visits)]
            if rng.random() < 0.3:
                activities.append({"residentId": resident["id"], "type": random.choice(ACTIVITY_TYPES), "timestamp": random_time_on(day)})

    activities = [a for a in activities if a["timestamp"] <= END_DATE]
    activities.sort(key=lambda a: a["timestamp"])
    return [
        {
            "id": f"act_{n:03d}", **a,
            "timestamp": a["timestamp"].strftime(ISO_FORMAT),
            "staffId": random.choice(STAFF)["id"],
            "outcome": random.choice(["Assisted", "Independent", "Completed"]),
        }
        for n, a in enumerate(activities, start=1)
    ]


def generate_shifts() -> list:
    shifts = []
    day_start, day_end = settings.DAY_SHIFT_START_HOUR, settings.DAY_SHIFT_END_HOUR
    for day in pd.date_range(START_DATE.date(), END_DATE.date(), freq="D"):
        for shift_type, start_hour, hours in (("Day", day_start, day_end - day_start), ("Night", day_end, 24 - (day_end - day_start))):
            start = datetime(day.year, day.month, day.day, start_hour, tzinfo=timezone.utc)
            end = start + timedelta(hours=hours)
            if start > END_DATE:
                continue
            shifts.append({
                "id": f"shift_{len(shifts) + 1:03d}",
                "date": day.strftime("%Y-%m-%d"),
                "type": shift_type,
                "staffOnDuty": ["staff_01", "staff_02"] if shift_type == "Day" else ["staff_03", "staff_04"],
                "startTime": start.strftime(ISO_FORMAT),
                "endTime": end.strftime(ISO_FORMAT),
                # Shifts still in progress have no handover yet.
                "handoverNotes": random.choice(HANDOVER_TEMPLATES).format(name=random.choice(RESIDENTS)["name"]) if end <= END_DATE else None,
            })
    return shifts


if __name__ == "__main__":
    random.seed(RANDOM_SEED)
    rng = np.random.default_rng(RANDOM_SEED)

    mock_db = {
        "residents": RESIDENTS,
        "staff": STAFF,
        "rooms": ROOMS,
        "incidents": generate_incidents(rng),
        "medications": MEDICATIONS,
        "shifts": generate_shifts(),
        "activities": generate_activities(rng),
    }

    output_filepath = Path(settings.FACILITY_DB_PATH)
    output_filepath.parent.mkdir(parents=True, exist_ok=True)
    with output_filepath.open("w", encoding="utf-8") as f:
        json.dump(mock_db, f, indent=2)

    print(f"Data saved to {output_filepath.resolve()}")
    print(f"Date range: {START_DATE.strftime('%Y-%m-%d')} to {END_DATE.strftime('%Y-%m-%d')}")
    for name in ("incidents", "activities", "shifts"):
        print(f"{name}: {len(mock_db[name])} records")
