# careshift_project_root/data_processing/__init__.py
# PACKAGE API

"""
Initializes the data_processing package, defining its public API.

The Streamlit cache wrapper lives in `data_processing.cached` and is imported
directly by the app so that backend code never pulls in Streamlit.
"""

# --- Utilities from helpers.py ---
from .helpers import (
    DataPipeline,
    camel_to_snake,
    normalize_category,
    robust_json_load,
    to_facility_timestamp
)

# --- Data Loading from loaders.py ---
from .loaders import (
    FacilityData,
    FacilityDataError,
    build_facility_data,
    load_facility_data,
    prepare_collection
)

# --- Weekly Aggregation from aggregation.py ---
from .aggregation import (
    WeekBucket,
    aggregate_by_week,
    filter_events,
    weekly_series_for_subject
)


__all__ = [
    # helpers.py
    "DataPipeline",
    "camel_to_snake",
    "normalize_category",
    "robust_json_load",
    "to_facility_timestamp",

    # loaders.py
    "FacilityData",
    "FacilityDataError",
    "build_facility_data",
    "load_facility_data",
    "prepare_collection",

    # aggregation.py
    "WeekBucket",
    "aggregate_by_week",
    "filter_events",
    "weekly_series_for_subject",
]
