# careshift_project_root/data_processing/loaders.py
# VALIDATED FACILITY DATA LOADING

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from config import settings
from .helpers import DataPipeline, robust_json_load

logger = logging.getLogger(__name__)


class FacilityDataError(RuntimeError):
    """The facility dataset is missing or structurally invalid."""


# --- Pydantic Models for Type-Safe Configuration ---

class CollectionConfig(BaseModel):
    """Defines how one collection of the facility JSON document is prepared."""
    date_cols: List[str] = Field(default_factory=list)
    dtype_map: Dict[str, str] = Field(default_factory=dict)
    category_cols: Dict[str, str] = Field(default_factory=dict)
    nullable_cols: List[str] = Field(default_factory=list)
    required_cols: List[str] = Field(default_factory=list)


# --- Centralized Data Source Configuration ---

COLLECTION_CONFIG: Dict[str, CollectionConfig] = {
    'residents': CollectionConfig(
        dtype_map={'id': 'str'},
        nullable_cols=['notes'],
        required_cols=['id', 'name', 'fall_risk'],
    ),
    'incidents': CollectionConfig(
        date_cols=['timestamp'],
        dtype_map={'id': 'str', 'resident_id': 'str'},
        category_cols={'type': 'type_key'},
        nullable_cols=['description', 'location'],
        required_cols=['id', 'resident_id', 'type', 'timestamp'],
    ),
    'activities': CollectionConfig(
        date_cols=['timestamp'],
        dtype_map={'id': 'str', 'resident_id': 'str', 'staff_id': 'str'},
        category_cols={'type': 'type_key'},
        required_cols=['id', 'resident_id', 'type', 'timestamp'],
    ),
    'shifts': CollectionConfig(
        date_cols=['start_time', 'end_time'],
        dtype_map={'id': 'str'},
        nullable_cols=['handover_notes'],
        required_cols=['id', 'type', 'start_time', 'end_time'],
    ),
}

EVENT_COLUMNS = ['id', 'resident_id', 'type', 'type_key', 'timestamp', 'source']


class FacilityData(BaseModel):
    """
    The read-only, in-memory facility dataset. Loaded once at startup and
    never mutated; queries copy what they filter.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    residents: pd.DataFrame
    incidents: pd.DataFrame
    activities: pd.DataFrame
    shifts: pd.DataFrame
    raw: Dict[str, Any] = Field(default_factory=dict)

    @property
    def events(self) -> pd.DataFrame:
        """Incidents and activities as one frame of timestamped resident events."""
        frames = [
            df.assign(source=name).reindex(columns=EVENT_COLUMNS)
            for name, df in (('incidents', self.incidents), ('activities', self.activities))
            if not df.empty
        ]
        if not frames:
            return pd.DataFrame(columns=EVENT_COLUMNS)
        return pd.concat(frames, ignore_index=True)


# --- Main Loading Functions ---

def prepare_collection(name: str, records: Union[List[Dict[str, Any]], pd.DataFrame]) -> pd.DataFrame:
    """
    Cleans a single raw collection according to COLLECTION_CONFIG and checks
    its required columns. Raises FacilityDataError on a schema violation.
    """
    config = COLLECTION_CONFIG.get(name)
    if config is None:
        raise FacilityDataError(f"Unknown collection '{name}'.")

    raw_df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records or []))
    if raw_df.empty:
        logger.warning(f"({name}) Collection is empty.")
        return pd.DataFrame(columns=config.required_cols + list(config.category_cols.values()))

    processed_df = (DataPipeline(raw_df)
        .snake_case_columns()
        .cast_column_types(config.dtype_map)
        .convert_date_columns(config.date_cols)
        .standardize_missing_values(config.nullable_cols)
        .get_dataframe()
    )
    for source_col, key_col in config.category_cols.items():
        processed_df = DataPipeline(processed_df).add_category_key(source_col, key_col).get_dataframe()

    missing_cols = set(config.required_cols) - set(processed_df.columns)
    if missing_cols:
        logger.critical(f"({name}) Schema validation failed! Missing required columns: {sorted(missing_cols)}")
        raise FacilityDataError(f"Collection '{name}' is missing required columns: {sorted(missing_cols)}")

    logger.info(f"({name}) Successfully loaded and processed {len(processed_df)} records.")
    return processed_df


def build_facility_data(raw_db: Dict[str, Any]) -> FacilityData:
    """Builds a FacilityData from an already-parsed JSON document."""
    if not isinstance(raw_db, dict):
        raise FacilityDataError("Facility data must be a JSON object of collections.")

    missing = [name for name in COLLECTION_CONFIG if name not in raw_db]
    if missing:
        logger.critical(f"Facility data is missing collections: {missing}")
        raise FacilityDataError(f"Facility data is missing collections: {missing}")

    frames = {name: prepare_collection(name, raw_db[name]) for name in COLLECTION_CONFIG}
    return FacilityData(**frames, raw=raw_db)


def load_facility_data(filepath_override: Optional[Union[str, Path]] = None) -> FacilityData:
    """
    Loads and validates the facility JSON document. This is the only place
    structural problems are detected; downstream queries assume a valid store.
    """
    path_to_load = Path(filepath_override) if filepath_override else settings.FACILITY_DB_PATH
    raw_db = robust_json_load(path_to_load)
    if raw_db is None:
        raise FacilityDataError(f"Could not read facility data from {path_to_load}")
    data = build_facility_data(raw_db)
    logger.info(
        f"Facility data loaded from {path_to_load}: {len(data.residents)} residents, "
        f"{len(data.incidents)} incidents, {len(data.activities)} activities, {len(data.shifts)} shifts."
    )
    return data
