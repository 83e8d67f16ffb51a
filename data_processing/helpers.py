# careshift_project_root/data_processing/helpers.py
# Fluent cleaning pipeline and small shared utilities.

"""
A collection of utility functions and a fluent DataPipeline class for
turning raw facility collections into analytics-ready DataFrames.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from config import settings

logger = logging.getLogger(__name__)

# --- Standalone Utility Functions ---

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')


def camel_to_snake(name: str) -> str:
    """'residentId' -> 'resident_id', 'witnessedBy' -> 'witnessed_by'."""
    return _CAMEL_BOUNDARY.sub('_', str(name).strip()).lower()


def normalize_category(value: Any) -> Any:
    """
    Canonical form for free-text categories (event types): trimmed and
    lowercased. Works on scalars and Series; missing values pass through.
    """
    if isinstance(value, pd.Series):
        return value.astype(object).where(value.notna()).map(
            lambda v: str(v).strip().lower() if isinstance(v, str) else v
        )
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return value
    return str(value).strip().lower()


def to_facility_timestamp(value: Any) -> pd.Timestamp:
    """
    Converts a reference instant to a tz-aware Timestamp in the facility time
    zone. Naive values are taken to already be facility-local.
    """
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Reference time {value!r} is not a valid instant.")
    if ts.tzinfo is None:
        return ts.tz_localize(settings.FACILITY_TIMEZONE)
    return ts.tz_convert(settings.FACILITY_TIMEZONE)


def robust_json_load(file_path: Union[str, Path]) -> Optional[Union[Dict, List]]:
    """Loads JSON data from a file with robust error handling and UTF-8 encoding."""
    path_obj = Path(file_path)
    if not path_obj.is_file():
        logger.error(f"JSON load failed: File not found at {path_obj.resolve()}")
        return None
    try:
        with path_obj.open('r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Error decoding JSON from {path_obj.resolve()}: {e}")
        return None


class DataPipeline:
    """
    A fluent interface for applying a sequence of data processing operations.

    Usage:
        events_df = (DataPipeline(pd.DataFrame(raw_incidents))
                     .snake_case_columns()
                     .convert_date_columns(['timestamp'])
                     .add_category_key('type', 'type_key')
                     .get_dataframe())
    """
    def __init__(self, df: pd.DataFrame):
        if not isinstance(df, pd.DataFrame):
            raise TypeError("DataPipeline must be initialized with a pandas DataFrame.")
        self.df = df.copy()

    def get_dataframe(self) -> pd.DataFrame:
        """Returns the processed DataFrame."""
        return self.df

    def snake_case_columns(self) -> 'DataPipeline':
        """Renames camelCase source keys to snake_case column names."""
        self.df.columns = [camel_to_snake(c) for c in self.df.columns]
        return self

    def cast_column_types(self, dtype_map: Dict[str, str]) -> 'DataPipeline':
        for col, dtype in (dtype_map or {}).items():
            if col in self.df.columns:
                if dtype == 'str':
                    self.df[col] = self.df[col].astype(object).where(self.df[col].notna()).map(
                        lambda v: str(v) if pd.notna(v) else v
                    )
                else:
                    self.df[col] = self.df[col].astype(dtype)
        return self

    def convert_date_columns(self, date_columns: List[str], tz: Optional[str] = None) -> 'DataPipeline':
        """
        Parses ISO 8601 columns into tz-aware timestamps in `tz`. Values that
        cannot be parsed become NaT and are excluded by every range filter.
        """
        tz = tz or settings.FACILITY_TIMEZONE
        for col in date_columns or []:
            if col not in self.df.columns:
                continue
            parsed = pd.to_datetime(self.df[col], errors='coerce', utc=True, format='ISO8601')
            bad = int(parsed.isna().sum() - self.df[col].isna().sum())
            if bad > 0:
                logger.warning(f"Column '{col}': {bad} unparseable timestamp(s) coerced to NaT.")
            self.df[col] = parsed.dt.tz_convert(tz)
        return self

    def add_category_key(self, source_col: str, key_col: str) -> 'DataPipeline':
        """Adds a normalized copy of a free-text category column."""
        if source_col in self.df.columns:
            self.df[key_col] = normalize_category(self.df[source_col])
        return self

    def standardize_missing_values(self, columns: List[str]) -> 'DataPipeline':
        """Replaces NaN/NaT in object columns with None so value types see null."""
        for col in columns or []:
            if col in self.df.columns:
                self.df[col] = self.df[col].astype(object).where(self.df[col].notna(), None)
        return self
