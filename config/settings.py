# careshift_project_root/config/settings.py
# CENTRALIZED CONFIGURATION HUB

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import (BaseModel, DirectoryPath, Field, SecretStr,
                      computed_field, model_validator)
from pydantic_settings import BaseSettings, SettingsConfigDict

settings_logger = logging.getLogger(__name__)

# --- Nested Models for Structured Configuration ---
class ChartMetricConfig(BaseModel):
    event_type: str
    keywords: List[str]
    data_type_label: str
    title: str

class AnalyticsConfig(BaseModel):
    chart_lookback_days: int = 30
    digest_lookback_hours: int = 12
    high_fall_risk_label: str = "High"
    high_fall_risk_reason: str = "High Fall Risk"
    recent_incident_reason_template: str = "Recent Incident ({incident_type})"

class CompletionConfig(BaseModel):
    api_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-3.5-turbo"
    timeout_seconds: float = 30.0
    max_attempts: int = 3; backoff_base_seconds: float = 0.5

# --- Main Settings Class ---
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CARESHIFT_', case_sensitive=False, env_file='.env', env_file_encoding='utf-8', extra='ignore')

    PROJECT_ROOT_DIR: DirectoryPath = Path(__file__).resolve().parent.parent
    APP_NAME: str = "CareShift Assistant"; APP_VERSION: str = "1.2.0"
    ASSISTANT_NAME: str = "CareShift"
    ORGANIZATION_NAME: str = "Senior Living Care Team"; SUPPORT_CONTACT_INFO: str = "support@careshift.example"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    ASSETS_DIR: Path; DATA_SOURCES_DIR: Path
    STYLE_CSS_PATH: Path; FACILITY_DB_PATH: Path

    @model_validator(mode='before')
    @classmethod
    def set_default_paths(cls, values: Any) -> Any:
        if isinstance(values, dict):
            root = values.get('PROJECT_ROOT_DIR', Path(__file__).resolve().parent.parent)
            assets = Path(root) / "assets"; data = Path(root) / "data_sources"
            values.setdefault('ASSETS_DIR', assets); values.setdefault('DATA_SOURCES_DIR', data)
            values.setdefault('STYLE_CSS_PATH', assets / "style_chat.css")
            values.setdefault('FACILITY_DB_PATH', data / "mock_db.json")
        return values

    # Timestamps are converted to this zone before any calendar-day logic.
    FACILITY_TIMEZONE: str = "UTC"
    DAY_SHIFT_START_HOUR: int = 7; DAY_SHIFT_END_HOUR: int = 19

    SHIFT_SUMMARY_KEYWORDS: List[str] = ["shift summary", "handover"]
    CHART_KEYWORDS: List[str] = ["graph", "chart", "weekly", "monthly"]
    CHART_METRICS: Dict[str, ChartMetricConfig] = {
        "falls": ChartMetricConfig(event_type="Fall", keywords=["falls"], data_type_label="Falls", title="Weekly Falls"),
        "bathroom_visits": ChartMetricConfig(event_type="Bathroom Visit", keywords=["bathroom", "visits"], data_type_label="Visits", title="Weekly Bathroom Visits"),
    }

    ANALYTICS: AnalyticsConfig = AnalyticsConfig(); COMPLETION: CompletionConfig = CompletionConfig()
    OPENAI_API_KEY: Optional[SecretStr] = Field(None, description="Set via CARESHIFT_OPENAI_API_KEY env var")

    COLOR_PRIMARY: str = "#06AEEF"; COLOR_SECONDARY: str = "#546E7A"
    COLOR_BACKGROUND_CONTENT: str = "#FFFFFF"
    COLOR_TEXT_PRIMARY: str = "#343A40"; COLOR_TEXT_HEADINGS: str = "#1A2557"; COLOR_TEXT_MUTED: str = "#6C757D"
    COLOR_RISK_HIGH: str = "#D32F2F"; COLOR_RISK_LOW: str = "#388E3C"
    PLOTLY_COLORWAY: List[str] = [COLOR_PRIMARY, COLOR_RISK_LOW, COLOR_RISK_HIGH, COLOR_SECONDARY]

    @computed_field
    @property
    def APP_FOOTER_TEXT(self) -> str: return f"© {datetime.now().year} {self.ORGANIZATION_NAME}. Shift-ready answers for care staff."

try:
    settings = Settings()
    settings_logger.info(f"CareShift settings loaded successfully. App: {settings.APP_NAME} v{settings.APP_VERSION}")
except Exception as e:
    settings_logger.critical(f"FATAL: Could not initialize Pydantic settings. Error: {e}", exc_info=True)
    raise
