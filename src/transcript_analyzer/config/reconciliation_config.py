# ============================================================================
# src/transcript_analyzer/config/reconciliation_config.py
# ============================================================================
"""
Reconciliation Settings
- Year assumed for month/day-only dates
- Placeholder when no date can be resolved
- Excerpt signature length used for deduplication
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class ReconciliationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DEFAULT_YEAR: str = Field(
        default="2025",
        pattern=r"^\d{4}$",
        description="Year substituted when a date gives only month and day"
    )
    DATE_PLACEHOLDER: str = Field(
        default="-",
        description="Date written for findings whose date cannot be resolved"
    )
    SIGNATURE_LENGTH: int = Field(
        default=50,
        ge=1,
        description="Leading excerpt characters (whitespace removed) that identify a finding"
    )

reconciliation_settings = ReconciliationSettings()
