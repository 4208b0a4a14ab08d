# ============================================================================
# src/transcript_analyzer/config/analysis_config.py
# ============================================================================
"""
Analysis Configuration (Gemini)
- API key and model
- Sampling temperature
- Timeout
- Number of independent analysis runs per transcript
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class AnalysisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GEMINI_API_KEY: str = Field(
        default="",
        description="Gemini API key. Analysis is refused while this is empty"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-2.0-flash-exp",
        description="Gemini model used for transcript analysis"
    )
    GEMINI_API_BASE: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Generative Language REST API"
    )
    ANALYSIS_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0, le=2.0,
        description="Sampling temperature for analysis requests"
    )
    ANALYSIS_TIMEOUT: int = Field(
        default=120,
        ge=1,
        description="Maximum time for a single analysis request (seconds)"
    )
    ANALYSIS_RUN_COUNT: int = Field(
        default=2,
        ge=1,
        description="Independent analysis runs merged per transcript (improves recall)"
    )

analysis_settings = AnalysisSettings()
