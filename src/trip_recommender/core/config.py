"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

MIN_GEOCODER_DELAY_S = 1.1


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid numeric value for {name}: {raw!r}") from exc


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for credentials and external service tuning."""

    google_api_key: Optional[str] = None
    default_model_id: str = "gemini-2.5-flash"
    llm_timeout_s: float = 30.0
    llm_temperature: float = 0.4
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "TripRecommender/1.0"
    geocoder_timeout_s: float = 10.0
    geocoder_delay_s: float = MIN_GEOCODER_DELAY_S

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from environment variables."""

        return cls(
            google_api_key=(
                os.getenv("GOOGLE_API_KEY")
                or os.getenv("GEMINI_API_KEY")
                or os.getenv("VITE_API_KEY")
            ),
            default_model_id=os.getenv("DEFAULT_MODEL_ID", "gemini-2.5-flash"),
            llm_timeout_s=_float_env("LLM_TIMEOUT_S", 30.0),
            llm_temperature=_float_env("LLM_TEMPERATURE", 0.4),
            nominatim_url=os.getenv(
                "NOMINATIM_URL", "https://nominatim.openstreetmap.org/search"
            ),
            nominatim_user_agent=os.getenv("NOMINATIM_USER_AGENT", "TripRecommender/1.0"),
            geocoder_timeout_s=_float_env("GEOCODER_TIMEOUT_S", 10.0),
            geocoder_delay_s=max(
                _float_env("GEOCODER_DELAY_S", MIN_GEOCODER_DELAY_S),
                MIN_GEOCODER_DELAY_S,
            ),
        )

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value
