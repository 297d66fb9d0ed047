"""Configuration for the Fare Compare API."""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings:
    """Application settings."""

    # API Settings
    API_TITLE = "Fare Compare API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Compare simulated Uber and Ola fares and keep a search history"

    # Database Settings
    DATABASE_URL = os.getenv("DATABASE_URL")
    DATABASE_NAME = os.getenv("DATABASE_NAME")

    # CORS Settings
    CORS_ORIGINS = _split_origins(os.getenv("CORS_ORIGINS", "*"))

    # Outbound geocoding / routing
    NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
    OSRM_URL = os.getenv("OSRM_URL", "https://router.project-osrm.org")
    GEO_USER_AGENT = os.getenv("GEO_USER_AGENT", "FareCompare/1.0 (demo)")
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

    # Password hashing cost
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    PORT = int(os.getenv("PORT", "8000"))


settings = Settings()
