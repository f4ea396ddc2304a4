"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, the same way the deployment platform injects
them.  Defaults are provided for all fields so that the API can be
started locally with the in‑memory store and no credentials at all.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Rental Listings API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Which document store backs the API.  ``firestore`` talks to a real
    # Firestore project through firebase-admin; ``memory`` keeps listings
    # in process and is meant for local development and tests.
    store_backend: str = os.getenv("STORE_BACKEND", "firestore").lower()

    # Service account credentials as a single‑line JSON string.  When the
    # variable is missing or cannot be parsed the store stays
    # uninitialised and data routes answer with HTTP 500.
    firebase_service_account_json: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "")

    # Bucket holding listing images.  The older front-end variable name is
    # accepted so existing deployments keep working.
    firebase_storage_bucket: str = os.getenv(
        "FIREBASE_STORAGE_BUCKET", os.getenv("NEXT_PUBLIC_FIREBASE_STORAGE_BUCKET", "")
    )

    properties_collection: str = os.getenv("PROPERTIES_COLLECTION", "properties")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
