"""
Stage-aware configuration for the marketplace functions.

Defaults are selected based on the STAGE environment variable (dev, staging, prod)
and can be overridden per setting through environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Capability call policy per stage
STAGE_DEFAULTS = {
    "dev": {
        "CAPABILITY_TIMEOUT_SECONDS": 60.0,
        "CAPABILITY_MAX_RETRIES": 0,
        "FETCH_TIMEOUT_SECONDS": 30.0,
        "FETCH_MAX_WORKERS": 4,
    },
    "staging": {
        "CAPABILITY_TIMEOUT_SECONDS": 60.0,
        "CAPABILITY_MAX_RETRIES": 0,
        "FETCH_TIMEOUT_SECONDS": 30.0,
        "FETCH_MAX_WORKERS": 8,
    },
    "prod": {
        "CAPABILITY_TIMEOUT_SECONDS": 110.0,
        "CAPABILITY_MAX_RETRIES": 1,
        "FETCH_TIMEOUT_SECONDS": 30.0,
        "FETCH_MAX_WORKERS": 8,
    },
}

DEFAULT_GENAI_MODEL = "gemini-2.5-flash"
DEFAULT_AGENT_ID = "default-agent-id"
DEFAULT_AGENT_LOCATION = "us-central1"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one deployment."""
    stage: str = "dev"
    project_id: Optional[str] = None
    genai_api_key: Optional[str] = None
    genai_use_vertexai: bool = False
    genai_location: str = "us-central1"
    genai_model: str = DEFAULT_GENAI_MODEL
    agent_id: str = DEFAULT_AGENT_ID
    agent_location: str = DEFAULT_AGENT_LOCATION
    agent_language_code: str = "en"
    storage_bucket: Optional[str] = None
    capability_timeout_s: float = 60.0
    capability_max_retries: int = 0
    fetch_timeout_s: float = 30.0
    fetch_max_workers: int = 4


def get_stage() -> str:
    """Get the current deployment stage from environment."""
    return os.getenv("STAGE", "dev")


def _stage_default(key: str):
    stage_config = STAGE_DEFAULTS.get(get_stage(), STAGE_DEFAULTS["staging"])
    return stage_config[key]


def _env_float(key: str) -> float:
    default = _stage_default(key)
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {key}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {key}={raw!r}, using {default}")
        return default
    return value


def _env_int(key: str) -> int:
    default = _stage_default(key)
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {key}={raw!r}, using {default}")
        return default
    if value < 0:
        logger.warning(f"Ignoring negative {key}={raw!r}, using {default}")
        return default
    return value


def _env_bool(key: str) -> bool:
    return os.getenv(key, "").strip().lower() in ("1", "true", "yes")


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    A local .env file is honoured for development runs; values already present
    in the environment take precedence.
    """
    load_dotenv(override=False)

    settings = Settings(
        stage=get_stage(),
        project_id=os.getenv("GOOGLE_CLOUD_PROJECT") or os.getenv("GCLOUD_PROJECT"),
        genai_api_key=os.getenv("GEMINI_API_KEY"),
        genai_use_vertexai=_env_bool("GENAI_USE_VERTEXAI"),
        genai_location=os.getenv("GENAI_LOCATION", "us-central1"),
        genai_model=os.getenv("GENAI_MODEL", DEFAULT_GENAI_MODEL),
        agent_id=os.getenv("DIALOGFLOW_AGENT_ID", DEFAULT_AGENT_ID),
        agent_location=os.getenv("DIALOGFLOW_LOCATION", DEFAULT_AGENT_LOCATION),
        agent_language_code=os.getenv("DIALOGFLOW_LANGUAGE_CODE", "en"),
        storage_bucket=os.getenv("STORAGE_BUCKET"),
        capability_timeout_s=_env_float("CAPABILITY_TIMEOUT_SECONDS"),
        capability_max_retries=_env_int("CAPABILITY_MAX_RETRIES"),
        fetch_timeout_s=_env_float("FETCH_TIMEOUT_SECONDS"),
        fetch_max_workers=max(1, _env_int("FETCH_MAX_WORKERS")),
    )
    logger.info(
        f"Settings loaded - stage: {settings.stage}, project: {settings.project_id}, "
        f"model: {settings.genai_model}, timeout: {settings.capability_timeout_s}s, "
        f"retries: {settings.capability_max_retries}"
    )
    return settings
