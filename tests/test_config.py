import pytest

from core.utils import config
from core.utils.config import STAGE_DEFAULTS, load_settings

ENV_KEYS = [
    "STAGE",
    "GOOGLE_CLOUD_PROJECT",
    "GCLOUD_PROJECT",
    "GEMINI_API_KEY",
    "GENAI_USE_VERTEXAI",
    "GENAI_MODEL",
    "DIALOGFLOW_AGENT_ID",
    "DIALOGFLOW_LOCATION",
    "STORAGE_BUCKET",
    "CAPABILITY_TIMEOUT_SECONDS",
    "CAPABILITY_MAX_RETRIES",
    "FETCH_TIMEOUT_SECONDS",
    "FETCH_MAX_WORKERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.setattr(config, "load_dotenv", lambda **kwargs: False)


def test_dev_defaults():
    settings = load_settings()
    assert settings.stage == "dev"
    assert settings.genai_model == "gemini-2.5-flash"
    assert settings.agent_id == "default-agent-id"
    assert settings.capability_timeout_s == STAGE_DEFAULTS["dev"]["CAPABILITY_TIMEOUT_SECONDS"]
    assert settings.capability_max_retries == 0
    assert settings.genai_use_vertexai is False


def test_prod_stage_policy(monkeypatch):
    monkeypatch.setenv("STAGE", "prod")
    settings = load_settings()
    assert settings.capability_timeout_s == 110.0
    assert settings.capability_max_retries == 1
    assert settings.fetch_max_workers == 8


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "crafts-prod")
    monkeypatch.setenv("GEMINI_API_KEY", "key-123")
    monkeypatch.setenv("GENAI_USE_VERTEXAI", "true")
    monkeypatch.setenv("STORAGE_BUCKET", "shop-uploads")
    monkeypatch.setenv("CAPABILITY_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("CAPABILITY_MAX_RETRIES", "2")

    settings = load_settings()
    assert settings.project_id == "crafts-prod"
    assert settings.genai_api_key == "key-123"
    assert settings.genai_use_vertexai is True
    assert settings.storage_bucket == "shop-uploads"
    assert settings.capability_timeout_s == 15.0
    assert settings.capability_max_retries == 2


@pytest.mark.parametrize("key,raw", [
    ("CAPABILITY_TIMEOUT_SECONDS", "soon"),
    ("CAPABILITY_TIMEOUT_SECONDS", "-5"),
    ("CAPABILITY_MAX_RETRIES", "many"),
    ("CAPABILITY_MAX_RETRIES", "-1"),
])
def test_invalid_values_fall_back_to_stage_default(monkeypatch, key, raw):
    monkeypatch.setenv(key, raw)
    settings = load_settings()
    assert settings.capability_timeout_s == 60.0
    assert settings.capability_max_retries == 0


def test_dotenv_never_overrides_the_environment(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "load_dotenv", lambda **kwargs: calls.append(kwargs))
    load_settings()
    assert calls == [{"override": False}]
