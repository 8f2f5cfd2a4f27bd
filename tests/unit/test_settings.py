"""Tests for application settings."""

from spaced_reading.application.config import Settings


def test_settings_defaults(monkeypatch):
    """Test default configuration values."""
    for name in ("STATE_BACKEND", "ENRICHER_TYPE", "AWS_REGION", "STORAGE_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_name == "spaced-reading"
    assert settings.api_port == 8000
    assert settings.state_backend == "local"
    assert settings.storage_key == "spaced_reading_db"
    assert settings.state_table_name == "SpacedReadingState"
    assert settings.enricher_type == "local"
    assert settings.aws_region == "us-east-1"
    assert settings.bedrock_model_id == "amazon.nova-lite-v1:0"
    assert settings.aws_access_key_id is None


def test_settings_from_environment(monkeypatch):
    """Environment variables override defaults, case-insensitively."""
    monkeypatch.setenv("STATE_BACKEND", "dynamodb")
    monkeypatch.setenv("state_table_name", "ReadingStateProd")
    monkeypatch.setenv("ENRICHER_TYPE", "bedrock")
    monkeypatch.setenv("BEDROCK_TEMPERATURE", "0.5")

    settings = Settings(_env_file=None)

    assert settings.state_backend == "dynamodb"
    assert settings.state_table_name == "ReadingStateProd"
    assert settings.enricher_type == "bedrock"
    assert settings.bedrock_temperature == 0.5
