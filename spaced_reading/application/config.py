"""Application configuration using Pydantic Settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "spaced-reading"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # State persistence
    state_backend: str = "local"  # "local" or "dynamodb"
    state_file: str = "spaced_reading_state.json"
    storage_key: str = "spaced_reading_db"
    state_table_name: str = "SpacedReadingState"

    # AWS settings
    aws_region: str = "us-east-1"

    # AWS credentials (optional, uses default credential chain if not set)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    # Book lookup configuration
    enricher_type: str = "local"  # "local" or "bedrock"

    # Bedrock configuration
    bedrock_model_id: str = "amazon.nova-lite-v1:0"
    bedrock_max_tokens: int = 2048
    bedrock_temperature: float = 0.2
    summary_language: str = "English"


# Create a singleton instance
settings = Settings()
