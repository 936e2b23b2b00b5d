"""Configuration settings using Pydantic for validation."""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
import re

import yaml


class AWSConfig(BaseModel):
    """AWS services configuration."""
    region: str = Field(default="us-east-1", description="AWS region")

    # AWS credentials (optional - default credential chain otherwise)
    access_key_id: Optional[str] = Field(default=None, description="AWS access key ID")
    secret_access_key: Optional[str] = Field(default=None, description="AWS secret access key")
    profile_name: Optional[str] = Field(default=None, description="Named profile from the AWS credentials file")

    # Per-call timeouts; a hung request otherwise blocks the whole retry loop
    connect_timeout_seconds: int = Field(default=10, description="Connection timeout")
    read_timeout_seconds: int = Field(default=30, description="Read timeout")

    # LocalStack overrides for local development
    localstack_endpoint: Optional[str] = Field(default=None, description="LocalStack endpoint URL")


class RetryConfig(BaseModel):
    """Backoff between polling attempts."""
    initial_backoff_seconds: float = Field(default=1.0, ge=0.0, description="Initial backoff delay")
    max_backoff_seconds: float = Field(default=60.0, ge=0.0, description="Maximum backoff delay")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, description="Backoff multiplier")
    jitter: bool = Field(default=True, description="Add jitter to backoff")


class ScenarioConfig(BaseModel):
    """Parameters of the live stream scenarios."""
    stream_prefix: str = Field(default="kinesis-harness", description="Prefix isolating test streams")
    stream_name: str = Field(default="test-stream", description="Name of the shared test stream")
    shard_count: int = Field(default=1, ge=1, description="Shards of the shared test stream")
    active_wait_seconds: int = Field(default=64, ge=1, description="Upper bound on waiting for ACTIVE")
    record_visibility_attempts: int = Field(default=5, ge=0, description="Retries while waiting for a record")
    payload: str = Field(default="kinesis-harness payload", description="Record data written by put/get")
    partition_key: str = Field(default="kinesis-harness-key", description="Partition key of the written record")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")
    output: str = Field(default="stderr", description="Log output destination")

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v.lower() not in ['json', 'text']:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class HarnessSettings(BaseSettings):
    """Main harness settings."""

    model_config = SettingsConfigDict(
        env_prefix="KINESIS_HARNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    aws: AWSConfig = Field(default_factory=AWSConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    scenarios: ScenarioConfig = Field(default_factory=ScenarioConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in configuration objects.

    Supports syntax:
    - ${VAR_NAME} - Required variable (raises error if not found)
    - ${VAR_NAME:-default} - Optional variable with default value

    Raises:
        ValueError: If required environment variable is not found
    """
    if isinstance(obj, dict):
        return {key: substitute_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_env_var(match):
            var_expr = match.group(1)

            if ':-' in var_expr:
                var_name, default_value = var_expr.split(':-', 1)
                return os.getenv(var_name.strip(), default_value)
            else:
                var_name = var_expr.strip()
                value = os.getenv(var_name)
                if value is None:
                    raise ValueError(f"Required environment variable '{var_name}' is not set")
                return value

        return re.sub(r'\$\{([^}]+)\}', replace_env_var, obj)
    else:
        return obj


def load_settings(config_file: Optional[str] = None) -> HarnessSettings:
    """
    Load settings from config file and environment variables.

    The config file supports environment variable substitution using ${VAR_NAME} syntax.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        HarnessSettings: Validated configuration object

    Raises:
        ValueError: If required environment variables are missing
        FileNotFoundError: If config file doesn't exist
    """
    if config_file and os.path.exists(config_file):
        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        config_data = substitute_env_vars(raw_config)
        return HarnessSettings(**config_data)

    elif config_file:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    return HarnessSettings()
