"""Configuration management for slippy-find.

All settings come from environment variables. The pipeline definition is
loaded from Vault when VAULT_PIPELINE_CONFIG_PATH is set, otherwise from the
file named by SLIPPY_PIPELINE_CONFIG.
"""

import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .pipeline.models import PipelineConfig
from .pipeline.resolver import PipelineConfigResolver
from .pipeline.sources import FilePipelineSource, VaultPipelineSource
from .secrets.base import SecretSource
from .secrets.vault_client import create_vault_client

logger = logging.getLogger(__name__)

# Pipeline configuration sources
ENV_PIPELINE_CONFIG = "SLIPPY_PIPELINE_CONFIG"
ENV_VAULT_PIPELINE_CONFIG_PATH = "VAULT_PIPELINE_CONFIG_PATH"
ENV_VAULT_PIPELINE_CONFIG_MOUNT = "VAULT_PIPELINE_CONFIG_MOUNT"

# Application settings
ENV_DATABASE = "SLIPPY_DATABASE"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_APP_NAME = "LOG_APP_NAME"
ENV_GIT_TIMEOUT = "SLIPPY_GIT_TIMEOUT"

# ClickHouse connection
ENV_CLICKHOUSE_HOSTNAME = "CLICKHOUSE_HOSTNAME"
ENV_CLICKHOUSE_PORT = "CLICKHOUSE_PORT"
ENV_CLICKHOUSE_USERNAME = "CLICKHOUSE_USERNAME"
ENV_CLICKHOUSE_PASSWORD = "CLICKHOUSE_PASSWORD"
ENV_CLICKHOUSE_SECURE = "CLICKHOUSE_SECURE"
ENV_CLICKHOUSE_SKIP_VERIFY = "CLICKHOUSE_SKIP_VERIFY"
ENV_CLICKHOUSE_TIMEOUT = "CLICKHOUSE_TIMEOUT"

DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_APP_NAME = "slippy-find"
DEFAULT_DATABASE = "ci"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ClickHouseConfig(BaseModel):
    """Connection settings for the ClickHouse HTTP interface."""

    hostname: str = Field(description="ClickHouse server hostname")
    port: int = Field(default=8123, description="HTTP interface port")
    username: str = Field(default="default", description="ClickHouse user")
    password: str = Field(default="", description="ClickHouse password")
    secure: bool = Field(default=False, description="Use HTTPS")
    skip_verify: bool = Field(
        default=False, description="Skip TLS certificate verification"
    )
    timeout: float = Field(default=30.0, description="Query timeout in seconds")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in the TCP range."""
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @property
    def base_url(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.hostname}:{self.port}"


class AppConfig(BaseModel):
    """Main configuration for slippy-find."""

    clickhouse: ClickHouseConfig
    pipeline_config: PipelineConfig
    database: str = Field(default=DEFAULT_DATABASE, description="Slip database")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Log level")
    log_app_name: str = Field(
        default=DEFAULT_LOG_APP_NAME, description="Application name in log lines"
    )
    git_timeout: Optional[float] = Field(
        default=None, description="Per-command git timeout in seconds"
    )

    @field_validator("git_timeout")
    @classmethod
    def validate_git_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Validate the git timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("Git timeout must be positive")
        return v


def log_level_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL


def log_app_name_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_APP_NAME) or DEFAULT_LOG_APP_NAME


class ConfigLoader:
    """Loads AppConfig from environment variables."""

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        secret_client_factory: Optional[Callable[[], SecretSource]] = None,
    ):
        """
        Args:
            environ: Environment to read; defaults to os.environ
            secret_client_factory: Creates the Vault client; defaults to
                AppRole authentication from VAULT_* variables
        """
        self.environ = os.environ if environ is None else environ
        self.secret_client_factory = secret_client_factory or (
            lambda: create_vault_client(self.environ)
        )

    def load(self) -> AppConfig:
        """Load the full application configuration.

        Raises:
            ConfigurationError: If any setting is missing or invalid
        """
        clickhouse = self.load_clickhouse_config()
        pipeline_config = self.load_pipeline_config()

        try:
            return AppConfig(
                clickhouse=clickhouse,
                pipeline_config=pipeline_config,
                database=self.environ.get(ENV_DATABASE) or DEFAULT_DATABASE,
                log_level=log_level_from_env(self.environ),
                log_app_name=log_app_name_from_env(self.environ),
                git_timeout=self.environ.get(ENV_GIT_TIMEOUT) or None,
            )
        except ValidationError as e:
            raise ConfigurationError("invalid application config", str(e)) from e

    def load_clickhouse_config(self) -> ClickHouseConfig:
        """Build the ClickHouse connection settings.

        Raises:
            ConfigurationError: If the hostname is unset or a value is invalid
        """
        env = self.environ
        hostname = env.get(ENV_CLICKHOUSE_HOSTNAME)
        if not hostname:
            raise ConfigurationError(
                "failed to load ClickHouse config",
                f"{ENV_CLICKHOUSE_HOSTNAME} is not set",
            )

        values: Dict[str, Any] = {"hostname": hostname}
        if env.get(ENV_CLICKHOUSE_PORT):
            values["port"] = env[ENV_CLICKHOUSE_PORT]
        if env.get(ENV_CLICKHOUSE_USERNAME):
            values["username"] = env[ENV_CLICKHOUSE_USERNAME]
        if env.get(ENV_CLICKHOUSE_PASSWORD):
            values["password"] = env[ENV_CLICKHOUSE_PASSWORD]
        if env.get(ENV_CLICKHOUSE_TIMEOUT):
            values["timeout"] = env[ENV_CLICKHOUSE_TIMEOUT]
        values["secure"] = env.get(ENV_CLICKHOUSE_SECURE, "").lower() in _TRUE_VALUES
        values["skip_verify"] = (
            env.get(ENV_CLICKHOUSE_SKIP_VERIFY, "").lower() in _TRUE_VALUES
        )

        try:
            return ClickHouseConfig(**values)
        except ValidationError as e:
            raise ConfigurationError("failed to load ClickHouse config", str(e)) from e

    def load_pipeline_config(self) -> PipelineConfig:
        """Resolve the pipeline definition, preferring Vault over a local file."""
        resolver = PipelineConfigResolver(
            [
                VaultPipelineSource(
                    locator=self.environ.get(ENV_VAULT_PIPELINE_CONFIG_PATH),
                    client_factory=self.secret_client_factory,
                    mount=self.environ.get(ENV_VAULT_PIPELINE_CONFIG_MOUNT),
                ),
                FilePipelineSource(self.environ.get(ENV_PIPELINE_CONFIG)),
            ]
        )
        return resolver.resolve()
