"""
Configuration system using Pydantic for type-safe settings management.

This module provides the settings for provider access (tokens, API base URLs)
and the tunables of the provider workflows (wait bounds, deploy key name).
Settings load from environment variables (``GITOPS_`` prefix) or from a YAML
file with ``${VAR}`` interpolation.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitops_providers.enums import GitProviderName
from gitops_providers.exceptions import ConfigurationError
from gitops_providers.utils.wait import DEFAULT_INTERVAL, DEFAULT_TIMEOUT


class WaitConfig(BaseModel):
    """Bounds for eventual-consistency polling."""

    interval: float = Field(default=DEFAULT_INTERVAL, gt=0, description="Seconds between probes")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Maximum seconds to keep probing")

    @model_validator(mode="after")
    def validate_bounds(self) -> WaitConfig:
        """Require at least one full interval inside the timeout."""
        if self.interval > self.timeout:
            raise ValueError(f"wait interval ({self.interval}s) must not exceed timeout ({self.timeout}s)")
        return self


class ProviderOptions(BaseModel):
    """Immutable workflow options handed to GitProvider and its managers."""

    model_config = ConfigDict(frozen=True)

    wait_interval: float = DEFAULT_INTERVAL
    wait_timeout: float = DEFAULT_TIMEOUT
    deploy_key_name: str = "gitops-deploy-key"
    repository_description: str = "GitOps managed repository"
    license_template: str | None = "apache-2.0"


class ProviderSettings(BaseSettings):
    """Main provider settings.

    Tokens support ``${ENV}`` references when loaded from YAML, and are read
    from ``GITOPS_GITHUB_TOKEN`` / ``GITOPS_GITLAB_TOKEN`` otherwise.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITOPS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    github_token: SecretStr | None = Field(default=None, description="GitHub personal access token")
    gitlab_token: SecretStr | None = Field(default=None, description="GitLab personal access token")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub API base URL")
    gitlab_url: str = Field(default="https://gitlab.com", description="GitLab instance base URL")
    dry_run: bool = Field(default=False, description="Log mutations instead of calling the provider")
    wait: WaitConfig = Field(default_factory=WaitConfig)
    deploy_key_name: str = Field(default="gitops-deploy-key", min_length=1)
    repository_description: str = Field(default="GitOps managed repository")
    license_template: str | None = Field(default="apache-2.0", description="License for new repositories")

    def token_for(self, provider: GitProviderName) -> str:
        """Return the API token configured for ``provider``.

        Raises:
            ConfigurationError: If no token is configured.
        """
        secret = self.github_token if provider == GitProviderName.GITHUB else self.gitlab_token
        if secret is None or not secret.get_secret_value().strip():
            raise ConfigurationError(
                f"No {provider} token configured. Set GITOPS_{str(provider).upper()}_TOKEN "
                f"or {provider}_token in the configuration file."
            )
        return secret.get_secret_value()

    def base_url_for(self, provider: GitProviderName) -> str:
        return self.github_api_url if provider == GitProviderName.GITHUB else self.gitlab_url

    def to_options(self) -> ProviderOptions:
        """Build the options passed into provider constructors."""
        return ProviderOptions(
            wait_interval=self.wait.interval,
            wait_timeout=self.wait.timeout,
            deploy_key_name=self.deploy_key_name,
            repository_description=self.repository_description,
            license_template=self.license_template,
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> ProviderSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ProviderSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing required fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
