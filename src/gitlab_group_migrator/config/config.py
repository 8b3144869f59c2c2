"""Configuration management for GitLab Group Migrator."""

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)


class ConfigError(Exception):
    """Configuration file is missing, unreadable or invalid."""

    pass


class ErrorPolicy(str, Enum):
    """What to do when a single subgroup or project fails."""

    SKIP = 'skip'
    ABORT = 'abort'


class GitLabInstanceConfig(BaseModel):
    """Connection settings for one GitLab instance."""

    url: str = Field(..., description='GitLab instance URL')
    token: str = Field(..., description='Personal access token')
    timeout: Optional[float] = Field(
        default=None, description='Request timeout in seconds (None = no timeout)'
    )
    per_page: int = Field(default=100, description='Page size for list requests')

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate GitLab URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('token')
    @classmethod
    def validate_token(cls, v):
        """Reject empty tokens."""
        if not v:
            raise ValueError('Access token must not be empty')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Log file format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for GitLab Group Migrator."""

    model_config = ConfigDict(extra='forbid')

    source_gitlab_url: str = Field(..., description='Source GitLab instance URL')
    target_gitlab_url: Optional[str] = Field(
        default=None, description='Target GitLab URL (defaults to source)'
    )
    source_access_token: Optional[str] = Field(
        default=None, description='Source personal access token'
    )
    target_access_token: Optional[str] = Field(
        default=None, description='Target personal access token (defaults to source)'
    )
    source_group: str = Field(..., description='Full path of the source group')
    target_group: str = Field(..., description='Full path of the target group')
    specific_projects: List[str] = Field(
        default_factory=list,
        description='Project paths relative to source_group; migrates only these',
    )

    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.SKIP,
        description='skip: log failures and continue, abort: stop on first failure',
    )
    per_page: int = Field(default=100, description='Page size for list requests')
    request_timeout: Optional[float] = Field(
        default=None, description='HTTP request timeout in seconds'
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @field_validator('source_gitlab_url', 'target_gitlab_url')
    @classmethod
    def strip_url(cls, v):
        """Drop trailing slashes from instance URLs."""
        return v.rstrip('/') if v else v

    @field_validator('source_group', 'target_group')
    @classmethod
    def validate_group_path(cls, v):
        """Normalise and require group paths."""
        v = v.strip('/')
        if not v:
            raise ValueError('Group path must not be empty')
        return v

    @field_validator('specific_projects', mode='before')
    @classmethod
    def none_to_empty_list(cls, v):
        """An empty YAML key means no selection."""
        return [] if v is None else v

    @field_validator('per_page')
    @classmethod
    def validate_per_page(cls, v):
        """Validate page size is positive."""
        if v <= 0:
            raise ValueError('per_page must be positive')
        return v

    @field_validator('request_timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v is not None and v <= 0:
            raise ValueError('request_timeout must be positive')
        return v

    @model_validator(mode='after')
    def apply_defaults(self):
        """Fill in the source token from the environment and target defaults."""
        if not self.source_access_token:
            self.source_access_token = os.getenv('SOURCE_ACCESS_TOKEN')
        if not self.source_access_token:
            raise ValueError('source_access_token must be provided')

        if not self.target_gitlab_url:
            self.target_gitlab_url = self.source_gitlab_url

        if not self.target_access_token:
            self.target_access_token = self.source_access_token

        return self

    @property
    def source(self) -> GitLabInstanceConfig:
        """Connection settings for the source instance."""
        return GitLabInstanceConfig(
            url=self.source_gitlab_url,
            token=self.source_access_token,
            timeout=self.request_timeout,
            per_page=self.per_page,
        )

    @property
    def target(self) -> GitLabInstanceConfig:
        """Connection settings for the target instance."""
        return GitLabInstanceConfig(
            url=self.target_gitlab_url,
            token=self.target_access_token,
            timeout=self.request_timeout,
            per_page=self.per_page,
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from a YAML file.

        Tokens missing from the file are looked up in the environment,
        including a ``.env`` file in the working directory.

        Raises:
            ConfigError: If the file cannot be read, parsed or validated
        """
        config_file = Path(config_path)

        if not config_file.is_file():
            raise ConfigError(f'Configuration file not found: {config_path}')

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f'Cannot read configuration file {config_path}: {e}')
        except yaml.YAMLError as e:
            raise ConfigError(f'Cannot parse configuration file {config_path}: {e}')

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError(
                f'Configuration file {config_path} must contain a mapping'
            )

        load_dotenv(find_dotenv(usecwd=True))

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f'Invalid configuration in {config_path}: {e}')
