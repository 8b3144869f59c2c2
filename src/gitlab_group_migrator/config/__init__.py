"""Configuration management for GitLab Group Migrator."""

from .config import (
    Config,
    ConfigError,
    ErrorPolicy,
    GitLabInstanceConfig,
    LoggingConfig,
)

__all__ = [
    'Config',
    'ConfigError',
    'ErrorPolicy',
    'GitLabInstanceConfig',
    'LoggingConfig',
]
