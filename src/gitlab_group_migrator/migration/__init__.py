"""Namespace migration."""

from .engine import MigrationEngine
from .migrator import MigrationAbortedError, NamespaceMigrator
from .results import MigrationResult, MigrationStatus, MigrationSummary

__all__ = [
    'MigrationAbortedError',
    'MigrationEngine',
    'MigrationResult',
    'MigrationStatus',
    'MigrationSummary',
    'NamespaceMigrator',
]
