"""GitLab Group Migrator

Recreates a GitLab group hierarchy (subgroups and projects) from one
GitLab instance on another, using server-side project imports.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main']
