"""Data models for GitLab entities."""

from .group import Group, GroupCreate
from .project import Project, ProjectCreate

__all__ = [
    'Group',
    'GroupCreate',
    'Project',
    'ProjectCreate',
]
