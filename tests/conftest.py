"""Shared fixtures: an in-memory GitLab standing in for GitLabClient."""

from typing import Dict, List, Optional

import pytest

from gitlab_group_migrator.api.exceptions import (
    GitLabConflictError,
    GitLabNotFoundError,
)
from gitlab_group_migrator.config.config import GitLabInstanceConfig
from gitlab_group_migrator.models.group import Group
from gitlab_group_migrator.models.project import Project


class FakeGitLab:
    """Implements the GitLabClient operations used by the migrator.

    Every call is appended to ``journal`` as ``(name, operation, key)``;
    two instances can share one journal to check cross-instance ordering.
    Exceptions put in ``errors[(operation, key)]`` are raised by that call.
    """

    def __init__(self, name: str, url: str, token: str, journal: Optional[list] = None):
        self.name = name
        self.config = GitLabInstanceConfig(url=url, token=token)
        self.groups: Dict[str, Group] = {}
        self.projects: Dict[str, Project] = {}
        self.imports: List[dict] = []
        self.errors: Dict[tuple, Exception] = {}
        self.journal = journal if journal is not None else []
        self.closed = False
        self._next_id = 1

    @property
    def url(self) -> str:
        return self.config.url

    def calls(self, operation: Optional[str] = None) -> List[tuple]:
        return [
            (op, key)
            for name, op, key in self.journal
            if name == self.name and (operation is None or op == operation)
        ]

    def add_group(self, full_path: str, visibility: str = 'private') -> Group:
        parent_path, _, path = full_path.rpartition('/')
        parent = self.groups.get(parent_path)
        group = Group(
            id=self._new_id(),
            name=path.upper(),
            path=path,
            full_path=full_path,
            visibility=visibility,
            parent_id=parent.id if parent else None,
        )
        self.groups[full_path] = group
        return group

    def add_project(
        self, path_with_namespace: str, description: str = '', visibility='private'
    ) -> Project:
        path = path_with_namespace.rpartition('/')[2]
        project = Project(
            id=self._new_id(),
            name=path.upper(),
            path=path,
            path_with_namespace=path_with_namespace,
            visibility=visibility,
            description=description,
        )
        self.projects[path_with_namespace] = project
        return project

    def fetch_group(self, full_path: str) -> Group:
        self._call('fetch_group', full_path)
        if full_path not in self.groups:
            raise GitLabNotFoundError('404 Group Not Found', status_code=404)
        return self.groups[full_path]

    def fetch_project(self, full_path: str) -> Project:
        self._call('fetch_project', full_path)
        if full_path not in self.projects:
            raise GitLabNotFoundError('404 Project Not Found', status_code=404)
        return self.projects[full_path]

    def list_subgroups(self, group_id: int) -> List[Group]:
        self._call('list_subgroups', group_id)
        return [g for g in self.groups.values() if g.parent_id == group_id]

    def list_projects(self, group_id: int) -> List[Project]:
        self._call('list_projects', group_id)
        namespace = self._group_by_id(group_id).full_path
        return [
            p
            for p in self.projects.values()
            if p.path_with_namespace.rpartition('/')[0] == namespace
        ]

    def create_subgroup(self, source_group: Group, parent_id: int) -> Group:
        self._call('create_subgroup', source_group.path)
        full_path = f'{self._group_by_id(parent_id).full_path}/{source_group.path}'
        if full_path in self.groups:
            raise GitLabConflictError(
                'Failed to save group {:path=>["has already been taken"]}',
                status_code=400,
            )
        return self.add_group(full_path, visibility=source_group.visibility)

    def import_project(
        self,
        source_project: Project,
        source_url: str,
        source_token: str,
        namespace_id: int,
    ) -> None:
        self._call('import_project', source_project.path_with_namespace)
        namespace = self._group_by_id(namespace_id).full_path
        full_path = f'{namespace}/{source_project.path}'
        if full_path in self.projects:
            raise GitLabConflictError('409 Project already exists', status_code=409)

        self.imports.append(
            {
                'target_path': full_path,
                'source_url': source_url,
                'source_token': source_token,
            }
        )
        self.add_project(
            full_path,
            description=source_project.description,
            visibility=source_project.visibility,
        )

    def close(self):
        self.closed = True

    def _call(self, operation: str, key) -> None:
        self.journal.append((self.name, operation, key))
        error = self.errors.get((operation, key))
        if error is not None:
            raise error

    def _group_by_id(self, group_id: int) -> Group:
        for group in self.groups.values():
            if group.id == group_id:
                return group
        raise GitLabNotFoundError('404 Group Not Found', status_code=404)

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id


@pytest.fixture
def journal():
    return []


@pytest.fixture
def source_gitlab(journal):
    """Source instance with teamA, teamA/sub1 (repo1) and teamA/repo0."""
    gitlab = FakeGitLab('source', 'https://source.example.com', 'src-token', journal)
    gitlab.add_group('teamA')
    gitlab.add_group('teamA/sub1', visibility='internal')
    gitlab.add_project('teamA/sub1/repo1', description='first')
    gitlab.add_project('teamA/repo0')
    return gitlab


@pytest.fixture
def target_gitlab(journal):
    """Target instance with an empty teamB group."""
    gitlab = FakeGitLab('target', 'https://target.example.com', 'dst-token', journal)
    gitlab._next_id = 1000
    gitlab.add_group('teamB')
    return gitlab
