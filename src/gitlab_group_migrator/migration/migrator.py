"""Recursive group-tree migration between two GitLab instances."""

from typing import Iterable, List, Optional

from loguru import logger

from ..api.client import GitLabClient
from ..api.exceptions import GitLabAPIError, GitLabConflictError, GitLabNotFoundError
from ..config.config import ErrorPolicy
from ..models.group import Group
from ..models.project import Project
from .results import MigrationResult, MigrationStatus


class MigrationAbortedError(Exception):
    """Raised under the ``abort`` policy on the first failed item."""

    def __init__(self, message: str, result: MigrationResult):
        super().__init__(message)
        self.result = result


class NamespaceMigrator:
    """Walks a source group tree depth-first and rebuilds it on the target.

    Subgroups are resolved on the target (reused if they already exist,
    created otherwise) before their own children are visited. Projects are
    not copied; the target instance is asked to import each one from the
    source, and a project that already exists on the target counts as
    skipped. Running the migrator again over the same pair of groups is
    therefore safe.

    Every outcome is appended to ``results``. What happens on a failure
    depends on ``error_policy``: ``skip`` records it and moves on to the
    next sibling, ``abort`` records it and raises ``MigrationAbortedError``.
    """

    def __init__(
        self,
        source_client: GitLabClient,
        target_client: GitLabClient,
        error_policy: ErrorPolicy = ErrorPolicy.SKIP,
    ):
        self.source_client = source_client
        self.target_client = target_client
        self.error_policy = ErrorPolicy(error_policy)
        self.results: List[MigrationResult] = []
        self.logger = logger.bind(component='NamespaceMigrator')

    def migrate_namespace(
        self,
        source_id: int,
        target_id: int,
        target_path: str,
        source_path: Optional[str] = None,
    ) -> None:
        """Migrate subgroups and projects of a source group into a target group.

        Args:
            source_id: Source group ID
            target_id: Target group ID
            target_path: Full path of the target group
            source_path: Full path of the source group, used in failure records
        """
        source_label = source_path or f'#{source_id}'

        try:
            subgroups = self.source_client.list_subgroups(source_id)
        except GitLabAPIError as e:
            self._record_failure(
                'group',
                source_label,
                target_path,
                f'Error listing subgroups of {source_label}: {e}',
                e,
            )
            subgroups = []

        for subgroup in subgroups:
            self.logger.info(f'Subgroup: {subgroup.full_path} (ID {subgroup.id})')
            target_subgroup = self._resolve_subgroup(subgroup, target_id, target_path)
            if target_subgroup is None:
                continue

            self.migrate_namespace(
                subgroup.id,
                target_subgroup.id,
                target_subgroup.full_path,
                source_path=subgroup.full_path,
            )

        try:
            projects = self.source_client.list_projects(source_id)
        except GitLabAPIError as e:
            self._record_failure(
                'group',
                source_label,
                target_path,
                f'Error listing projects of {source_label}: {e}',
                e,
            )
            projects = []

        for project in projects:
            self.logger.info(f'Project: {project.path_with_namespace}')
            self._import_project(project, target_id, target_path)

        self.logger.info(f'Finished namespace {source_id} => {target_id}')

    def migrate_named_projects(
        self,
        source_group: str,
        paths: Iterable[str],
        target_id: int,
        target_path: str,
    ) -> None:
        """Import selected projects of ``source_group`` into one target group.

        No subgroup traversal happens; each path is resolved relative to
        ``source_group`` and imported directly under ``target_id``.

        Args:
            source_group: Full path of the source group
            paths: Project paths relative to ``source_group``
            target_id: Target group ID
            target_path: Full path of the target group
        """
        for path in paths:
            relative_path = path.strip('/')
            full_path = f'{source_group}/{relative_path}'
            project_target_path = f'{target_path}/{relative_path.rsplit("/", 1)[-1]}'

            try:
                project = self.source_client.fetch_project(full_path)
            except GitLabAPIError as e:
                self._record_failure(
                    'project',
                    full_path,
                    project_target_path,
                    f'Skipping project {full_path}: {e}',
                    e,
                )
                continue

            self.logger.info(
                f'Importing selected project {project.path_with_namespace}'
            )
            self._import_project(project, target_id, target_path)

    def _resolve_subgroup(
        self, subgroup: Group, parent_id: int, parent_path: str
    ) -> Optional[Group]:
        """Find the target counterpart of ``subgroup`` or create it."""
        target_path = f'{parent_path}/{subgroup.path}'

        try:
            existing = self.target_client.fetch_group(target_path)
        except GitLabNotFoundError:
            existing = None
        except GitLabAPIError as e:
            self._record_failure(
                'group',
                subgroup.full_path,
                target_path,
                f'Error looking up subgroup {target_path}: {e}',
                e,
            )
            return None

        if existing is not None:
            self.logger.info(
                f'Reusing existing subgroup {existing.full_path} (ID {existing.id})'
            )
            self._record(
                'group',
                subgroup.full_path,
                existing.full_path,
                MigrationStatus.SKIPPED,
                reason='group_already_exists',
            )
            return existing

        try:
            created = self.target_client.create_subgroup(subgroup, parent_id)
        except GitLabAPIError as e:
            self._record_failure(
                'group',
                subgroup.full_path,
                target_path,
                f'Skipping subgroup {subgroup.full_path}: {e}',
                e,
            )
            return None

        self.logger.info(f'Created subgroup {created.full_path} (ID {created.id})')
        self._record(
            'group', subgroup.full_path, created.full_path, MigrationStatus.COMPLETED
        )
        return created

    def _import_project(
        self, project: Project, target_id: int, target_path: str
    ) -> None:
        project_target_path = f'{target_path}/{project.path}'

        try:
            self.target_client.import_project(
                project,
                self.source_client.url,
                self.source_client.config.token,
                target_id,
            )
        except GitLabConflictError:
            self.logger.info(f'Already exists, skipping {project.path_with_namespace}')
            self._record(
                'project',
                project.path_with_namespace,
                project_target_path,
                MigrationStatus.SKIPPED,
                reason='project_already_exists',
            )
            return
        except GitLabAPIError as e:
            self._record_failure(
                'project',
                project.path_with_namespace,
                project_target_path,
                f'Error importing project {project.path_with_namespace}: {e}',
                e,
            )
            return

        self.logger.info(f'Imported {project.path_with_namespace} successfully')
        self._record(
            'project',
            project.path_with_namespace,
            project_target_path,
            MigrationStatus.COMPLETED,
        )

    def _record(
        self,
        entity_type: str,
        source_path: str,
        target_path: str,
        status: MigrationStatus,
        error_message: Optional[str] = None,
        **metadata,
    ) -> MigrationResult:
        result = MigrationResult(
            entity_type=entity_type,
            source_path=source_path,
            target_path=target_path,
            status=status,
            error_message=error_message,
            metadata=metadata,
        )
        self.results.append(result)
        return result

    def _record_failure(
        self,
        entity_type: str,
        source_path: str,
        target_path: str,
        message: str,
        error: Exception,
    ) -> None:
        self.logger.error(message)
        result = self._record(
            entity_type,
            source_path,
            target_path,
            MigrationStatus.FAILED,
            error_message=str(error),
        )

        if self.error_policy == ErrorPolicy.ABORT:
            raise MigrationAbortedError(message, result) from error
