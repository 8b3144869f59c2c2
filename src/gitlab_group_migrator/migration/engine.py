"""Migration engine - main entry point for migration operations."""

from datetime import datetime
from typing import Optional

from loguru import logger

from ..api.client import GitLabClient, GitLabClientFactory
from ..config.config import Config
from .migrator import NamespaceMigrator
from .results import MigrationSummary


class MigrationEngine:
    """Resolves the configured root groups and runs one migration."""

    def __init__(
        self,
        config: Config,
        source_client: Optional[GitLabClient] = None,
        target_client: Optional[GitLabClient] = None,
    ):
        """Initialize migration engine.

        Args:
            config: Migration configuration
            source_client: Client for the source instance (built from config if omitted)
            target_client: Client for the target instance (built from config if omitted)
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = source_client or GitLabClientFactory.create_client(
            config.source
        )
        self.target_client = target_client or GitLabClientFactory.create_client(
            config.target
        )

        self.migrator = NamespaceMigrator(
            self.source_client,
            self.target_client,
            error_policy=config.error_policy,
        )

    def migrate(self) -> MigrationSummary:
        """Run the migration selected by the configuration.

        With ``specific_projects`` set only those projects are imported into
        the target group; otherwise the whole source group tree is migrated.

        Returns:
            Migration summary

        Raises:
            GitLabAPIError: If a root group cannot be resolved
            MigrationAbortedError: On the first failure under the abort policy
        """
        started_at = datetime.now()
        self.logger.info(
            f'Starting migration {self.config.source_gitlab_url}/'
            f'{self.config.source_group} => {self.config.target_gitlab_url}/'
            f'{self.config.target_group} '
            f'(error policy: {self.config.error_policy.value})'
        )

        try:
            target_root = self.target_client.fetch_group(self.config.target_group)

            if self.config.specific_projects:
                self.logger.info(
                    f'Migrating {len(self.config.specific_projects)} selected projects'
                )
                self.migrator.migrate_named_projects(
                    self.config.source_group,
                    self.config.specific_projects,
                    target_root.id,
                    target_root.full_path,
                )
            else:
                source_root = self.source_client.fetch_group(self.config.source_group)
                self.migrator.migrate_namespace(
                    source_root.id,
                    target_root.id,
                    target_root.full_path,
                    source_path=source_root.full_path,
                )

        except Exception as e:
            self.logger.error(f'Migration failed: {e}')
            raise
        finally:
            self.source_client.close()
            self.target_client.close()

        summary = MigrationSummary(
            started_at=started_at,
            completed_at=datetime.now(),
            results=list(self.migrator.results),
        )
        self.logger.info(
            f'Migration finished: {len(summary.results)} items, '
            f'{len(summary.failed)} failed'
        )
        return summary
