"""Tests for the migration engine and summaries."""

from datetime import datetime

import pytest

from gitlab_group_migrator.api.exceptions import (
    GitLabHTTPStatusError,
    GitLabNotFoundError,
)
from gitlab_group_migrator.config.config import Config
from gitlab_group_migrator.migration.engine import MigrationEngine
from gitlab_group_migrator.migration.migrator import MigrationAbortedError
from gitlab_group_migrator.migration.results import (
    MigrationResult,
    MigrationStatus,
    MigrationSummary,
)


def make_config(**overrides) -> Config:
    settings = {
        'source_gitlab_url': 'https://source.example.com',
        'source_access_token': 'src-token',
        'target_gitlab_url': 'https://target.example.com',
        'target_access_token': 'dst-token',
        'source_group': 'teamA',
        'target_group': 'teamB',
    }
    settings.update(overrides)
    return Config(**settings)


class TestMigrationEngine:
    """Test running a whole migration."""

    def test_engine_builds_clients_from_config(self):
        """Test default client construction."""
        engine = MigrationEngine(make_config(request_timeout=9))

        assert engine.source_client.url == 'https://source.example.com'
        assert engine.target_client.url == 'https://target.example.com'
        assert engine.target_client.session.headers['Private-Token'] == 'dst-token'
        assert engine.target_client.config.timeout == 9

    def test_full_tree_run_and_rerun(self, source_gitlab, target_gitlab):
        """Test the teamA => teamB scenario twice."""
        first = MigrationEngine(
            make_config(), source_client=source_gitlab, target_client=target_gitlab
        ).migrate()

        assert first.results_by_type == {
            'group': {'total': 1, 'successful': 1, 'failed': 0, 'skipped': 0},
            'project': {'total': 2, 'successful': 2, 'failed': 0, 'skipped': 0},
        }
        assert source_gitlab.closed and target_gitlab.closed

        second = MigrationEngine(
            make_config(), source_client=source_gitlab, target_client=target_gitlab
        ).migrate()

        assert second.results_by_type == {
            'group': {'total': 1, 'successful': 0, 'failed': 0, 'skipped': 1},
            'project': {'total': 2, 'successful': 0, 'failed': 0, 'skipped': 2},
        }
        assert second.failed == []
        assert second.completed_at >= second.started_at

    def test_specific_projects_mode(self, source_gitlab, target_gitlab):
        """Test that specific_projects bypasses the tree walk."""
        config = make_config(specific_projects=['repo0'])

        summary = MigrationEngine(
            config, source_client=source_gitlab, target_client=target_gitlab
        ).migrate()

        assert source_gitlab.calls('fetch_group') == []
        assert source_gitlab.calls('list_subgroups') == []
        assert source_gitlab.calls('fetch_project') == [
            ('fetch_project', 'teamA/repo0')
        ]
        assert [r.target_path for r in summary.results] == ['teamB/repo0']

    def test_missing_target_root_is_fatal(self, source_gitlab, target_gitlab):
        """Test that an unresolvable root group fails the run."""
        engine = MigrationEngine(
            make_config(target_group='nowhere'),
            source_client=source_gitlab,
            target_client=target_gitlab,
        )

        with pytest.raises(GitLabNotFoundError):
            engine.migrate()

        assert source_gitlab.closed and target_gitlab.closed
        assert target_gitlab.imports == []

    def test_missing_source_root_is_fatal(self, source_gitlab, target_gitlab):
        """Test that the skip policy does not cover the root groups."""
        engine = MigrationEngine(
            make_config(source_group='nowhere'),
            source_client=source_gitlab,
            target_client=target_gitlab,
        )

        with pytest.raises(GitLabNotFoundError):
            engine.migrate()

    def test_abort_policy_propagates(self, source_gitlab, target_gitlab):
        """Test that the engine re-raises an aborted migration."""
        target_gitlab.errors[('create_subgroup', 'sub1')] = GitLabHTTPStatusError(
            'API returned status 500', status_code=500
        )
        engine = MigrationEngine(
            make_config(error_policy='abort'),
            source_client=source_gitlab,
            target_client=target_gitlab,
        )

        with pytest.raises(MigrationAbortedError):
            engine.migrate()

        assert target_gitlab.closed

    def test_skip_policy_completes_with_failures(self, source_gitlab, target_gitlab):
        """Test that skipped failures still produce a summary."""
        target_gitlab.errors[('create_subgroup', 'sub1')] = GitLabHTTPStatusError(
            'API returned status 500', status_code=500
        )

        summary = MigrationEngine(
            make_config(), source_client=source_gitlab, target_client=target_gitlab
        ).migrate()

        assert [r.source_path for r in summary.failed] == ['teamA/sub1']
        assert summary.results_by_type['project']['successful'] == 1


class TestMigrationSummary:
    """Test summary aggregation."""

    def test_results_by_type(self):
        """Test counting results per entity type."""
        results = [
            MigrationResult(
                entity_type='group',
                source_path='a/x',
                target_path='b/x',
                status=MigrationStatus.COMPLETED,
            ),
            MigrationResult(
                entity_type='project',
                source_path='a/p',
                target_path='b/p',
                status=MigrationStatus.SKIPPED,
                metadata={'reason': 'project_already_exists'},
            ),
            MigrationResult(
                entity_type='project',
                source_path='a/q',
                target_path='b/q',
                status=MigrationStatus.FAILED,
                error_message='boom',
            ),
        ]

        summary = MigrationSummary(started_at=datetime.now(), results=results)

        assert summary.results_by_type == {
            'group': {'total': 1, 'successful': 1, 'failed': 0, 'skipped': 0},
            'project': {'total': 2, 'successful': 0, 'failed': 1, 'skipped': 1},
        }
        assert summary.failed == [results[2]]
        assert results[1].success and not results[2].success

    def test_empty_summary(self):
        """Test a run that found nothing to migrate."""
        summary = MigrationSummary(started_at=datetime.now())

        assert summary.results_by_type == {}
        assert summary.failed == []
