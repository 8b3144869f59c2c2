"""Main CLI entry point for GitLab Group Migrator."""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..migration.engine import MigrationEngine
from ..migration.results import MigrationSummary
from ..utils.logging import setup_logging

console = Console()
err_console = Console(stderr=True)


@click.command()
@click.version_option(version=__version__, prog_name='gitlab-group-migrator')
@click.option(
    '--config',
    '-c',
    'config_path',
    default='config.yaml',
    show_default=True,
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
def cli(config_path: str, verbose: bool) -> None:
    """GitLab Group Migrator - Recreate a group tree on another GitLab instance."""
    setup_logging('DEBUG' if verbose else 'INFO')

    try:
        config = Config.from_file(config_path)
        _setup_logging_with_config(config, verbose)

        console.print(
            Panel.fit(
                '[bold blue]GitLab Group Migrator[/bold blue]\n'
                f'{config.source_group} => {config.target_group}',
                border_style='blue',
            )
        )

        summary = MigrationEngine(config).migrate()

    except Exception as e:
        err_console.print(f'[red]✗[/red] Migration failed: {escape(str(e))}')
        if verbose:
            err_console.print_exception()
        sys.exit(1)

    _display_migration_summary(summary)
    console.print('[green]✓[/green] Migration completed successfully')


def _setup_logging_with_config(config: Config, verbose: bool) -> None:
    """Setup logging with configuration from config file."""
    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('Entity Type', style='cyan')
    table.add_column('Total', style='blue')
    table.add_column('Successful', style='green')
    table.add_column('Failed', style='red')
    table.add_column('Skipped', style='yellow')

    for entity_type, counts in summary.results_by_type.items():
        table.add_row(
            f'{entity_type.title()}s',
            str(counts['total']),
            str(counts['successful']),
            str(counts['failed']),
            str(counts['skipped']),
        )

    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')

    errors = [
        f'{result.source_path}: {result.error_message}' for result in summary.failed
    ]
    if errors:
        console.print(f'\n[red]Errors ({len(errors)}):[/red]')
        for error in errors[:5]:  # Show first 5 errors
            console.print(f'  • {escape(error)}')
        if len(errors) > 5:
            console.print(f'  ... and {len(errors) - 5} more errors')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        err_console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
