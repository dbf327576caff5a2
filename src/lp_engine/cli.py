"""CLI for LP-Engine."""

import sys
from pathlib import Path

import click
import structlog

from lp_engine.config.logging import configure_logging
from lp_engine.core.exceptions import LPEngineError

logger = structlog.get_logger(__name__)


def _create_service(settings=None):
    """Create the package service."""
    from lp_engine.config.settings import get_settings
    from lp_engine.services.packages import PackageService

    if settings is None:
        settings = get_settings()
    return PackageService.from_settings(settings)


def _fail(exc: LPEngineError) -> None:
    click.echo(f"Error: {exc.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """LP-Engine: learning-package import and synchronization."""
    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(log_level=log_level)


@cli.command(name="list")
@click.argument("repo_url")
def list_packages(repo_url: str) -> None:
    """List the packages a repository offers."""
    try:
        service = _create_service()
        packages = service.list_packages(repo_url)
    except LPEngineError as exc:
        _fail(exc)
        return

    if not packages:
        click.echo("No packages found.")
        return

    click.echo(f"Found {len(packages)} packages in {repo_url}:\n")
    for pkg in packages:
        kind = "workspace" if pkg.has_data_md else "nested"
        click.echo(f"  - {pkg.name} [{pkg.branch}] ({kind})")
        if pkg.description:
            click.echo(f"      {pkg.description}")


@cli.command()
@click.argument("repo_url")
@click.argument("branch")
@click.option("--vault", "-V", "vault_path", type=click.Path(file_okay=False), help="Vault directory")
@click.option(
    "--target", "-t", "target_path",
    type=click.Path(exists=True, file_okay=False),
    help="Existing workspace to nest the package in",
)
@click.option(
    "--data-md/--no-data-md", default=False,
    help="Package is a standalone workspace carrying data.md",
)
def clone(
    repo_url: str,
    branch: str,
    vault_path: str | None,
    target_path: str | None,
    data_md: bool,
) -> None:
    """Import a package branch into a vault or workspace."""
    try:
        service = _create_service()
        result = service.clone_package(
            repo_url,
            branch,
            vault_path,
            target_workspace_path=target_path,
            has_data_md=data_md,
        )
    except LPEngineError as exc:
        _fail(exc)
        return

    click.echo(result.message)
    for rel_path in result.skipped:
        click.echo(f"  missing upstream: {rel_path}", err=True)


@cli.command()
@click.argument("workspace_path", default=".")
@click.option("--force", "-f", is_flag=True, help="Discard local edits and reset to upstream")
def update(workspace_path: str, force: bool) -> None:
    """Update every package in a workspace from upstream."""
    workspace = Path(workspace_path).resolve()
    try:
        service = _create_service()
        results = service.update_workspace(str(workspace), force_update=force)
    except LPEngineError as exc:
        _fail(exc)
        return

    if not results:
        click.echo("No packages found in workspace.")
        return

    for result in results:
        click.echo(f"  [{result.outcome.value:>10}] {result.package_name}: {result.message}")
        for rel_path in result.conflicted_files:
            click.echo(f"               conflict in {rel_path}")

    conflicts = [r for r in results if r.conflict]
    if conflicts:
        click.echo(
            f"\n{len(conflicts)} package(s) conflict with upstream; "
            "re-run with --force to accept the upstream version."
        )
        sys.exit(2)


@cli.command()
def status() -> None:
    """Show the status of the local storage cache."""
    from lp_engine.config.settings import get_settings

    settings = get_settings()
    try:
        service = _create_service(settings)
    except LPEngineError as exc:
        _fail(exc)
        return
    entries = service.cached_packages()

    click.echo("LP-Engine Status")
    click.echo(f"  Cache root: {settings.cache_root}")
    click.echo(f"  Git:        {settings.git_executable}")
    click.echo(f"  Packages:   {len(entries)}")

    if entries:
        click.echo("\nCached packages:")
        for entry in entries[:20]:
            click.echo(f"  {entry.repo_dir}/{entry.package_name}")
        if len(entries) > 20:
            click.echo(f"  ... and {len(entries) - 20} more")


if __name__ == "__main__":
    cli()
