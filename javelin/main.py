"""
Javelin — CLI entrypoint.

Usage:
    javelin                      # provision with the default server
    javelin --url http://host    # provision from another server
    javelin plan --json          # show what would be installed
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from javelin import __version__
from javelin.core.config.loader import ConfigError, ProvisionConfig, load_config
from javelin.core.observability.logging_config import setup_logging

if TYPE_CHECKING:
    from javelin.core.use_cases.provision import ProvisionResult


def _load(ctx: click.Context) -> ProvisionConfig:
    try:
        return load_config(ctx.obj["config_path"], base_url=ctx.obj["url"])
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="javelin")
@click.option("--url", "url", default=None, help="File server base URL (default: built-in server).")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to javelin.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    url: str | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Javelin — provision a local development environment."""
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug or verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = os.environ.get("JAVELIN_LOG_LEVEL", "INFO")

    setup_logging(
        level=level,
        log_file=os.environ.get("JAVELIN_LOG_FILE"),
        log_file_level=os.environ.get("JAVELIN_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(provision)


@cli.command()
@click.pass_context
def provision(ctx: click.Context) -> None:
    """Download, unpack and install the curated toolset, then update PATH."""
    from javelin.adapters.console import ConsoleConfirmer
    from javelin.adapters.envstore.registry import RegistryEnvironmentStore
    from javelin.adapters.http.client import UrllibTransport
    from javelin.adapters.shell.command import SubprocessRunner
    from javelin.core.use_cases.provision import Collaborators, run_provision

    config = _load(ctx)
    runner = SubprocessRunner()
    collaborators = Collaborators(
        transport=UrllibTransport(headers=config.headers, timeout=config.request_timeout),
        runner=runner,
        store=RegistryEnvironmentStore(runner, key=config.environment_key),
        confirmer=ConsoleConfirmer(),
    )

    result = run_provision(config, collaborators)

    if result.error:
        click.secho(f"❌ Aborted: {result.error}", fg="red", err=True)
        sys.exit(1)
    if result.cancelled:
        return

    _print_summary(result)


def _print_summary(result: ProvisionResult) -> None:
    click.echo()
    for report in result.reports:
        if report.total == 0:
            continue
        line = f"   {report.stage:<11} {report.succeeded} ok"
        if report.skipped:
            line += f", {report.skipped} skipped"
        if report.failed:
            line += f", {report.failed} failed"
        click.echo(line)
        for outcome in report.outcomes:
            if outcome.failed:
                click.secho(f"     ✗ {outcome.item}: {outcome.detail}", fg="yellow")

    reg = result.registration
    if reg and reg.written:
        click.secho(f"   PATH        +{len(reg.added)} ({', '.join(reg.added) or 'already present'})", fg="green")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show which files the selection policy would install."""
    from javelin.adapters.http.client import UrllibTransport
    from javelin.core.use_cases.plan import build_plan

    config = _load(ctx)
    transport = UrllibTransport(headers=config.headers, timeout=config.request_timeout)
    result = build_plan(transport, config.base_url, config.toolchain_marker)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    selection = result.selection
    assert selection is not None
    click.secho(f"\n📦 {config.base_url}", fg="cyan", bold=True)
    click.echo(f"   Toolchain: {selection.toolchain_file or '(none)'}")
    click.echo(f"   Extension categories: {', '.join(selection.target_categories)}")
    click.secho(f"\n   Files ({len(selection.target_files)}):", bold=True)
    for name in selection.target_files:
        click.echo(f"     • {name}")
    click.echo()


if __name__ == "__main__":
    cli()
