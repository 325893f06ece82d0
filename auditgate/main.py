"""
auditgate — CLI entrypoint.

Usage:
    python -m auditgate.main --help
    auditgate run --dry-run
    auditgate run --update --no-interactive
    auditgate config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from auditgate import __version__
from auditgate.core.observability.logging_config import setup_logging

_STATUS_STYLE = {
    "ok": ("✓", "green"),
    "failed": ("✗", "red"),
    "skipped": ("⊘", "yellow"),
    "planned": ("…", "cyan"),
}


@click.group()
@click.version_option(version=__version__, prog_name="auditgate")
@click.option("--verbose", "-v", is_flag=True, help="Show more detail in reports.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to auditgate.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """auditgate — fetch, vet and run Linux audit tools safely."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=_console_level(debug, quiet),
        log_file=os.environ.get("AUDITGATE_LOG_FILE"),
        log_file_level=os.environ.get("AUDITGATE_LOG_FILE_LEVEL"),
    )


def _console_level(debug: bool, quiet: bool) -> str:
    if debug:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return os.environ.get("AUDITGATE_LOG_LEVEL", "INFO")


def load_settings_or_exit(ctx: click.Context):
    """Load settings for a command; exit 1 with a message if invalid."""
    from auditgate.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


class StopAtUnknownCommand(click.Command):
    """Command whose option parsing ends at the first unrecognised token.

    That token and everything after it land in ``ctx.args`` unparsed, so
    flags following a stray argument never take effect.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        known = {opt for param in self.get_params(ctx) for opt in (*param.opts, *param.secondary_opts)}
        rest: list[str] = []
        for index, arg in enumerate(args):
            if arg not in known:
                args, rest = list(args[:index]), list(args[index:])
                break

        super().parse_args(ctx, args)
        ctx.args = [*ctx.args, *rest]
        return ctx.args


@cli.command(cls=StopAtUnknownCommand)
@click.option("--dry-run", is_flag=True, help="Show what would be done, don't execute actions.")
@click.option("--no-interactive", is_flag=True, help="Do not prompt; assume defaults (use with care).")
@click.option(
    "--update/--no-update",
    "update_deps",
    default=False,
    help="Allow cloning/updating tools from upstream (default: --no-update).",
)
@click.option("--run-as-root", is_flag=True, help="Allow running privileged checks (you will be prompted).")
@click.option("--tools-only", is_flag=True, help="Only fetch/update tools (don't run checks).")
@click.option("--skip-tools", is_flag=True, help="Don't fetch/update tools, just run local checks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the session result as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    dry_run: bool,
    no_interactive: bool,
    update_deps: bool,
    run_as_root: bool,
    tools_only: bool,
    skip_tools: bool,
    as_json: bool,
) -> None:
    """Run an audit session.

    Only whitelisted tools already present in the tools directory are
    executed. Privileged checks need an elevated identity and explicit
    confirmation.

    Examples:

        auditgate run --dry-run

        auditgate run --update --tools-only

        sudo auditgate run --run-as-root
    """
    import logging

    from auditgate.adapters.registry import AdapterRegistry
    from auditgate.adapters.shell.command import ShellCommandAdapter
    from auditgate.core.models.config import RunConfiguration
    from auditgate.core.use_cases.audit import run_audit

    logger = logging.getLogger("auditgate")
    if ctx.args:
        logger.debug("Ignoring trailing arguments: %s", " ".join(ctx.args))

    config = RunConfiguration(
        dry_run=dry_run,
        interactive=not no_interactive,
        run_privileged=run_as_root,
        tools_only=tools_only,
        skip_tools=skip_tools,
        update_deps=update_deps,
    )
    settings = load_settings_or_exit(ctx)

    registry = AdapterRegistry.default()
    # Tee tool output to the terminal, except when stdout carries JSON
    registry.register(ShellCommandAdapter(echo=None if as_json else click.echo))

    if not as_json:
        click.echo("--[ ", nl=False)
        click.secho(f"auditgate v{__version__}", fg="green", bold=True, nl=False)
        click.echo(" ]--")
        click.echo()
    logger.info("Running with options: %s", config.describe())

    try:
        result = run_audit(config, settings, registry=registry)
    except KeyboardInterrupt:
        click.echo()
        click.secho("Interrupted; partial logs are kept.", fg="yellow", err=True)
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.completed else 1)

    if result.error:
        sys.exit(1)

    if result.tools_only:
        _print_sync_summary(result.synced)
        return

    _print_outcomes(result, verbose=ctx.obj.get("verbose", False))


def _print_sync_summary(synced) -> None:
    if not synced:
        return
    click.echo()
    for sync in synced:
        color = "red" if sync.failed else "green"
        click.secho(f"   {sync.status:<8}", fg=color, nl=False)
        click.echo(f" {sync.name}")
    click.echo()


def _print_outcomes(result, verbose: bool) -> None:
    click.echo()
    mode = "[dry-run] " if result.dry_run else ""
    path = result.route.path.value if result.route else "?"
    click.secho(f"⚡ {mode}{result.session_name} ({path} checks)", fg="cyan", bold=True)

    for outcome in result.outcomes:
        icon, color = _STATUS_STYLE.get(outcome.status, ("?", "white"))
        click.secho(f"   {icon} {outcome.tool:<26}", fg=color, nl=False)
        if outcome.status == "skipped":
            click.echo(f" {outcome.reason}")
        elif outcome.status == "planned":
            click.echo(f" would log to {outcome.log_name}")
        elif outcome.failed:
            click.echo(f" {outcome.error}")
        else:
            timing = f" ({outcome.duration_ms}ms)" if outcome.duration_ms else ""
            click.echo(f" {outcome.log_name}{timing}")
        if verbose and outcome.command:
            click.echo(f"     │ {outcome.command}")

    counts = result.counts()
    click.echo()
    click.secho(
        f"   Ran {counts['ok'] + counts['failed']}: {counts['ok']} ok, {counts['failed']} failed, "
        f"{counts['skipped']} skipped, {counts['planned']} planned",
        fg="red" if counts["failed"] else "green",
        bold=True,
    )
    if result.session_dir and not result.dry_run:
        click.echo(f"   Logs: {result.session_dir}")
    click.echo()


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate auditgate.yml and flag permissive whitelist tokens."""
    from auditgate.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_config_check(result)

    if not result.valid:
        sys.exit(1)


def _print_config_check(result) -> None:
    source = result.config_path or "(built-in defaults)"
    click.secho(f"🔧 {source}", fg="cyan", bold=True)

    settings = result.settings
    if settings is not None:
        mode = "exact" if settings.whitelist_strict else "substring"
        click.echo(f"   tools      {settings.tools_path}")
        click.echo(f"   logs       {settings.logs_path}")
        click.echo(f"   whitelist  {', '.join(settings.whitelist) or '(empty)'}  [{mode}]")
        click.echo(f"   sources    {len(settings.sources)}")
        click.echo(f"   chown to   {settings.chown_owner}")

    click.echo()
    for err in result.errors:
        click.secho(f"   ✗ {err}", fg="red")
    for warn in result.warnings:
        click.secho(f"   ⚠️ {warn}", fg="yellow")

    if result.valid:
        click.secho("   ✓ Configuration is valid", fg="green", bold=True)
    else:
        click.secho(f"   Configuration errors: {len(result.errors)}", fg="red", bold=True)
    click.echo()


# ── Register sub-commands from auditgate/ui/cli/ ──────────────────

from auditgate.ui.cli.catalog import catalog  # noqa: E402
from auditgate.ui.cli.whitelist import whitelist  # noqa: E402

cli.add_command(catalog)
cli.add_command(whitelist)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
