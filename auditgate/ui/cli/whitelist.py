"""
CLI commands for the whitelist.

Thin wrappers over ``auditgate.core.policy.whitelist``.
"""

from __future__ import annotations

import json
import sys

import click


def _load_settings(ctx: click.Context):
    from auditgate.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def whitelist() -> None:
    """Whitelist — which tools may run unattended."""


@whitelist.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_entries(ctx: click.Context, as_json: bool) -> None:
    """Show the configured whitelist tokens."""
    settings = _load_settings(ctx)

    if as_json:
        click.echo(json.dumps({"entries": settings.whitelist, "strict": settings.whitelist_strict}, indent=2))
        return

    mode = "exact match" if settings.whitelist_strict else "substring match"
    click.secho(f"🔒 Whitelist ({mode}):", fg="cyan", bold=True)
    if not settings.whitelist:
        click.echo("   (empty)")
    for token in settings.whitelist:
        click.echo(f"   • {token}")


@whitelist.command("check")
@click.argument("identifier")
@click.option("--strict/--no-strict", default=None, help="Override the configured match mode.")
@click.pass_context
def check(ctx: click.Context, identifier: str, strict: bool | None) -> None:
    """Report whether IDENTIFIER would run unattended.

    Exits 0 when whitelisted, 1 otherwise.
    """
    from auditgate.core.policy.whitelist import WhitelistSet, matching_entry

    settings = _load_settings(ctx)
    if strict is None:
        strict = settings.whitelist_strict

    token = matching_entry(identifier, WhitelistSet.of(settings.whitelist, strict=strict))
    if token is None:
        click.secho(f"✗ {identifier} is not whitelisted", fg="red")
        sys.exit(1)

    via = "" if token == identifier else f" (substring '{token}')"
    click.secho(f"✓ {identifier} is whitelisted{via}", fg="green")
