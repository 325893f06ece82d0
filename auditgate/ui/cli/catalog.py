"""
CLI command for the tool catalog.

Shows every catalog step with its presence under the tools directory
and whether the whitelist would let it run unattended.
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


@click.command("catalog")
@click.option(
    "--privileged/--unprivileged",
    "privileged",
    default=None,
    help="Only show one catalog (default: both).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def catalog(ctx: click.Context, privileged: bool | None, as_json: bool) -> None:
    """List catalog tools with presence and whitelist state."""
    from auditgate.core.data.catalog import PRIVILEGED_CATALOG, UNPRIVILEGED_CATALOG
    from auditgate.core.policy.whitelist import WhitelistSet, matching_entry

    settings = _load_settings(ctx)
    whitelist = WhitelistSet.of(settings.whitelist, strict=settings.whitelist_strict)

    sections = []
    if privileged is not True:
        sections.append(("unprivileged", UNPRIVILEGED_CATALOG))
    if privileged is not False:
        sections.append(("privileged", PRIVILEGED_CATALOG))

    rows: dict[str, list[dict]] = {}
    for label, entries in sections:
        rows[label] = [
            {
                "identifier": entry.identifier,
                "log_name": entry.log_name,
                "path": str(entry.resolve_path(settings.tools_path)),
                "present": entry.is_present(settings.tools_path),
                "whitelisted_by": matching_entry(entry.identifier, whitelist),
                "description": entry.description,
            }
            for entry in entries
        ]

    if as_json:
        click.echo(json.dumps({"tools_dir": str(settings.tools_path), "catalogs": rows}, indent=2))
        return

    click.secho(f"📋 Catalog (tools in {settings.tools_path})", fg="cyan", bold=True)
    for label, items in rows.items():
        click.echo()
        click.secho(f"   {label}:", bold=True)
        for item in items:
            if not item["present"]:
                click.secho(f"   ⊘ {item['log_name']:<34}", fg="bright_black", nl=False)
                click.echo(" not present")
            elif item["whitelisted_by"] is None:
                click.secho(f"   ⚠️ {item['log_name']:<33}", fg="yellow", nl=False)
                click.echo(" present, not whitelisted")
            else:
                click.secho(f"   ✓ {item['log_name']:<34}", fg="green", nl=False)
                token = item["whitelisted_by"]
                via = "" if token == item["identifier"] else f" (via '{token}')"
                click.echo(f" will run{via}")
            if ctx.obj.get("verbose") and item["description"]:
                click.echo(f"     │ {item['description']}")
    click.echo()
