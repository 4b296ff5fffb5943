"""
a11ytool - Accessibility Tool licensing
Command Line Interface
"""
import asyncio
import json
import logging

import click
from rich.console import Console
from rich.table import Table

from a11ytool.config.config_manager import ConfigManager, config_command
from a11ytool.config.settings import Settings
from a11ytool.core.authorizer import Authorizer
from a11ytool.core.gating import EXPORT_FORMATS, check_export, feature_access


def _merge_config_with_kwargs(saved_config: dict, kwargs: dict) -> dict:
    """Merge saved config with CLI kwargs, prioritizing non-None CLI values"""
    final_config = saved_config.copy()

    for key, value in kwargs.items():
        if value is not None and not (isinstance(value, bool) and value is False):
            final_config[key] = value
        elif key not in final_config:
            final_config[key] = value

    return final_config


def _configure_logging(settings: Settings, log_path=None, verbose=False):
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(
        filename=log_path,
        level=level,
        format=settings.LOG_FORMAT
    )


def _build_authorizer(final_config: dict) -> Authorizer:
    settings = Settings()
    backend = final_config.get('storage_backend')
    if backend and backend != settings.STORAGE_BACKEND:
        settings = settings.model_copy(update={'STORAGE_BACKEND': backend})
    return Authorizer(settings=settings)


def _console(final_config: dict) -> Console:
    return Console(color_system="auto" if final_config.get('color', True) else None)


def _result_table(authorizer: Authorizer, result) -> Table:
    table = Table(title="License", show_header=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    table.add_row("Status", authorizer.status_message(result))
    table.add_row("Tier", result.tier.value.upper())
    table.add_row("Domain", result.domain or "-")
    if result.expires_at:
        table.add_row("Expires", result.expires_at.strftime('%Y-%m-%d'))
    table.add_row("Source", "cache" if result.from_cache else "remote")
    if result.error:
        table.add_row("Error", result.error)
    return table


def _features_table(authorizer: Authorizer, result) -> Table:
    table = Table(title="Features", show_header=True)
    table.add_column("Feature", style="bold")
    table.add_column("Status")

    for name, unlocked in feature_access(result, authorizer.settings.PAID_TIERS):
        table.add_row(name, "[green]✓ Enabled[/]" if unlocked else "[red]✗ Locked[/]")
    return table


def _authorize(authorizer: Authorizer, key, domain):
    license_key = key or authorizer.settings.LICENSE_KEY
    return asyncio.run(authorizer.authorize(license_key=license_key, domain=domain))


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.option('--log', 'log_path', type=click.Path(), help='Log file path')
@click.option('--verbose/--no-verbose', default=False, help='Enable debug logging')
@click.pass_context
def cli(ctx, log_path, verbose):
    """a11ytool - license authorization for the Accessibility Tool"""
    saved_config = ConfigManager.load_config()
    final_config = _merge_config_with_kwargs(saved_config, {'log_path': log_path})
    _configure_logging(Settings(), final_config.get('log_path'), verbose)
    ctx.obj = final_config


@cli.command()
@click.option('--key', help='License key (defaults to ACCESS_LICENSE_KEY)')
@click.option('--domain', help='Domain the license is registered against')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw result as JSON')
@click.pass_obj
def authorize(final_config, key, domain, as_json):
    """Authorize usage and show the resulting tier."""
    final_config = _merge_config_with_kwargs(final_config, {'domain': domain})
    authorizer = _build_authorizer(final_config)
    result = _authorize(authorizer, key, final_config.get('domain') or authorizer.settings.DOMAIN)

    if as_json:
        click.echo(json.dumps(result.to_record(), indent=2))
        return

    console = _console(final_config)
    console.print(_result_table(authorizer, result))
    console.print(_features_table(authorizer, result))


@cli.command()
@click.pass_obj
def status(final_config):
    """Show the cached license decision without contacting the server."""
    authorizer = _build_authorizer(final_config)
    result = authorizer.cached_result()
    if result is None:
        click.echo("No cached license decision. Run 'a11ytool authorize' first.")
        return
    _console(final_config).print(_result_table(authorizer, result))


@cli.command()
@click.option('--purge', is_flag=True, help='Delete cache files instead of blanking them')
@click.pass_obj
def reset(final_config, purge):
    """Clear the license cache and usage history."""
    authorizer = _build_authorizer(final_config)
    authorizer.clear_cache(purge=purge)
    click.echo("License cache cleared.")


@cli.command()
@click.option('--limit', type=int, default=10, help='Number of recent uses to list')
@click.pass_obj
def usage(final_config, limit):
    """Show recorded usage statistics."""
    authorizer = _build_authorizer(final_config)
    stats = authorizer.usage_stats()
    if stats is None:
        click.echo("No usage recorded.")
        return

    console = _console(final_config)
    table = Table(title="Usage", show_header=True)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value")
    table.add_row("Package", f"{stats.package_name} {stats.package_version}")
    table.add_row("Domain", stats.domain or "-")
    table.add_row("First used", stats.first_used.strftime('%Y-%m-%d %H:%M:%S'))
    if stats.last_used:
        table.add_row("Last used", stats.last_used.strftime('%Y-%m-%d %H:%M:%S'))
    table.add_row("Recorded uses", str(len(stats.uses)))
    console.print(table)

    if limit > 0 and stats.uses:
        recent = Table(title="Recent uses", show_header=True)
        recent.add_column("Timestamp")
        recent.add_column("Domain", style="cyan")
        for use in stats.uses[-limit:]:
            recent.add_row(use.timestamp.strftime('%Y-%m-%d %H:%M:%S'), use.domain or "-")
        console.print(recent)


@cli.command()
@click.option('--key', help='License key (defaults to ACCESS_LICENSE_KEY)')
@click.option('--domain', help='Domain the license is registered against')
@click.option('--export', 'export_format', type=click.Choice(EXPORT_FORMATS), help='Check a report format')
@click.pass_obj
def features(final_config, key, domain, export_format):
    """List which features the current license unlocks."""
    final_config = _merge_config_with_kwargs(final_config, {'domain': domain})
    authorizer = _build_authorizer(final_config)
    result = _authorize(authorizer, key, final_config.get('domain') or authorizer.settings.DOMAIN)

    console = _console(final_config)
    console.print(_features_table(authorizer, result))

    if export_format:
        gate = check_export(export_format, result, authorizer.settings.PAID_TIERS)
        if gate.allowed:
            click.echo(f"{export_format.upper()} export: unlocked")
        else:
            click.echo(f"{export_format.upper()} export: locked - {gate.error}")
            click.echo(f"Tip: {gate.upgrade_tip}")


@cli.command()
@click.argument('action', type=click.Choice(['view', 'reset', 'set']), required=False)
@click.argument('key', required=False)
@click.argument('value', required=False)
def config(action, key=None, value=None):
    """Manage a11ytool configuration."""
    if not action:
        click.echo("Usage: a11ytool config [view|reset|set] [key] [value]")
        return
    config_command(action, key, value)


def main():
    """Entry point for the CLI."""
    cli(prog_name="a11ytool")

if __name__ == '__main__':
    main()
