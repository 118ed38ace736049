"""
coreprov — CLI entrypoint.

Usage:
    python -m coreprov.main --help
    python -m coreprov.main generate --save
    python -m coreprov.main install --yes
    python -m coreprov.main urls show
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from coreprov import __version__
from coreprov.core.observability.logging_config import resolve_level, setup_logging


def _provisioner(ctx: click.Context):
    """Build a Provisioner from the CLI context.

    Tests pass ``obj={"runner": ...}`` to swap the process runner.
    """
    from coreprov.core.config.loader import find_config_file
    from coreprov.core.config.store import ConfigStore
    from coreprov.core.services.provision import Provisioner

    store = ConfigStore(find_config_file(ctx.obj.get("config_path")))
    return Provisioner(store, runner=ctx.obj.get("runner"))


def _print_messages(messages: list[str], color: str) -> None:
    for msg in messages:
        click.secho(f"   • {msg}", fg=color)


@click.group()
@click.version_option(version=__version__, prog_name="coreprov")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to coreprov.yml (default: $COREPROV_CONFIG, ./coreprov.yml, /etc/coreprov/coreprov.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """coreprov — download and keep the core binary up to date."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


@cli.command()
@click.option("--save", is_flag=True, help="Write the generated list to the config file.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(ctx: click.Context, save: bool, as_json: bool) -> None:
    """Generate download URLs from the latest release and host arch.

    Prints the mirror-then-upstream list for review. Use --save to
    store it as the configured download URLs.
    """
    from coreprov.core.config.loader import ConfigError

    try:
        result = asyncio.run(_provisioner(ctx).generate_urls(save=save))
    except (ConfigError, OSError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    click.secho(f"\n🔗 Download URLs ({result.arch}, {result.version or 'version unknown'})",
                fg="cyan", bold=True)
    click.echo(result.text)
    if result.messages:
        click.echo()
        _print_messages(result.messages, "green" if result.ok else "yellow")
    click.echo()

    if not result.ok:
        sys.exit(1)


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, yes: bool, as_json: bool) -> None:
    """Download the core from the configured URLs and install it.

    URLs are tried in order; the first successful download replaces
    the installed core.
    """
    from coreprov.core.config.loader import ConfigError

    if not (yes or as_json):
        click.confirm(
            "Are you sure you want to download the core? This will replace the current version.",
            abort=True,
        )

    try:
        result = asyncio.run(_provisioner(ctx).download_and_install())
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    for attempt in result.attempts:
        if attempt.ok:
            click.secho(f"   ✓ {attempt.url}", fg="green")
        else:
            click.secho(f"   ✗ {attempt.url}", fg="red", nl=False)
            click.echo(f"  ({attempt.error})")

    if result.ok:
        click.secho(f"✅ {result.messages[-1]} → {result.path}", fg="green", bold=True)
        return

    click.secho("❌ Install failed:", fg="red", bold=True)
    _print_messages(result.messages, "red")
    sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show the installed core version."""
    from coreprov.core.config.loader import ConfigError

    try:
        core = asyncio.run(_provisioner(ctx).status())
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(core.model_dump(mode="json"), indent=2))
        return

    color = "green" if core.installed else "red"
    click.echo("Core Version: ", nl=False)
    click.secho(core.version, fg=color)
    click.echo(f"   Path: {core.path}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Detect host architecture and the latest upstream version."""
    from coreprov.core.config.loader import ConfigError

    async def _detect():
        prov = _provisioner(ctx)
        settings = prov.settings()
        return await prov.detect_arch(settings), await prov.resolve_version(settings)

    try:
        arch, version = asyncio.run(_detect())
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "arch": arch.model_dump(mode="json"),
            "version": version.model_dump(mode="json"),
        }, indent=2))
        return

    click.secho("\n🔍 Detection", fg="cyan", bold=True)
    arch_note = "" if arch.detected else f"  (default: {arch.reason})"
    click.echo(f"   Arch:    {arch.arch}{arch_note}")
    if version.resolved:
        click.echo(f"   Latest:  {version.tag}")
    else:
        click.secho(f"   Latest:  unresolved ({version.error})", fg="yellow")
    click.echo()


# ── Register sub-command groups from coreprov/ui/cli/ ────────────

from coreprov.ui.cli.urls import urls  # noqa: E402

cli.add_command(urls)


if __name__ == "__main__":
    cli()
