"""
CLI commands for the configured download URL templates.

Thin wrappers over ``coreprov.core.config.store``.
"""

from __future__ import annotations

import sys

import click


def _store(ctx: click.Context):
    from coreprov.core.config.loader import find_config_file
    from coreprov.core.config.store import ConfigStore

    return ConfigStore(find_config_file(ctx.obj.get("config_path")))


@click.group()
def urls() -> None:
    """Download URLs — one template per line, ${version} and ${arch} supported."""


@urls.command("show")
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the configured download URL templates."""
    from coreprov.core.config.loader import ConfigError

    try:
        text = _store(ctx).get_download_urls()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(text)


@urls.command("set")
@click.argument("text")
@click.pass_context
def set_urls(ctx: click.Context, text: str) -> None:
    """Replace the download URL templates.

    TEXT is the new template list; pass - to read it from stdin.

    Examples:

        coreprov urls set 'https://mirror.example/core.${arch}'

        printf '%s\\n' URL1 URL2 | coreprov urls set -
    """
    from coreprov.core.config.loader import ConfigError
    from coreprov.core.services.provision.domain.templates import (
        parse_templates,
        render_templates,
    )

    if text == "-":
        text = click.get_text_stream("stdin").read()

    lines = parse_templates(text)
    store = _store(ctx)
    try:
        store.set_download_urls(render_templates(lines))
    except (ConfigError, OSError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if not lines:
        click.secho("⚠️  Download URL list is now empty", fg="yellow")
        return
    click.secho(f"✅ Saved {len(lines)} download URL(s) to {store.path}", fg="green")
