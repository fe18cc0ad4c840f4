# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Command-line interface for ProxySpec.

``proxyspec -L socks5://:1080 -F http://proxy:8080`` prints the
configuration graph that the given service (``-L``) and node (``-F``)
specs compile to.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import Settings
from .constants import OUTPUT_FORMATS
from .core.builder import build_config_from_cmd
from .exceptions import ProxySpecError
from .logging_config import setup_logging
from .output import render_config

console = Console(stderr=True)


@click.command()
@click.version_option(version=__version__)
@click.option(
    "-L",
    "--listen",
    "services",
    multiple=True,
    help="Service spec, e.g. 'socks5://user:pass@:1080'. Repeatable.",
)
@click.option(
    "-F",
    "--forward",
    "nodes",
    multiple=True,
    help="Chain node spec, one hop per flag in order. Repeatable.",
)
@click.option(
    "-O",
    "--output-format",
    "output_format",
    default="yaml",
    show_default=True,
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write the configuration to a file instead of stdout.",
)
@click.option(
    "-D",
    "--debug",
    "debug",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def cli(
    services: Tuple[str, ...],
    nodes: Tuple[str, ...],
    output_format: str,
    output_file: Optional[str],
    debug: bool,
):
    """
    Compile command-line proxy specs into a configuration graph.
    """
    settings = Settings()
    setup_logging("DEBUG" if debug else settings.log_level, settings.mask_sensitive)

    if not services:
        raise click.UsageError("at least one -L service spec is required")

    try:
        cfg = build_config_from_cmd(list(services), list(nodes), settings=settings)
    except ProxySpecError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}", soft_wrap=True)
        sys.exit(1)

    text = render_config(cfg, output_format)
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        console.print(
            f"✓ Wrote {len(cfg.services)} service(s) to [bold]{output_file}[/bold]"
        )
    else:
        click.echo(text, nl=False)


def main():
    cli()


if __name__ == "__main__":
    main()
