"""Command-line interface for waygen code generation."""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from waygen.generator import golang, parse, read_source
from waygen.generator.bindings import InterfaceBinding, build_protocol
from waygen.generator.config import BASE_IMPORT, GeneratorConfig, Role
from waygen.generator.errors import GeneratorError

logger = logging.getLogger("waygen")

SIDES = click.Choice([r.value for r in Role])


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
        force=True,
    )


def _fail(err: GeneratorError) -> NoReturn:
    click.echo(f"Error: {err}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug output")
def cli(verbose: bool) -> None:
    """Waygen wayland protocol binding generator."""
    _setup_logging(verbose)


@cli.command()
@click.option("--source", "-i", "source", required=True, help="Protocol XML file or http(s) URL")
@click.option("--output", "-o", "output_file", required=True, help="Output Go file")
@click.option("--side", type=SIDES, default=Role.CLIENT.value, show_default=True)
@click.option("--pkg", "package", default="wl", show_default=True, help="Go package name")
@click.option("--unstable", default="", help="Unstable suffix to strip (e.g. v6)")
@click.option("--base-import", default=BASE_IMPORT, show_default=True, help="Import path of wl")
@click.option("--overwrite", is_flag=True, default=False, help="Replace an existing output file")
@click.option("--gofmt/--no-gofmt", "run_gofmt", default=True, help="Format the output file")
def gen(
    source: str,
    output_file: str,
    side: str,
    package: str,
    unstable: str,
    base_import: str,
    overwrite: bool,
    run_gofmt: bool,
) -> None:
    """Generate Go bindings from a protocol definition."""
    if os.path.exists(output_file) and not overwrite:
        click.echo(f"{output_file} exists, use --overwrite to replace it", err=True)
        sys.exit(1)

    config = GeneratorConfig(
        role=Role(side),
        package=package,
        unstable=unstable,
        base_import=base_import,
        source=source,
    )

    try:
        protocol = parse(read_source(source))
        generated_file = golang.render(protocol, config)
    except GeneratorError as e:
        _fail(e)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)
    logger.info("Wrote %s", output_file)

    if run_gofmt:
        try:
            golang.gofmt(output_file)
        except GeneratorError as e:
            _fail(e)


@cli.command()
@click.option("--source", "-i", "source", required=True, help="Protocol XML file or http(s) URL")
@click.option("--side", type=SIDES, default=Role.CLIENT.value, show_default=True)
@click.option("--pkg", "package", default="wl", show_default=True, help="Go package name")
@click.option("--unstable", default="", help="Unstable suffix to strip (e.g. v6)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(source: str, side: str, package: str, unstable: str, output_json: bool) -> None:
    """Display interfaces with their methods and dispatch cases."""
    config = GeneratorConfig(role=Role(side), package=package, unstable=unstable, source=source)
    try:
        bindings = build_protocol(parse(read_source(source)), config)
    except GeneratorError as e:
        _fail(e)

    if output_json:
        click.echo(json.dumps([b.to_dict() for b in bindings], indent=2))
    else:
        _output_plain(bindings, config)


def _output_plain(bindings: list[InterfaceBinding], config: GeneratorConfig) -> None:
    """Output binding summaries using rich tables."""
    console = Console()

    for binding in bindings:
        console.print(
            f"[bold cyan]{binding.name}[/bold cyan] "
            f"[dim]{binding.wire_name} v{binding.version} ({config.role})[/dim]"
        )

        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("Opcode", style="green", justify="right")
        table.add_column("Direction", style="dim")
        table.add_column("Name", style="white")
        table.add_column("Signature", style="yellow")

        for req in binding.requests:
            params = ", ".join(p.decl for p in req.params)
            table.add_row(str(req.opcode), "out", req.name, escape(f"({params}) {req.returns}"))
        for ev in binding.events:
            fields = ", ".join(f"{f.name} {f.type}" for f in ev.fields)
            table.add_row(str(ev.opcode), "in", ev.type_name, escape(f"{{{fields}}}"))

        console.print(table)
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
