"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from scangate import __version__


@click.group()
@click.version_option(version=__version__, prog_name="scangate")
@click.option(
    "--categories",
    "-c",
    type=click.Path(exists=True),
    help="YAML file extending the built-in policy categories.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, categories: str | None, verbose: bool) -> None:
    """ScanGate — drive a ZAP scan and gate on the accepted risk level."""
    ctx.ensure_object(dict)
    ctx.obj["categories_path"] = categories
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from scangate.cli.categories import categories  # noqa: F811
    from scangate.cli.run import run  # noqa: F811

    main.add_command(run)
    main.add_command(categories)


_register_commands()
