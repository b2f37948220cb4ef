"""CLI command: scangate categories — list policy categories."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from scangate.config import ScanGateConfig
from scangate.policy.loader import load_registry

console = Console()


@click.command()
@click.pass_context
def categories(ctx: click.Context) -> None:
    """List the policy categories and the scanner rules they enable."""
    config = ScanGateConfig.load()
    registry = load_registry(ctx.obj.get("categories_path") or config.categories_path)

    table = Table(title="Policy categories")
    table.add_column("Category", style="cyan")
    table.add_column("Rule IDs")
    table.add_column("Description", style="dim")

    for key in sorted(registry):
        category = registry[key]
        table.add_row(
            category.name,
            ",".join(str(r) for r in category.rule_ids),
            category.description,
        )

    console.print(table)
