"""CLI command: scangate run <plan> — run a scan plan and apply the risk gate."""

from __future__ import annotations

import importlib
import signal
import sys

import click
import yaml
from rich.console import Console
from rich.table import Table

from scangate.config import ScanGateConfig
from scangate.errors import (
    Cancelled,
    RiskThresholdExceeded,
    ScanInfrastructureError,
)
from scangate.policy.loader import load_registry
from scangate.scanner.zap import ZapClient
from scangate.session.manager import ExerciseCallback, ScanSessionManager
from scangate.session.plan import load_plan

console = Console(stderr=True)


@click.command()
@click.argument("plan_path", metavar="PLAN", type=click.Path(exists=True))
@click.option("--zap-url", help="ZAP API base URL (default: $SCANGATE_ZAP_URL).")
@click.option("--api-key", help="ZAP API key (default: $SCANGATE_ZAP_API_KEY).")
@click.option("--base-url", help="URL substituted for the 'baseurl' alias.")
@click.option(
    "--driver",
    help="module:function called as f(scenario_id, proxy_url) for plan scenarios.",
)
@click.option("--timeout", type=float, help="Deadline in seconds for each poll loop.")
@click.pass_context
def run(
    ctx: click.Context,
    plan_path: str,
    zap_url: str | None,
    api_key: str | None,
    base_url: str | None,
    driver: str | None,
    timeout: float | None,
) -> None:
    """Spider, actively scan and triage per PLAN; exit 1 if the risk gate fails.

    Exit status 2 means the scan was aborted or cancelled, 3 that the plan or
    category configuration is invalid.
    """
    config = ScanGateConfig.load()
    if zap_url:
        config.zap_url = zap_url.rstrip("/")
    if api_key:
        config.api_key = api_key
    if base_url:
        config.base_url = base_url
    if timeout is not None:
        config.poll_timeout = timeout

    try:
        plan = load_plan(plan_path)
        registry = load_registry(ctx.obj.get("categories_path") or config.categories_path)
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        sys.exit(3)
    exercise = _load_driver(driver) if driver else None

    console.print(
        f"[bold]ScanGate[/bold] running plan [cyan]{plan.name}[/cyan] "
        f"against [cyan]{plan.target}[/cyan] via {config.zap_url}"
    )

    def on_progress(phase: str, url: str, percent: int) -> None:
        if ctx.obj.get("verbose"):
            console.print(f"  [dim]{phase}[/dim] {url} {percent}%")

    with ZapClient(config.zap_url, config.api_key, timeout=config.request_timeout) as client:
        manager = ScanSessionManager(client, registry, config, on_progress=on_progress)

        def _signal_handler(signum: int, frame: object) -> None:
            console.print("\n[dim]Stopping...[/dim]")
            manager.stop()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        try:
            verdict = manager.run_plan(plan, exercise=exercise)
        except RiskThresholdExceeded as exc:
            _print_summary(manager)
            console.print(
                f"\n[red]{exc.count} {exc.rating.label} or higher risk "
                f"vulnerabilities found.[/red]"
            )
            console.print(exc.report, markup=False, highlight=False)
            sys.exit(1)
        except (Cancelled, ScanInfrastructureError) as exc:
            _print_summary(manager)
            console.print(f"\n[red]Scan aborted:[/red] {exc}")
            sys.exit(2)
        except ValueError as exc:
            # ConfigurationError, or plan scenarios with no --driver
            _print_summary(manager)
            console.print(f"\n[red]Invalid plan:[/red] {exc}")
            sys.exit(3)

    _print_summary(manager)
    console.print(
        f"\n[green]Gate passed:[/green] no {verdict.rating.label} or higher risk findings"
    )


def _load_driver(target: str) -> ExerciseCallback:
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected module:function", param_hint="--driver")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def _print_summary(manager: ScanSessionManager) -> None:
    session = manager.session

    console.print("\n[bold]Session Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Session ID", session.id)
    table.add_row("Status", session.status.value)
    table.add_row("Policy", session.selected_category or "-")
    table.add_row("URLs discovered", str(len(session.discovered_urls)))
    table.add_row("Findings", str(len(session.findings)))
    console.print(table)
