"""Command line interface for runner plugins."""

from __future__ import annotations

import asyncio
import sys

import click

from core.config import ConfigManager, RunnerConfig
from core.exceptions import ConfigurationError
from core.logger import setup_logging
from plugins.manager import PluginManager
from plugins.results import PluginResults


def _load(config: str) -> tuple[RunnerConfig, PluginManager]:
    try:
        runner_config = ConfigManager().load(config)
        setup_logging(runner_config.logging)
        return runner_config, PluginManager(runner_config)
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)


async def _run_lifecycle(manager: PluginManager) -> PluginResults:
    await manager.setup()
    await manager.teardown()
    results = manager.get_results()
    await manager.post_results()
    return results


@click.group()
@click.version_option(version="0.1.0", prog_name="runner-plugins")
def cli() -> None:
    """Test Runner Plugins CLI"""


@cli.command("list")
@click.option(
    "--config", "-c", required=True, type=click.Path(exists=True), help="Config file path"
)
def list_plugins(config: str) -> None:
    """List configured plugins in load order"""
    _, manager = _load(config)
    for instance in manager.get_all():
        click.echo(f"{instance.index}\t{instance.name}")
    click.echo(f"skip_angular_stability={manager.skip_angular_stability()}")


@cli.command()
@click.option(
    "--config", "-c", required=True, type=click.Path(exists=True), help="Config file path"
)
def run(config: str) -> None:
    """Run plugin setup, teardown and post_results hooks and report results"""
    _, manager = _load(config)
    results = asyncio.run(_run_lifecycle(manager))

    click.echo(f"failed_count={results.failed_count}")
    if results.failed_count:
        sys.exit(1)


if __name__ == "__main__":
    cli()
