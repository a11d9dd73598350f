"""Inspect the resolved configuration and the tool configs derived from it."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml

from rightdown.cli.common import (
    EXIT_DRIFT,
    EXIT_FAILURE,
    console,
    err_console,
    load_config_or_exit,
    render_table,
)
from rightdown.core.compiler import GeneratedConfigs, check_drift, compile_configs, write_tool_configs
from rightdown.core.config import RightdownConfig
from rightdown.core.result import Failure
from rightdown.formatters import FormatterRegistry, default_registry

config_app = typer.Typer(help="Inspect and compile the rightdown configuration.")

ConfigOption = Annotated[Path | None, typer.Option("--config", "-c", help="Path to the config file.")]


def _get_registry() -> FormatterRegistry:
    return default_registry()


def _compile_or_exit(rightdown_config: RightdownConfig) -> GeneratedConfigs:
    compiled = compile_configs(rightdown_config)
    if isinstance(compiled, Failure):
        err_console.print(f"[red]Error:[/red] {compiled.error.message}")
        raise typer.Exit(EXIT_FAILURE)
    return compiled.data


@config_app.command("show")
def show(config: ConfigOption = None) -> None:
    """Print the resolved configuration as YAML."""
    rightdown_config = load_config_or_exit(config, quiet=True)
    dumped = rightdown_config.model_dump(by_alias=True, mode="json")
    console.print(yaml.safe_dump(dumped, sort_keys=False), markup=False, highlight=False)


@config_app.command("write")
def write(
    config: ConfigOption = None,
    directory: Annotated[Path, typer.Option(help="Directory to write the tool configs into.")] = Path("."),
) -> None:
    """Write .prettierrc and biome.json for the formatters the config uses."""
    compiled = _compile_or_exit(load_config_or_exit(config, quiet=True))
    written = write_tool_configs(compiled, directory)
    if not written:
        console.print("No formatter configs to write.")
    for path in written:
        console.print(f"[green]Wrote[/green] {path}")


@config_app.command("drift")
def drift(
    config: ConfigOption = None,
    directory: Annotated[Path, typer.Option(help="Directory holding the tool configs.")] = Path("."),
) -> None:
    """Exit 2 if .prettierrc or biome.json differ from the compiled config."""
    compiled = _compile_or_exit(load_config_or_exit(config, quiet=True))
    result = check_drift(compiled, directory)
    if isinstance(result, Failure):
        err_console.print(f"[red]Error:[/red] {result.error.message}")
        raise typer.Exit(EXIT_FAILURE)
    report = result.data
    for name in report.missing:
        console.print(f"[yellow]{name} is missing[/yellow]")
    for name in report.drifted:
        console.print(f"[red]{name} has drifted from expected configuration[/red]")
    if report.has_drift:
        raise typer.Exit(EXIT_DRIFT)
    console.print("[green]Tool configs are in sync[/green]")


@config_app.command("formatters")
def formatters() -> None:
    """Show which code formatters are installed."""
    registry = _get_registry()

    async def _run() -> list[tuple[str, str, str, str]]:
        try:
            availability = await registry.init()
            rows = []
            for name, adapter in registry.registered.items():
                version = await adapter.get_version() if availability.get(name) else None
                rows.append(
                    (
                        name,
                        "yes" if availability.get(name) else "no",
                        version.data if version is not None and not isinstance(version, Failure) else "-",
                        ", ".join(adapter.get_supported_languages()),
                    )
                )
            return rows
        finally:
            await registry.shutdown()

    render_table(["formatter", "available", "version", "languages"], asyncio.run(_run()))
