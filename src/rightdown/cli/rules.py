import json
from pathlib import Path
from typing import Annotated, Any

import typer

from rightdown.cli.common import EXIT_FAILURE, console, err_console, load_config_or_exit, render_table
from rightdown.core.compiler import markdownlint_config
from rightdown.core.presets import PRESETS


def _status(value: Any) -> tuple[str, str]:
    if value is False:
        return "disabled", ""
    if value is True:
        return "enabled", ""
    return "configured", json.dumps(value)


def rules(
    preset: Annotated[str | None, typer.Option(help="Show a built-in preset instead of the config.")] = None,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to the config file.")] = None,
) -> None:
    """List the structural lint rules in effect."""
    if preset is not None:
        if preset not in PRESETS:
            err_console.print(f"[red]Unknown preset {preset!r}.[/red] Choose one of: {', '.join(PRESETS)}")
            raise typer.Exit(EXIT_FAILURE)
        rule_set = PRESETS[preset].rules
        source = f"{preset} preset"
    else:
        rightdown_config = load_config_or_exit(config, quiet=True)
        rule_set = markdownlint_config(rightdown_config)["rules"]
        source = f"current configuration ({rightdown_config.preset} preset)"

    rows = [(name, *_status(value)) for name, value in sorted(rule_set.items())]
    render_table(["rule", "status", "options"], rows, title=f"Rules from {source}")
    console.print(f"({len(rows)} rules)")
