from pathlib import Path
from typing import Annotated

import typer

from rightdown.cli.common import EXIT_FAILURE, console, err_console
from rightdown.core.config import find_config_path
from rightdown.core.presets import DEFAULT_PRESET, PRESETS
from rightdown.core.template import DEFAULT_TERMINOLOGY, render_config


def init(
    preset: Annotated[str, typer.Option(help="Rule preset: strict, standard or relaxed.")] = DEFAULT_PRESET,
    formatter: Annotated[str, typer.Option(help="Default code block formatter.")] = "prettier",
    terminology: Annotated[bool, typer.Option(help="Include the default terminology corrections.")] = False,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing config file.")] = False,
    path: Annotated[Path | None, typer.Option(help="Where to write the config file.")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Suppress next-step hints.")] = False,
) -> None:
    """Create a rightdown configuration file."""
    if preset not in PRESETS:
        err_console.print(f"[red]Unknown preset {preset!r}.[/red] Choose one of: {', '.join(PRESETS)}")
        raise typer.Exit(EXIT_FAILURE)

    target = path or find_config_path()
    if target.exists() and not force:
        err_console.print(f"[red]{target} already exists.[/red] Use --force to overwrite it.")
        raise typer.Exit(EXIT_FAILURE)

    target.write_text(
        render_config(preset, formatter, DEFAULT_TERMINOLOGY if terminology else None),
        encoding="utf-8",
    )
    console.print(f"[green]Created[/green] {target} with the {preset} preset")
    if not quiet:
        console.print("Next steps:")
        console.print("  rightdown lint .          check Markdown structure")
        console.print("  rightdown format . --write   format code blocks")
