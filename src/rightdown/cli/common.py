"""Helpers shared by the CLI commands."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from rightdown.core.config import RightdownConfig, find_config_path, load_config
from rightdown.core.result import Failure

console = Console()
err_console = Console(stderr=True)

EXIT_FAILURE = 1
EXIT_DRIFT = 2
EXIT_CONFIG = 3

_SKIP_DIRS = {".git", "node_modules"}


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_config_or_exit(config_path: Path | None, quiet: bool = False) -> RightdownConfig:
    """Load the explicit or discovered config; a missing discovered file means defaults."""
    path = config_path or find_config_path()
    if config_path is None and not path.exists():
        if not quiet:
            err_console.print('[yellow]No configuration file found. Run "rightdown init" to create one.[/yellow]')
        return RightdownConfig()
    result = load_config(path)
    if isinstance(result, Failure):
        err_console.print(f"[red]Failed to read config {path}:[/red] {result.error.message}")
        raise typer.Exit(EXIT_CONFIG)
    return result.data


def _is_ignored(path: Path, ignores: Sequence[str]) -> bool:
    posix = path.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) for pattern in ignores)


def collect_markdown_files(paths: Sequence[Path], ignores: Sequence[str] = ()) -> list[Path]:
    """Expand directories into their ``*.md`` files; explicit files are kept as given."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*.md")):
                if _SKIP_DIRS.intersection(candidate.parts) or _is_ignored(candidate, ignores):
                    continue
                files.append(candidate)
        else:
            files.append(path)
    return files


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]], title: str | None = None) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
