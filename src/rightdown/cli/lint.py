import asyncio
from pathlib import Path
from typing import Annotated

import typer

from rightdown.cli.common import EXIT_FAILURE, configure_logging, console, err_console, load_config_or_exit
from rightdown.core.compiler import markdownlint_config
from rightdown.core.ports.linter import StructureLinter
from rightdown.core.result import Failure
from rightdown.lint.markdownlint import MarkdownlintCli2


def _get_linter() -> StructureLinter:
    return MarkdownlintCli2()


def lint(
    files: Annotated[list[Path] | None, typer.Argument(help="Markdown files, directories or globs.")] = None,
    fix: Annotated[bool, typer.Option("--fix", help="Fix violations in place.")] = False,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to the config file.")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only print errors.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print the linter invocation.")] = False,
) -> None:
    """Lint Markdown structure with markdownlint-cli2.

    Run this before ``format`` so blank-line and heading fixes settle first.
    """
    configure_logging(verbose=verbose, quiet=quiet)
    rightdown_config = load_config_or_exit(config, quiet=quiet)
    rules = markdownlint_config(rightdown_config)
    linter = _get_linter()

    result = asyncio.run(linter.lint(files or [Path(".")], rules, fix=fix))
    if isinstance(result, Failure):
        err_console.print(f"[red]Error:[/red] {result.error.message}")
        raise typer.Exit(EXIT_FAILURE)

    report = result.data
    if report.output and not quiet:
        console.print(report.output, markup=False, highlight=False)
    if not report.clean:
        raise typer.Exit(report.exit_code)
