import asyncio
from pathlib import Path
from typing import Annotated

import typer

from rightdown.cli.common import (
    EXIT_FAILURE,
    collect_markdown_files,
    configure_logging,
    console,
    err_console,
    load_config_or_exit,
)
from rightdown.core.orchestrator import Orchestrator
from rightdown.core.result import Failure
from rightdown.formatters import FormatterRegistry, default_registry


def _get_registry() -> FormatterRegistry:
    return default_registry()


def format_files(
    files: Annotated[list[Path] | None, typer.Argument(help="Markdown files or directories.")] = None,
    write: Annotated[bool, typer.Option("--write", "-w", help="Write formatted content back to the files.")] = False,
    check: Annotated[bool, typer.Option("--check", help="Exit 1 if any file would be reformatted.")] = False,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to the config file.")] = None,
    timeout: Annotated[float | None, typer.Option(help="Per-block formatter timeout in seconds.")] = None,
    fail_on_error: Annotated[bool, typer.Option(help="Exit 1 when any code block fails to format.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only print errors.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print per-file statistics.")] = False,
) -> None:
    """Format fenced code blocks in Markdown files."""
    configure_logging(verbose=verbose, quiet=quiet)
    rightdown_config = load_config_or_exit(config, quiet=quiet)
    targets = collect_markdown_files(files or [Path(".")], rightdown_config.ignores)
    registry = _get_registry()

    async def _run() -> int:
        availability = await registry.init()
        if verbose:
            for name, available in availability.items():
                if available:
                    version = await registry[name].get_version()
                    label = version.data if not isinstance(version, Failure) else "unknown"
                    err_console.print(f"[cyan]Using {name} {label}[/cyan]")
        orchestrator = Orchestrator(rightdown_config, registry, block_timeout=timeout)

        exit_code = 0
        needs_formatting = 0
        for path in targets:
            result = await orchestrator.format_file(path)
            if isinstance(result, Failure):
                err_console.print(f"[red]Failed to format {path}:[/red] {result.error.message}")
                exit_code = EXIT_FAILURE
                continue

            outcome = result.data
            stats = outcome.stats
            original = path.read_text(encoding="utf-8")
            changed = outcome.content != original

            if check:
                if changed:
                    needs_formatting += 1
                    if not quiet:
                        console.print(f"[yellow]{path} would be reformatted[/yellow]")
            elif write:
                if changed:
                    path.write_text(outcome.content, encoding="utf-8")
                    if not quiet:
                        console.print(f"[green]Formatted[/green] {path}")
            else:
                typer.echo(outcome.content, nl=False)

            if stats.errors:
                if fail_on_error:
                    exit_code = EXIT_FAILURE
                if not quiet:
                    err_console.print(f"[yellow]{path}: {stats.summary()}[/yellow]")
                    for diagnostic in outcome.diagnostics:
                        err_console.print(
                            f"  line {diagnostic.line} ({diagnostic.language or 'no language'}, "
                            f"{diagnostic.formatter}): {diagnostic.error.message}"
                        )
            elif verbose:
                err_console.print(f"{path}: {stats.summary()} in {stats.duration:.0f}ms")

        if check:
            if needs_formatting:
                if not quiet:
                    console.print(f"[red]{needs_formatting} file(s) need formatting[/red]")
                exit_code = EXIT_FAILURE
            elif not quiet and targets:
                console.print("[green]All files are properly formatted[/green]")
        return exit_code

    async def _main() -> int:
        try:
            return await _run()
        finally:
            await registry.shutdown()

    exit_code = asyncio.run(_main())
    if exit_code:
        raise typer.Exit(exit_code)
