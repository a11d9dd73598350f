"""Route fenced code blocks to formatters and splice the results back."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from rightdown.core.config import RightdownConfig, formatter_options_for, resolve_formatter
from rightdown.core.markdown import extract_code_blocks, replace_code_blocks
from rightdown.core.ports.formatter import CodeFormatter
from rightdown.core.result import AppError, ErrorCode, Failure, Result, failure, make_error, success
from rightdown.models import BlockDiagnostic, CodeBlock, FormatOutcome, FormatStats

logger = logging.getLogger(__name__)

BOM = "\ufeff"
DEFAULT_MAX_CONCURRENCY = 4


@dataclass(frozen=True)
class _BlockOutcome:
    block: CodeBlock
    formatter: str | None = None
    replacement: str | None = None
    error: AppError | None = None

    @property
    def skipped(self) -> bool:
        return self.formatter is None


class Orchestrator:
    def __init__(
        self,
        config: RightdownConfig,
        formatters: Mapping[str, CodeFormatter],
        block_timeout: float | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.config = config
        self.formatters = formatters
        self.block_timeout = block_timeout
        self.max_concurrency = max_concurrency

    def get_formatter(self, language: str | None) -> CodeFormatter | None:
        name = resolve_formatter(language, self.config, self.formatters.keys())
        return self.formatters.get(name) if name is not None else None

    async def format(self, markdown: str) -> Result[FormatOutcome]:
        """Format every routed code block of ``markdown``.

        Block-level failures are recorded in the stats and diagnostics and
        leave the block untouched. Only a parse failure or a splice failure
        fails the whole document.
        """
        started = time.perf_counter()
        bom = BOM if markdown.startswith(BOM) else ""
        text = markdown[len(bom) :]

        extracted = extract_code_blocks(text)
        if not extracted.success:
            return extracted
        blocks = extracted.data

        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(*(self._format_block(block, semaphore) for block in blocks))

        replacements: list[tuple[CodeBlock, str]] = []
        diagnostics: list[BlockDiagnostic] = []
        formatted = skipped = errors = changed = 0
        for outcome in outcomes:
            if outcome.skipped:
                skipped += 1
            elif outcome.error is not None:
                errors += 1
                diagnostics.append(
                    BlockDiagnostic(
                        index=outcome.block.index,
                        language=outcome.block.language,
                        line=outcome.block.position.start.line,
                        formatter=outcome.formatter or "",
                        error=outcome.error,
                    )
                )
            else:
                formatted += 1
                if outcome.replacement is not None:
                    changed += 1
                    replacements.append((outcome.block, outcome.replacement))

        spliced = replace_code_blocks(text, replacements)
        if not spliced.success:
            return spliced

        stats = FormatStats(
            total_blocks=len(blocks),
            formatted_blocks=formatted,
            skipped_blocks=skipped,
            errors=errors,
            changed_blocks=changed,
            duration=(time.perf_counter() - started) * 1000,
        )
        logger.debug("Formatted document: %s", stats.summary())
        return success(FormatOutcome(content=bom + spliced.data, stats=stats, diagnostics=diagnostics))

    async def format_file(self, path: str | Path) -> Result[FormatOutcome]:
        file_path = Path(path)
        if not file_path.exists():
            return failure(make_error(ErrorCode.FILE_NOT_FOUND, f"File not found: {file_path}", {"path": str(path)}))
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return failure(make_error(ErrorCode.IO_ERROR, "Failed to read file", {"path": str(path)}, exc))
        return await self.format(content)

    async def _format_block(self, block: CodeBlock, semaphore: asyncio.Semaphore) -> _BlockOutcome:
        syntax = block.syntax or block.language
        name = resolve_formatter(syntax, self.config, self.formatters.keys())
        formatter = self.formatters.get(name) if name is not None else None
        if name is None or formatter is None:
            return _BlockOutcome(block=block)

        options = formatter_options_for(name, self.config)
        async with semaphore:
            try:
                if self.block_timeout is not None:
                    result = await asyncio.wait_for(
                        formatter.format(block.content, syntax, options), self.block_timeout
                    )
                else:
                    result = await formatter.format(block.content, syntax, options)
            except TimeoutError:
                result = failure(
                    make_error(
                        ErrorCode.FORMATTER_TIMEOUT,
                        f"{name} did not finish within {self.block_timeout}s",
                        {"language": block.language, "timeout": self.block_timeout},
                    )
                )
            except Exception as exc:
                logger.exception("Formatter %s crashed on block %d", name, block.index)
                result = failure(
                    make_error(
                        ErrorCode.FORMATTER_FAILED,
                        f"{name} raised an unexpected error",
                        {"language": block.language},
                        exc,
                    )
                )

        if isinstance(result, Failure):
            logger.warning(
                "Failed to format %s block at line %d: %s",
                block.language or "(none)",
                block.position.start.line,
                result.error.message,
            )
            return _BlockOutcome(block=block, formatter=name, error=result.error)
        if not result.data.did_change:
            return _BlockOutcome(block=block, formatter=name)
        return _BlockOutcome(block=block, formatter=name, replacement=result.data.formatted)


async def format_markdown(
    markdown: str, config: RightdownConfig, formatters: Mapping[str, CodeFormatter]
) -> Result[FormatOutcome]:
    return await Orchestrator(config, formatters).format(markdown)


async def format_file(
    path: str | Path, config: RightdownConfig, formatters: Mapping[str, CodeFormatter]
) -> Result[FormatOutcome]:
    return await Orchestrator(config, formatters).format_file(path)
