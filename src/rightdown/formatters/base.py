"""Shared plumbing for formatters that run an external CLI over stdin."""

from __future__ import annotations

import asyncio
import json
import logging
import re
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rightdown.core.result import ErrorCode, Result, failure, make_error, success
from rightdown.models import FormatterResult

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"\d+\.\d+\.\d+(?:[-+][\w.]+)?")


@dataclass(frozen=True)
class ProcessOutput:
    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class ToolHandle:
    executable: str
    version: str


async def run_tool(argv: list[str], stdin: str | None = None) -> ProcessOutput:
    """Run ``argv`` to completion; the process is killed if the caller is cancelled."""
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await process.communicate(stdin.encode("utf-8") if stdin is not None else None)
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise
    return ProcessOutput(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=out.decode("utf-8", errors="replace"),
        stderr=err.decode("utf-8", errors="replace"),
    )


def write_temp_config_file(data: dict[str, Any], suffix: str = ".json") -> Path:
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as temp_file:
        temp_file.write(json.dumps(data).encode("utf-8"))
        temp_file.flush()
        return Path(temp_file.name)


def match_trailing_newline(original: str, formatted: str) -> str:
    # formatters always end output with a newline; block content has none
    if formatted.endswith("\n") and not original.endswith("\n"):
        return formatted.rstrip("\n")
    return formatted


def parse_version(output: str) -> str:
    match = _VERSION_RE.search(output)
    return match.group(0) if match else (output.strip() or "unknown")


def first_error_line(stderr: str) -> str:
    for line in stderr.splitlines():
        if line.strip():
            return line.strip()
    return "unknown error"


class ExternalToolFormatter:
    """Base for adapters that shell out to a formatter CLI.

    The executable path and version are resolved on first use and cached
    until ``shutdown``. Subclasses implement ``format``.
    """

    name: str = ""
    display_name: str = ""
    executable_name: str = ""
    supported_languages: tuple[str, ...] = ()

    def __init__(self, executable: str | None = None) -> None:
        self._executable = executable or self.executable_name
        self._handle: ToolHandle | None = None
        self._lock = asyncio.Lock()

    def get_supported_languages(self) -> tuple[str, ...]:
        return self.supported_languages

    async def _resolve(self) -> Result[ToolHandle | None]:
        async with self._lock:
            if self._handle is not None:
                return success(self._handle)
            path = shutil.which(self._executable)
            if path is None:
                return success(None)
            try:
                output = await run_tool([path, "--version"])
            except OSError as exc:
                return failure(
                    make_error(
                        ErrorCode.INTERNAL_ERROR, f"Failed to start {self.display_name}", {"path": path}, exc
                    )
                )
            if output.returncode != 0:
                return failure(
                    make_error(
                        ErrorCode.INTERNAL_ERROR,
                        f"{self.display_name} is installed but not working: {first_error_line(output.stderr)}",
                        {"path": path, "returncode": output.returncode},
                    )
                )
            self._handle = ToolHandle(executable=path, version=parse_version(output.stdout))
            logger.debug("Resolved %s %s at %s", self.display_name, self._handle.version, path)
            return success(self._handle)

    def _not_found(self) -> Result[Any]:
        return failure(make_error(ErrorCode.FORMATTER_NOT_FOUND, f"{self.display_name} is not installed"))

    def _unsupported(self, language: str) -> Result[Any]:
        return failure(
            make_error(
                ErrorCode.FORMATTER_FAILED,
                f"{self.display_name}: unsupported language: {language or '(none)'}",
                {"language": language},
            )
        )

    async def _handle_or_failure(self) -> Result[ToolHandle]:
        resolved = await self._resolve()
        if not resolved.success:
            return resolved
        if resolved.data is None:
            return self._not_found()
        return success(resolved.data)

    async def is_available(self) -> Result[bool]:
        resolved = await self._resolve()
        if not resolved.success:
            return resolved
        return success(resolved.data is not None)

    async def get_version(self) -> Result[str]:
        resolved = await self._resolve()
        if not resolved.success:
            return failure(
                make_error(
                    ErrorCode.FORMATTER_NOT_FOUND,
                    f"Failed to get {self.display_name} version",
                    resolved.error.details,
                )
            )
        if resolved.data is None:
            return self._not_found()
        return success(resolved.data.version)

    async def _run_formatter(
        self, argv: list[str], code: str, language: str, details: dict[str, Any]
    ) -> Result[FormatterResult]:
        try:
            output = await run_tool(argv, stdin=code)
        except OSError as exc:
            return failure(
                make_error(ErrorCode.FORMATTER_FAILED, f"Failed to run {self.display_name}", details, exc)
            )
        if output.returncode != 0:
            return failure(
                make_error(
                    ErrorCode.FORMATTER_FAILED,
                    f"{self.display_name}: {first_error_line(output.stderr or output.stdout)}",
                    {**details, "stderr": output.stderr},
                )
            )
        formatted = match_trailing_newline(code, output.stdout)
        return success(FormatterResult(formatted=formatted, did_change=formatted != code))

    async def shutdown(self) -> None:
        async with self._lock:
            self._handle = None
