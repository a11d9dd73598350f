"""Structural linting through the ``markdownlint-cli2`` executable."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from rightdown.core.result import ErrorCode, Result, failure, make_error, success
from rightdown.formatters.base import run_tool, write_temp_config_file
from rightdown.models import LintReport

logger = logging.getLogger(__name__)

_CONFIG_SUFFIX = ".markdownlint-cli2.jsonc"


def cli2_options(compiled: dict[str, Any]) -> dict[str, Any]:
    """Turn a compiled markdownlint config into a ``markdownlint-cli2`` options file.

    Custom rule modules are not shipped, so their names and settings are left out.
    """
    custom = set(compiled.get("customRules") or [])
    rules = {name: value for name, value in compiled.get("rules", {}).items() if name not in custom}
    options: dict[str, Any] = {"config": rules}
    if compiled.get("ignores"):
        options["ignores"] = list(compiled["ignores"])
    return options


class MarkdownlintCli2:
    def __init__(self, executable: str = "markdownlint-cli2") -> None:
        self._executable = executable

    def _which(self) -> str | None:
        return shutil.which(self._executable)

    async def is_available(self) -> Result[bool]:
        return success(self._which() is not None)

    async def lint(self, files: list[Path], rules: dict[str, Any], fix: bool = False) -> Result[LintReport]:
        path = self._which()
        if path is None:
            return failure(make_error(ErrorCode.FORMATTER_NOT_FOUND, "markdownlint-cli2 is not installed"))

        config_path = write_temp_config_file(cli2_options(rules), suffix=_CONFIG_SUFFIX)
        argv = [path, "--config", str(config_path), *(str(file) for file in files)]
        if fix:
            argv.append("--fix")
        logger.debug("Running %s", " ".join(argv))
        try:
            output = await run_tool(argv)
        except OSError as exc:
            return failure(make_error(ErrorCode.INTERNAL_ERROR, "Failed to run markdownlint-cli2", cause=exc))
        finally:
            config_path.unlink(missing_ok=True)

        # 1 means violations were found; anything higher is a tool error
        if output.returncode > 1:
            return failure(
                make_error(
                    ErrorCode.INTERNAL_ERROR,
                    "markdownlint-cli2 failed",
                    {"returncode": output.returncode, "stderr": output.stderr},
                )
            )
        return success(
            LintReport(
                files=[str(file) for file in files],
                exit_code=output.returncode,
                output=(output.stdout + output.stderr).strip(),
                fixed=fix,
            )
        )
