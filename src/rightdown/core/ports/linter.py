from pathlib import Path
from typing import Any, Protocol

from rightdown.core.result import Result
from rightdown.models import LintReport


class StructureLinter(Protocol):
    async def is_available(self) -> Result[bool]: ...

    async def lint(self, files: list[Path], rules: dict[str, Any], fix: bool = False) -> Result[LintReport]: ...
