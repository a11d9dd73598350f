from typing import Any, Protocol

from rightdown.core.result import Result
from rightdown.models import FormatterResult


class CodeFormatter(Protocol):
    name: str

    async def is_available(self) -> Result[bool]: ...

    async def get_version(self) -> Result[str]: ...

    async def format(
        self, code: str, language: str, options: dict[str, Any] | None = None
    ) -> Result[FormatterResult]: ...

    def get_supported_languages(self) -> tuple[str, ...]: ...

    async def shutdown(self) -> None: ...
