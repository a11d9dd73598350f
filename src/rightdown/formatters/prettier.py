from __future__ import annotations

from pathlib import Path
from typing import Any

from rightdown.core.languages import filename_hint, normalize_language
from rightdown.core.result import Result
from rightdown.formatters.base import ExternalToolFormatter, write_temp_config_file
from rightdown.models import FormatterResult

_PARSERS = {
    "javascript": "babel",
    "jsx": "babel",
    "typescript": "typescript",
    "tsx": "typescript",
    "json": "json",
    "jsonc": "json",
    "css": "css",
    "scss": "scss",
    "less": "less",
    "html": "html",
    "markdown": "markdown",
    "yaml": "yaml",
    "graphql": "graphql",
}


class PrettierFormatter(ExternalToolFormatter):
    name = "prettier"
    display_name = "Prettier"
    executable_name = "prettier"
    supported_languages = tuple(_PARSERS)

    @staticmethod
    def parser_for(language: str) -> str | None:
        return _PARSERS.get(language) or _PARSERS.get(normalize_language(language))

    async def format(
        self, code: str, language: str, options: dict[str, Any] | None = None
    ) -> Result[FormatterResult]:
        parser = self.parser_for(language)
        if parser is None:
            return self._unsupported(language)
        handle = await self._handle_or_failure()
        if not handle.success:
            return handle

        argv = [handle.data.executable, "--stdin-filepath", filename_hint(language), "--parser", parser]
        config_path: Path | None = None
        try:
            if options:
                config_path = write_temp_config_file(options, suffix=".prettierrc.json")
                argv += ["--config", str(config_path)]
            return await self._run_formatter(argv, code, language, {"language": language, "parser": parser})
        finally:
            if config_path:
                config_path.unlink(missing_ok=True)
