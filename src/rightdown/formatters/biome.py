from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any

from rightdown.core.compiler import biome_overrides
from rightdown.core.languages import normalize_language
from rightdown.core.result import Result
from rightdown.formatters.base import ExternalToolFormatter
from rightdown.models import FormatterResult

_FILE_HINTS = {
    "javascript": "file.js",
    "typescript": "file.ts",
    "jsx": "file.jsx",
    "tsx": "file.tsx",
    "json": "file.json",
    "jsonc": "file.jsonc",
}


def build_biome_config(options: dict[str, Any]) -> dict[str, Any]:
    """Translate a flat option bag into a ``biome.json`` document."""
    overrides = biome_overrides(options)
    config: dict[str, Any] = {"formatter": {"enabled": True, **overrides["formatter"]}}
    if overrides["javascript"]:
        config["javascript"] = {"formatter": overrides["javascript"]}
    return config


class BiomeFormatter(ExternalToolFormatter):
    name = "biome"
    display_name = "Biome"
    executable_name = "biome"
    supported_languages = tuple(_FILE_HINTS)

    @staticmethod
    def file_hint_for(language: str) -> str | None:
        return _FILE_HINTS.get(language) or _FILE_HINTS.get(normalize_language(language))

    async def format(
        self, code: str, language: str, options: dict[str, Any] | None = None
    ) -> Result[FormatterResult]:
        file_hint = self.file_hint_for(language)
        if file_hint is None:
            return self._unsupported(language)
        handle = await self._handle_or_failure()
        if not handle.success:
            return handle

        argv = [handle.data.executable, "format", f"--stdin-file-path={file_hint}"]
        config_dir: Path | None = None
        try:
            if options:
                config_dir = Path(tempfile.mkdtemp(prefix="rightdown-biome-"))
                (config_dir / "biome.json").write_text(json.dumps(build_biome_config(options)), encoding="utf-8")
                argv.append(f"--config-path={config_dir}")
            return await self._run_formatter(argv, code, language, {"language": language, "filePath": file_hint})
        finally:
            if config_dir:
                shutil.rmtree(config_dir, ignore_errors=True)
