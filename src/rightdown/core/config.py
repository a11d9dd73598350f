"""Configuration schema, loading and formatter routing."""

from __future__ import annotations

import os
from collections.abc import Collection
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rightdown.core.languages import normalize_language, syntax_for
from rightdown.core.presets import DEFAULT_PRESET, PresetName
from rightdown.core.result import ErrorCode, Result, failure, make_error, success

SKIP = "none"

CONFIG_ENV_VAR = "RIGHTDOWN_CONFIG"
DEFAULT_CONFIG_NAMES = (".rightdown.config.yaml", ".markdownlint-cli2.yaml")


class FormattersConfig(BaseModel):
    default: str | None = None
    languages: dict[str, str] = Field(default_factory=dict)

    @field_validator("languages")
    @classmethod
    def _normalize_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return {syntax_for(lang): name for lang, name in value.items()}


class TerminologyRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    incorrect: str
    correct: str
    case_sensitive: bool = Field(default=False, alias="caseSensitive")


class OutputConfig(BaseModel):
    diagnostics: bool = True
    progress: bool = True
    color: bool = True


class RightdownConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: Literal[2] = 2
    preset: PresetName = DEFAULT_PRESET
    rules: dict[str, Any] = Field(default_factory=dict)
    formatters: FormattersConfig = Field(default_factory=FormattersConfig)
    formatter_options: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="formatterOptions")
    ignores: list[str] = Field(default_factory=list)
    terminology: list[TerminologyRule] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)


def resolve_formatter(language: str | None, config: RightdownConfig, available: Collection[str]) -> str | None:
    """Return the formatter name responsible for ``language``, or ``None`` to skip.

    An explicit per-language entry wins over ``formatters.default``. A
    ``jsx`` or ``tsx`` entry is looked up before its base language.
    ``"none"`` at either level, an unset default, and a name with no adapter
    in ``available`` all mean the block is left as is.
    """
    routing = config.formatters
    for key in dict.fromkeys((syntax_for(language), normalize_language(language))):
        if key in routing.languages:
            name = routing.languages[key]
            break
    else:
        name = routing.default
    if not name or name == SKIP or name not in available:
        return None
    return name


def formatter_options_for(name: str, config: RightdownConfig) -> dict[str, Any] | None:
    return config.formatter_options.get(name)


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "config"
    return f"{location}: {first['msg']}"


def parse_config(data: object) -> Result[RightdownConfig]:
    """Validate a decoded configuration mapping.

    An empty document yields the default configuration.
    """
    if data is None:
        return success(RightdownConfig())
    if not isinstance(data, dict):
        return failure(make_error(ErrorCode.VALIDATION_ERROR, "Configuration must be a mapping"))
    if "version" in data and data["version"] != 2:
        return failure(
            make_error(
                ErrorCode.VALIDATION_ERROR,
                f"Unsupported configuration version: {data['version']}. Only version 2 is supported.",
                {"version": data["version"]},
            )
        )
    try:
        return success(RightdownConfig.model_validate(data))
    except ValidationError as exc:
        return failure(
            make_error(
                ErrorCode.VALIDATION_ERROR,
                f"Invalid configuration: {_describe_validation_error(exc)}",
                {"errors": exc.errors(include_url=False)},
            )
        )


def load_config(path: str | Path) -> Result[RightdownConfig]:
    config_path = Path(path)
    if not config_path.is_file():
        return failure(make_error(ErrorCode.FILE_NOT_FOUND, f"Configuration file not found: {config_path}"))
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return failure(
            make_error(ErrorCode.IO_ERROR, "Failed to read configuration file", {"path": str(config_path)}, exc)
        )
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        return failure(
            make_error(
                ErrorCode.VALIDATION_ERROR, "Failed to parse YAML configuration", {"path": str(config_path)}, exc
            )
        )
    return parse_config(data)


def find_config_path(cwd: Path | None = None) -> Path:
    """Locate the configuration file.

    ``RIGHTDOWN_CONFIG`` wins, then the first existing default name in
    ``cwd``; otherwise the first default name is returned for creation.
    """
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    base = cwd or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = base / name
        if candidate.exists():
            return candidate
    return base / DEFAULT_CONFIG_NAMES[0]
