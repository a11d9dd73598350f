"""Derive markdownlint, Prettier and Biome configs from a rightdown config."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rightdown.core.config import RightdownConfig
from rightdown.core.presets import get_preset
from rightdown.core.result import ErrorCode, Result, failure, make_error, success

KNOWN_FORMATTERS = frozenset({"prettier", "biome"})

TOOL_CONFIG_FILES = {
    "prettier": ".prettierrc",
    "biome": "biome.json",
}

_PRETTIER_DEFAULTS: dict[str, Any] = {
    "printWidth": 80,
    "tabWidth": 2,
    "useTabs": False,
    "semi": True,
    "singleQuote": False,
    "quoteProps": "as-needed",
    "jsxSingleQuote": False,
    "trailingComma": "all",
    "bracketSpacing": True,
    "arrowParens": "always",
    "proseWrap": "preserve",
    "endOfLine": "lf",
}

_BIOME_DEFAULTS: dict[str, Any] = {
    "$schema": "https://biomejs.dev/schemas/1.9.4/schema.json",
    "formatter": {
        "enabled": True,
        "indentStyle": "tab",
        "indentWidth": 2,
        "lineWidth": 80,
        "formatWithErrors": False,
    },
    "javascript": {
        "formatter": {
            "quoteStyle": "double",
            "jsxQuoteStyle": "double",
            "semicolons": "always",
            "trailingComma": "all",
            "arrowParentheses": "always",
        },
    },
}

BIOME_FORMATTER_KEYS = ("indentStyle", "indentWidth", "lineWidth")
BIOME_JAVASCRIPT_KEYS = ("quoteStyle", "semicolons", "trailingComma")


def biome_overrides(options: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Split a flat Biome option bag into its ``formatter`` and ``javascript`` sections.

    Unknown and empty keys are dropped. The adapter and ``biome.json`` both
    read ``formatterOptions.biome`` through this function.
    """
    return {
        "formatter": {key: options[key] for key in BIOME_FORMATTER_KEYS if options.get(key)},
        "javascript": {key: options[key] for key in BIOME_JAVASCRIPT_KEYS if options.get(key)},
    }


@dataclass(frozen=True)
class GeneratedConfigs:
    markdownlint: dict[str, Any]
    prettier: dict[str, Any] | None = None
    biome: dict[str, Any] | None = None

    def tool_configs(self) -> dict[str, dict[str, Any]]:
        """Formatter configs keyed by tool name, leaving out unused tools."""
        configs = {"prettier": self.prettier, "biome": self.biome}
        return {name: value for name, value in configs.items() if value is not None}


@dataclass(frozen=True)
class DriftReport:
    drifted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return bool(self.drifted)


def used_formatters(config: RightdownConfig) -> set[str]:
    names = {config.formatters.default, *config.formatters.languages.values()}
    return {name for name in names if name in KNOWN_FORMATTERS}


def markdownlint_config(config: RightdownConfig) -> dict[str, Any]:
    rules = copy.deepcopy(get_preset(config.preset).rules)
    rules.update(copy.deepcopy(config.rules))
    compiled: dict[str, Any] = {"rules": rules}
    if config.terminology:
        compiled["customRules"] = ["consistent-terminology"]
        rules["consistent-terminology"] = {
            "terminology": [rule.model_dump(by_alias=True) for rule in config.terminology],
        }
    if config.ignores:
        compiled["ignores"] = list(config.ignores)
    return compiled


def prettier_config(config: RightdownConfig) -> dict[str, Any] | None:
    if "prettier" not in used_formatters(config):
        return None
    compiled = dict(_PRETTIER_DEFAULTS)
    compiled.update(config.formatter_options.get("prettier") or {})
    return compiled


def biome_config(config: RightdownConfig) -> dict[str, Any] | None:
    """Biome config from the defaults plus the flat ``formatterOptions.biome`` bag."""
    if "biome" not in used_formatters(config):
        return None
    compiled = copy.deepcopy(_BIOME_DEFAULTS)
    overrides = biome_overrides(config.formatter_options.get("biome") or {})
    compiled["formatter"].update(overrides["formatter"])
    compiled["javascript"]["formatter"].update(overrides["javascript"])
    return compiled


def compile_configs(config: RightdownConfig) -> Result[GeneratedConfigs]:
    try:
        return success(
            GeneratedConfigs(
                markdownlint=markdownlint_config(config),
                prettier=prettier_config(config),
                biome=biome_config(config),
            )
        )
    except (TypeError, ValueError) as exc:
        return failure(make_error(ErrorCode.INTERNAL_ERROR, "Failed to compile configuration", cause=exc))


def write_tool_configs(configs: GeneratedConfigs, directory: Path) -> list[Path]:
    written: list[Path] = []
    for name, value in configs.tool_configs().items():
        target = directory / TOOL_CONFIG_FILES[name]
        target.write_text(json.dumps(value, indent=2) + "\n", encoding="utf-8")
        written.append(target)
    return written


def check_drift(configs: GeneratedConfigs, directory: Path) -> Result[DriftReport]:
    """Compare on-disk tool configs with the compiled ones.

    A tool config that is expected but absent is reported as missing, not
    as drift.
    """
    report = DriftReport()
    for name, expected in configs.tool_configs().items():
        path = directory / TOOL_CONFIG_FILES[name]
        if not path.exists():
            report.missing.append(path.name)
            continue
        try:
            existing = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            return failure(
                make_error(ErrorCode.VALIDATION_ERROR, f"Could not read {path.name}", {"path": str(path)}, exc)
            )
        if existing != expected:
            report.drifted.append(path.name)
    return success(report)
