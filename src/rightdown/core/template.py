"""YAML text written by ``rightdown init``."""

from __future__ import annotations

from typing import Any

import yaml

from rightdown.core.presets import DEFAULT_PRESET

DOCS_URL = "https://github.com/DavidAnson/markdownlint-cli2"

DEFAULT_TERMINOLOGY: list[dict[str, str]] = [
    {"incorrect": "NPM", "correct": "npm"},
    {"incorrect": "Javascript", "correct": "JavaScript"},
    {"incorrect": "Typescript", "correct": "TypeScript"},
    {"incorrect": "VSCode", "correct": "VS Code"},
    {"incorrect": "MacOS", "correct": "macOS"},
    {"incorrect": "Github", "correct": "GitHub"},
    {"incorrect": "gitlab", "correct": "GitLab"},
    {"incorrect": "nodejs", "correct": "Node.js"},
    {"incorrect": "react native", "correct": "React Native"},
]

_SECTION_COMMENTS = {
    "formatters": "# Which formatter handles each code block language (\"none\" skips it)",
    "terminology": "# Custom terminology corrections",
    "ignores": "# Files and patterns to ignore, glob patterns like \"docs/legacy/**\"",
}


def _dump(section: dict[str, Any]) -> str:
    return yaml.safe_dump(section, sort_keys=False, default_flow_style=False, allow_unicode=True)


def render_config(
    preset: str = DEFAULT_PRESET,
    default_formatter: str = "prettier",
    terminology: list[dict[str, str]] | None = None,
    ignores: list[str] | None = None,
) -> str:
    sections: list[dict[str, Any]] = [
        {"version": 2, "preset": preset},
        {"formatters": {"default": default_formatter, "languages": {"json": default_formatter}}},
    ]
    if terminology:
        sections.append({"terminology": terminology})
    if ignores:
        sections.append({"ignores": sorted(set(ignores))})

    lines = [
        "# rightdown configuration",
        f"# Generated with preset: {preset}",
        f"# Docs: {DOCS_URL}",
        "",
    ]
    for section in sections:
        key = next(iter(section))
        if key in _SECTION_COMMENTS:
            lines.append(_SECTION_COMMENTS[key])
        lines.append(_dump(section).rstrip("\n"))
        lines.append("")
    return "\n".join(lines)
