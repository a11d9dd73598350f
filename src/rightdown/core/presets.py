"""Built-in structural rule presets for the markdownlint collaborator."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Literal

PresetName = Literal["strict", "standard", "relaxed"]

PRESET_NAMES: tuple[PresetName, ...] = ("strict", "standard", "relaxed")
DEFAULT_PRESET: PresetName = "standard"


@dataclass(frozen=True)
class Preset:
    name: PresetName
    description: str
    rules: dict[str, Any] = field(default_factory=dict)


PRESETS: dict[str, Preset] = {
    "strict": Preset(
        name="strict",
        description="Strict preset with all rules enabled",
        rules={
            # document structure
            "first-line-heading": True,
            "heading-increment": True,
            "heading-style": {"style": "atx"},
            "no-missing-space-atx": True,
            "blanks-around-headings": True,
            # lists
            "blanks-around-lists": True,
            "list-indent": True,
            "list-marker-space": True,
            "no-blanks-blockquote": True,
            "ul-style": {"style": "dash"},
            "ol-prefix": {"style": "ordered"},
            # code blocks
            "blanks-around-fences": True,
            "fenced-code-language": True,
            "code-fence-style": {"style": "backtick"},
            # links
            "no-bare-urls": True,
            "link-fragments": True,
            "reference-links-images": True,
            "line-length": {"line_length": 100, "code_blocks": False, "tables": False},
            # whitespace
            "no-trailing-spaces": True,
            "no-hard-tabs": True,
            "no-multiple-blanks": {"maximum": 1},
            "single-trailing-newline": True,
            # content
            "no-duplicate-heading": True,
            "proper-names": {
                "names": ["JavaScript", "TypeScript", "GitHub", "npm", "Node.js"],
                "code_blocks": False,
            },
        },
    ),
    "standard": Preset(
        name="standard",
        description="Balanced rules for technical docs",
        rules={
            "heading-increment": True,
            "heading-style": {"style": "atx"},
            "no-missing-space-atx": True,
            "list-indent": True,
            "list-marker-space": True,
            "ul-style": {"style": "dash"},
            "fenced-code-language": False,
            "code-fence-style": {"style": "consistent"},
            "no-bare-urls": True,
            "line-length": False,
            "no-trailing-spaces": True,
            # tabs are common inside code blocks
            "no-hard-tabs": False,
            "no-multiple-blanks": {"maximum": 2},
            "single-trailing-newline": True,
            "no-duplicate-heading": False,
        },
    ),
    "relaxed": Preset(
        name="relaxed",
        description="Minimal rules focusing on consistency",
        rules={
            "heading-increment": True,
            "no-missing-space-atx": True,
            "list-marker-space": True,
            "no-trailing-spaces": True,
            "single-trailing-newline": True,
            "line-length": False,
            "no-hard-tabs": False,
            "no-duplicate-heading": False,
            "fenced-code-language": False,
            "no-bare-urls": False,
        },
    ),
}


def get_preset(name: str | None) -> Preset:
    """Return the named preset, falling back to ``standard`` for unknown names."""
    return PRESETS.get(name or DEFAULT_PRESET, PRESETS[DEFAULT_PRESET])


def preset_rules(name: str | None) -> dict[str, Any]:
    """Return a deep copy of a preset's rules that callers may mutate."""
    return copy.deepcopy(get_preset(name).rules)
