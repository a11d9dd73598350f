"""Tests for the built-in rule presets."""

from __future__ import annotations

from rightdown.core.presets import DEFAULT_PRESET, PRESET_NAMES, PRESETS, get_preset, preset_rules


def test_all_presets_defined() -> None:
    assert set(PRESETS) == set(PRESET_NAMES) == {"strict", "standard", "relaxed"}
    for name, preset in PRESETS.items():
        assert preset.name == name
        assert preset.description


def test_strict_enables_more_rules_than_relaxed() -> None:
    def enabled(name: str) -> set[str]:
        return {rule for rule, value in PRESETS[name].rules.items() if value is not False}

    assert enabled("relaxed") < enabled("strict")
    assert PRESETS["strict"].rules["line-length"] == {"line_length": 100, "code_blocks": False, "tables": False}
    assert PRESETS["relaxed"].rules["line-length"] is False


def test_unknown_preset_falls_back_to_standard() -> None:
    assert get_preset("loose").name == DEFAULT_PRESET
    assert get_preset(None).name == "standard"


def test_preset_rules_returns_a_copy() -> None:
    rules = preset_rules("strict")
    rules["heading-style"]["style"] = "setext"
    assert PRESETS["strict"].rules["heading-style"] == {"style": "atx"}
