"""Shared fixtures and helpers for tests."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

import pytest

from rightdown.core.config import RightdownConfig
from rightdown.core.result import ErrorCode, Result, failure, make_error, success
from rightdown.models import FormatterResult

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# MockFormatter: a formatter that needs no external tool
# ---------------------------------------------------------------------------


def _space_operators(code: str) -> str:
    """Put spaces around ``=`` and end every statement line with ``;``."""
    lines = []
    for line in code.split("\n"):
        if not line.strip():
            lines.append(line)
            continue
        spaced = re.sub(r"\s*=\s*", " = ", line.rstrip())
        if not spaced.endswith((";", "{", "}")):
            spaced += ";"
        lines.append(spaced)
    return "\n".join(lines)


class MockFormatter:
    """In-memory formatter. Code containing ``SYNTAX ERROR`` is rejected."""

    def __init__(
        self,
        name: str = "mock",
        languages: tuple[str, ...] = ("javascript", "typescript"),
        delay: float = 0.0,
        raise_on: str | None = None,
    ) -> None:
        self.name = name
        self.languages = languages
        self.delay = delay
        self.raise_on = raise_on
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.shut_down = False

    async def is_available(self) -> Result[bool]:
        return success(True)

    async def get_version(self) -> Result[str]:
        return success("1.0.0")

    async def format(self, code: str, language: str, options: dict[str, Any] | None = None) -> Result[FormatterResult]:
        self.calls.append((code, language, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_on is not None and self.raise_on in code:
            raise RuntimeError("formatter exploded")
        if language not in self.languages:
            return failure(
                make_error(ErrorCode.FORMATTER_FAILED, f"Unsupported language: {language}", {"language": language})
            )
        if "SYNTAX ERROR" in code:
            return failure(
                make_error(ErrorCode.FORMATTER_FAILED, "Unexpected token", {"language": language})
            )
        formatted = _space_operators(code)
        return success(FormatterResult(formatted=formatted, did_change=formatted != code))

    def get_supported_languages(self) -> tuple[str, ...]:
        return self.languages

    async def shutdown(self) -> None:
        self.shut_down = True


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_formatter() -> MockFormatter:
    return MockFormatter()


@pytest.fixture
def mock_config() -> RightdownConfig:
    """Route JavaScript and TypeScript to the mock formatter; no default."""
    return RightdownConfig.model_validate(
        {"formatters": {"languages": {"javascript": "mock", "typescript": "mock"}}}
    )


@pytest.fixture
def make_formatter() -> type[MockFormatter]:
    """Return the ``MockFormatter`` class for tests that need custom instances."""
    return MockFormatter
