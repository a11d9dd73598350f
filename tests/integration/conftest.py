"""Fixtures for integration tests that need real formatter executables."""

import shutil
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from rightdown.formatters import BiomeFormatter, PrettierFormatter


def _require(executable: str) -> None:
    if shutil.which(executable) is None:
        pytest.skip(f"{executable} is not installed")


@pytest_asyncio.fixture
async def prettier() -> AsyncGenerator[PrettierFormatter, None]:
    """A Prettier adapter backed by the prettier on PATH."""
    _require("prettier")
    formatter = PrettierFormatter()
    yield formatter
    await formatter.shutdown()


@pytest_asyncio.fixture
async def biome() -> AsyncGenerator[BiomeFormatter, None]:
    """A Biome adapter backed by the biome on PATH."""
    _require("biome")
    formatter = BiomeFormatter()
    yield formatter
    await formatter.shutdown()


@pytest.fixture
def markdownlint_cli2() -> str:
    _require("markdownlint-cli2")
    return "markdownlint-cli2"
