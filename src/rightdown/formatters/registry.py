from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator, Mapping

from rightdown.core.ports.formatter import CodeFormatter
from rightdown.formatters.biome import BiomeFormatter
from rightdown.formatters.prettier import PrettierFormatter

logger = logging.getLogger(__name__)


class FormatterRegistry(Mapping[str, CodeFormatter]):
    """Name to adapter map with an explicit lifecycle.

    ``init`` checks every registered adapter and keeps only those whose tool
    is available. ``shutdown`` releases every adapter's cached tool handle.
    """

    def __init__(self, formatters: Iterable[CodeFormatter] = ()) -> None:
        self._all: dict[str, CodeFormatter] = {}
        self._active: dict[str, CodeFormatter] = {}
        for formatter in formatters:
            self.register(formatter)

    def register(self, formatter: CodeFormatter) -> None:
        self._all[formatter.name] = formatter
        self._active[formatter.name] = formatter

    def __getitem__(self, name: str) -> CodeFormatter:
        return self._active[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._active)

    def __len__(self) -> int:
        return len(self._active)

    @property
    def registered(self) -> Mapping[str, CodeFormatter]:
        return dict(self._all)

    async def init(self) -> dict[str, bool]:
        names = list(self._all)
        checks = await asyncio.gather(*(self._all[name].is_available() for name in names))
        availability: dict[str, bool] = {}
        for name, check in zip(names, checks, strict=True):
            if check.success:
                availability[name] = check.data
            else:
                logger.warning("Formatter %s is unusable: %s", name, check.error.message)
                availability[name] = False
        self._active = {name: self._all[name] for name in names if availability[name]}
        return availability

    async def shutdown(self) -> None:
        await asyncio.gather(*(formatter.shutdown() for formatter in self._all.values()))


def default_registry() -> FormatterRegistry:
    return FormatterRegistry([PrettierFormatter(), BiomeFormatter()])
