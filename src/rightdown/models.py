from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from rightdown.core.result import AppError

FenceChar = Literal["`", "~"]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    offset: int


class Span(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Point
    end: Point


class CodeBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    language: str
    syntax: str = ""
    info: str
    content: str
    fence_char: FenceChar
    fence_length: int
    position: Span
    content_start: int
    content_end: int
    prefix: str = ""
    line_ending: str = "\n"
    closed: bool = True


class FormatterResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    formatted: str
    did_change: bool


class FormatStats(BaseModel):
    total_blocks: int = 0
    formatted_blocks: int = 0
    skipped_blocks: int = 0
    errors: int = 0
    changed_blocks: int = 0
    duration: float = 0.0

    @model_validator(mode="after")
    def _check_totals(self) -> "FormatStats":
        accounted = self.formatted_blocks + self.skipped_blocks + self.errors
        if accounted != self.total_blocks:
            raise ValueError(f"total_blocks={self.total_blocks} but formatted+skipped+errors={accounted}")
        return self

    def summary(self) -> str:
        return (
            f"{self.formatted_blocks} of {self.total_blocks} blocks formatted, "
            f"{self.errors} errors, {self.skipped_blocks} skipped"
        )


class BlockDiagnostic(BaseModel):
    index: int
    language: str
    line: int
    formatter: str
    error: AppError


class FormatOutcome(BaseModel):
    content: str
    stats: FormatStats
    diagnostics: list[BlockDiagnostic] = []


class LintReport(BaseModel):
    files: list[str]
    exit_code: int
    output: str = ""
    fixed: bool = False

    @property
    def clean(self) -> bool:
        return self.exit_code == 0
