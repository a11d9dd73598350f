"""Fenced code block extraction and splicing.

The tree-sitter ``markdown`` grammar decides where each fenced code block
starts and ends (list items, blockquotes, nested fences and unterminated
fences follow CommonMark). Everything else is done on the original text
line by line, so replacing a block's content never re-serialises the rest
of the document.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from rightdown.core.languages import normalize_language, syntax_for, tag_from_info
from rightdown.core.result import ErrorCode, Result, failure, make_error, success
from rightdown.models import CodeBlock, FenceChar, Point, Span

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"(`{3,}|~{3,})")
_LINE_RE = re.compile(r"([^\r\n]*)(\r\n|\r|\n)")
_LINE_ENDINGS = ("\r\n", "\r", "\n")


@dataclass(frozen=True)
class _Line:
    start: int
    text: str
    ending: str

    @property
    def end(self) -> int:
        return self.start + len(self.text) + len(self.ending)


def _split_lines(text: str) -> list[_Line]:
    # LF, CRLF and bare CR all end a line, as they do for the parser
    lines: list[_Line] = []
    offset = 0
    for match in _LINE_RE.finditer(text):
        lines.append(_Line(start=match.start(), text=match.group(1), ending=match.group(2)))
        offset = match.end()
    if offset < len(text):
        lines.append(_Line(start=offset, text=text[offset:], ending=""))
    return lines


def _trailing_ending(text: str) -> str:
    for ending in _LINE_ENDINGS:
        if text.endswith(ending):
            return ending
    return ""


def _continuation_prefix(opening_prefix: str) -> str:
    # "> - " on the opening line continues as ">   " on content lines
    return "".join(ch if ch in ">\t" else " " for ch in opening_prefix)


def _strip_prefix(text: str, prefix: str) -> str:
    i = 0
    for expected in prefix:
        if i >= len(text):
            break
        ch = text[i]
        if expected == ">":
            if ch != ">":
                break
        elif ch not in " \t":
            break
        i += 1
    return text[i:]


def _is_closing_fence(text: str, fence_char: str, fence_length: int) -> bool:
    pattern = rf"[ \t]*{re.escape(fence_char)}{{{fence_length},}}[ \t]*"
    return re.fullmatch(pattern, text) is not None


def _iter_fenced_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "fenced_code_block":
            yield node
            continue
        stack.extend(reversed(node.children))


class _Offsets:
    """Maps parser byte offsets onto character offsets and line numbers."""

    def __init__(self, text: str, lines: list[_Line]) -> None:
        self._data = text.encode("utf-8")
        self._ascii = len(self._data) == len(text)
        self._starts = [line.start for line in lines]

    def char(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        return len(self._data[:byte_offset].decode("utf-8", errors="ignore"))

    def row(self, char_offset: int) -> int:
        return max(0, bisect_right(self._starts, char_offset) - 1)


def _build_block(index: int, node: Node, lines: list[_Line], offsets: _Offsets) -> CodeBlock | None:
    if not lines:
        return None
    start_char = offsets.char(node.start_byte)
    end_char = offsets.char(node.end_byte)
    start_row = offsets.row(start_char)
    last_row = max(start_row, offsets.row(max(end_char - 1, start_char)))

    opening = lines[start_row]
    match = _FENCE_RE.search(opening.text, max(0, start_char - opening.start)) or _FENCE_RE.search(opening.text)
    if match is None:
        logger.debug("No fence found on line %d, skipping node", start_row + 1)
        return None

    fence = match.group(1)
    fence_char = cast(FenceChar, fence[0])
    info = opening.text[match.end() :].strip()
    prefix = _continuation_prefix(opening.text[: match.start()])
    tag = tag_from_info(info)

    closing_row: int | None = None
    for row in range(last_row, start_row, -1):
        stripped = _strip_prefix(lines[row].text, prefix)
        if not stripped.strip():
            continue
        if _is_closing_fence(stripped, fence_char, len(fence)):
            closing_row = row
        break

    body_end = closing_row if closing_row is not None else last_row + 1
    body = lines[start_row + 1 : body_end]
    content = "\n".join(_strip_prefix(line.text, prefix) for line in body)

    if body:
        content_start, content_end = body[0].start, body[-1].end
    elif closing_row is not None:
        content_start = content_end = lines[closing_row].start
    else:
        content_start = content_end = opening.end

    final = lines[closing_row if closing_row is not None else last_row]
    return CodeBlock(
        index=index,
        language=normalize_language(tag),
        syntax=syntax_for(tag),
        info=info,
        content=content,
        fence_char=fence_char,
        fence_length=len(fence),
        position=Span(
            start=Point(line=start_row + 1, column=match.start() + 1, offset=opening.start + match.start()),
            end=Point(
                line=(closing_row if closing_row is not None else last_row) + 1,
                column=len(final.text) + 1,
                offset=final.start + len(final.text),
            ),
        ),
        content_start=content_start,
        content_end=content_end,
        prefix=prefix,
        line_ending=opening.ending or "\n",
        closed=closing_row is not None,
    )


def extract_code_blocks(markdown: str) -> Result[list[CodeBlock]]:
    """Return every fenced code block of ``markdown`` in document order.

    Indented code blocks are ignored. A fence that is never closed runs to
    the end of the document (or of its container) and is reported with
    ``closed=False``.
    """
    try:
        parser = get_parser(cast(SupportedLanguage, "markdown"))
        tree = parser.parse(markdown.encode("utf-8"))
    except Exception as exc:
        return failure(make_error(ErrorCode.PARSE_ERROR, "Failed to parse markdown document", cause=exc))

    lines = _split_lines(markdown)
    offsets = _Offsets(markdown, lines)
    blocks: list[CodeBlock] = []
    for node in _iter_fenced_nodes(tree.root_node):
        block = _build_block(len(blocks), node, lines, offsets)
        if block is not None:
            blocks.append(block)
    return success(blocks)


def render_block_content(block: CodeBlock, new_content: str) -> str:
    """Render ``new_content`` as the source lines of ``block``'s content region.

    Container prefixes and the block's line ending are re-applied. One
    trailing newline in ``new_content`` is dropped since the closing fence
    supplies it.
    """
    text = new_content.replace("\r\n", "\n").replace("\r", "\n")
    if text.endswith("\n"):
        text = text[:-1]
    if not text:
        return ""
    rendered = [block.prefix + line if line else block.prefix.rstrip() for line in text.split("\n")]
    return block.line_ending.join(rendered)


def replace_code_blocks(markdown: str, replacements: Sequence[tuple[CodeBlock, str]]) -> Result[str]:
    """Replace the content of the given blocks and leave every other byte alone.

    ``replacements`` pairs a block extracted from ``markdown`` with its new
    content. Spans are applied right to left so earlier offsets stay valid.
    """
    if not replacements:
        return success(markdown)

    ordered = sorted(replacements, key=lambda item: item[0].content_start)
    previous_end = -1
    for block, _ in ordered:
        if block.content_start < previous_end or block.content_end > len(markdown):
            return failure(
                make_error(
                    ErrorCode.VALIDATION_ERROR,
                    "Code block replacements overlap or fall outside the document",
                    {"index": block.index, "start": block.content_start, "end": block.content_end},
                )
            )
        previous_end = block.content_end

    result = markdown
    for block, new_content in reversed(ordered):
        original_region = markdown[block.content_start : block.content_end]
        rendered = render_block_content(block, new_content)
        if original_region:
            region = rendered + _trailing_ending(original_region) if rendered else ""
        elif block.closed:
            region = rendered + block.line_ending if rendered else ""
        elif rendered:
            # unterminated fence: the region is empty and sits at the end of its container
            before = markdown[: block.content_start]
            needs_break = bool(before) and not before.endswith(_LINE_ENDINGS)
            needs_end = block.content_end < len(markdown)
            region = (block.line_ending if needs_break else "") + rendered + (block.line_ending if needs_end else "")
        else:
            region = ""
        result = result[: block.content_start] + region + result[block.content_end :]
    return success(result)
