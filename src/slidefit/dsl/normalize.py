from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from slidefit.dsl.model import (
    EMPHASIS_VALUES,
    BulletsBlock,
    CodeBlock,
    ContentBlock,
    NumberedBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
)

logger = logging.getLogger(__name__)

DEFAULT_CODE_LANGUAGE = "text"

# |---|:---:| style separator line: every cell is dashes with optional colons
_MD_SEPARATOR_RE = re.compile(r"^\s*\|?(\s*:?-+:?\s*\|)*\s*:?-+:?\s*\|?\s*$")


# -----------------------------
# Field helpers
# -----------------------------
def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _strings(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    return [v for v in values if isinstance(v, str)]


def _cell_text(cell: Any) -> str:
    if isinstance(cell, str):
        return cell
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def _table_rows(raw: Any) -> List[Tuple[str, ...]]:
    if not isinstance(raw, list):
        return []
    return [tuple(_cell_text(c) for c in row) for row in raw if isinstance(row, list)]


def _split_pipe_cells(line: str) -> List[str]:
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def parse_markdown_table(text: str) -> Optional[Tuple[List[str], List[List[str]]]]:
    """
    Parse a markdown pipe table:

      | A | B |
      |---|---|
      | 1 | 2 |

    Only header + optional separator + data lines; anything else is ignored.
    """
    lines = [line for line in (text or "").split("\n") if line.strip()]
    if len(lines) < 2:
        return None

    header_line = lines[0]
    if "|" not in header_line:
        return None
    headers = _split_pipe_cells(header_line)
    if not headers:
        return None

    data_start = 2 if _MD_SEPARATOR_RE.match(lines[1]) else 1

    rows: List[List[str]] = []
    for line in lines[data_start:]:
        if "|" not in line:
            continue
        cells = _split_pipe_cells(line)
        if cells:
            rows.append(cells)

    if not rows:
        return None
    return headers, rows


# -----------------------------
# Per-kind coercion
# -----------------------------
def _paragraph(b: Dict[str, Any]) -> Optional[ContentBlock]:
    text = _str_or_none(b.get("text"))
    if text is None:
        return None
    emphasis = b.get("emphasis")
    return ParagraphBlock(text=text, emphasis=emphasis if emphasis in EMPHASIS_VALUES else None)


def _list_block(b: Dict[str, Any], kind: str) -> Optional[ContentBlock]:
    items = _strings(b.get("items"))
    if not items:
        return None
    if kind == "bullets":
        return BulletsBlock(items=tuple(items))
    return NumberedBlock(items=tuple(items))


def _code(b: Dict[str, Any]) -> Optional[ContentBlock]:
    lines = _strings(b.get("lines"))
    if not lines:
        for key in ("code", "content", "text"):
            source = b.get(key)
            if isinstance(source, str):
                lines = source.split("\n")
                break
    if not lines:
        return None

    language = DEFAULT_CODE_LANGUAGE
    for key in ("language", "lang"):
        value = b.get(key)
        if isinstance(value, str) and value:
            language = value
            break

    return CodeBlock(language=language, lines=tuple(lines), caption=_str_or_none(b.get("caption")))


def _table(b: Dict[str, Any]) -> Optional[ContentBlock]:
    headers = _strings(b.get("headers"))
    rows = _table_rows(b.get("rows")) or _table_rows(b.get("data"))

    if (not headers or not rows) and isinstance(b.get("text"), str):
        parsed = parse_markdown_table(b["text"])
        if parsed:
            headers = parsed[0]
            rows = [tuple(r) for r in parsed[1]]

    if not headers and rows:
        headers = [f"Column{i + 1}" for i in range(len(rows[0]))]

    if not headers or not rows:
        return None

    return TableBlock(
        headers=tuple(headers),
        rows=tuple(rows),
        caption=_str_or_none(b.get("caption")),
    )


def _quote(b: Dict[str, Any]) -> Optional[ContentBlock]:
    text = _str_or_none(b.get("text"))
    if text is None:
        text = _str_or_none(b.get("content"))
    if text is None:
        return None
    return QuoteBlock(text=text, author=_str_or_none(b.get("author")))


_COERCERS = {
    "paragraph": _paragraph,
    "bullets": lambda b: _list_block(b, "bullets"),
    "numbered": lambda b: _list_block(b, "numbered"),
    "code": _code,
    "table": _table,
    "quote": _quote,
}


# -----------------------------
# Public API
# -----------------------------
def normalize_block(raw: Any) -> Optional[ContentBlock]:
    """Coerce an untyped value into one of the six block kinds, or None."""
    if not isinstance(raw, dict):
        return None
    kind = raw.get("type")
    if not isinstance(kind, str):
        return None
    coerce = _COERCERS.get(kind)
    if coerce is None:
        return None
    return coerce(raw)


def normalize_blocks(raw: Any) -> Optional[Tuple[ContentBlock, ...]]:
    """Map a raw list through normalize_block, dropping failures. Non-lists give None."""
    if not isinstance(raw, list):
        return None
    out: List[ContentBlock] = []
    for item in raw:
        block = normalize_block(item)
        if block is None:
            logger.debug("dropped content block: %r", item if not isinstance(item, dict) else item.get("type"))
            continue
        out.append(block)
    return tuple(out)
