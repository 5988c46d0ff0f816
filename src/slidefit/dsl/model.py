from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


# -----------------------------
# Layouts
# -----------------------------

LAYOUT_TITLE_ONLY = "title-only"
LAYOUT_TITLE_CONTENT = "title-content"
LAYOUT_TWO_COLUMN = "two-column"
LAYOUT_SECTION = "section"
LAYOUT_COMPARISON = "comparison"

LAYOUTS = (
    LAYOUT_TITLE_ONLY,
    LAYOUT_TITLE_CONTENT,
    LAYOUT_TWO_COLUMN,
    LAYOUT_SECTION,
    LAYOUT_COMPARISON,
)
COLUMN_LAYOUTS = (LAYOUT_TWO_COLUMN, LAYOUT_COMPARISON)

EMPHASIS_VALUES = ("normal", "highlight", "muted")


# -----------------------------
# Content blocks (closed set of six kinds)
# -----------------------------

@dataclass(frozen=True)
class ParagraphBlock:
    text: str
    emphasis: Optional[str] = None
    type: str = field(default="paragraph", init=False)


@dataclass(frozen=True)
class BulletsBlock:
    items: Tuple[str, ...]
    type: str = field(default="bullets", init=False)


@dataclass(frozen=True)
class NumberedBlock:
    items: Tuple[str, ...]
    type: str = field(default="numbered", init=False)


@dataclass(frozen=True)
class CodeBlock:
    language: str
    lines: Tuple[str, ...]
    caption: Optional[str] = None
    type: str = field(default="code", init=False)


@dataclass(frozen=True)
class TableBlock:
    """
    Table content. Row widths are NOT reconciled against `headers` here;
    the renderer pads/truncates each row to the header width.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    caption: Optional[str] = None
    type: str = field(default="table", init=False)


@dataclass(frozen=True)
class QuoteBlock:
    text: str
    author: Optional[str] = None
    type: str = field(default="quote", init=False)


ContentBlock = Union[ParagraphBlock, BulletsBlock, NumberedBlock, CodeBlock, TableBlock, QuoteBlock]

BLOCK_CLASSES = (ParagraphBlock, BulletsBlock, NumberedBlock, CodeBlock, TableBlock, QuoteBlock)
BLOCK_TYPES = ("paragraph", "bullets", "numbered", "code", "table", "quote")


# -----------------------------
# Slides / presentation
# -----------------------------

@dataclass(frozen=True)
class Slide:
    layout: str = LAYOUT_TITLE_CONTENT
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[Tuple[ContentBlock, ...]] = None
    left_content: Optional[Tuple[ContentBlock, ...]] = None
    right_content: Optional[Tuple[ContentBlock, ...]] = None
    notes: Optional[str] = None

    @property
    def is_column_layout(self) -> bool:
        return self.layout in COLUMN_LAYOUTS


@dataclass(frozen=True)
class Presentation:
    slides: Tuple[Slide, ...]

    def __len__(self) -> int:
        return len(self.slides)


# -----------------------------
# Wire form
# -----------------------------

def block_to_dict(block: ContentBlock) -> Dict[str, Any]:
    if isinstance(block, ParagraphBlock):
        out: Dict[str, Any] = {"type": block.type, "text": block.text}
        if block.emphasis is not None:
            out["emphasis"] = block.emphasis
        return out
    if isinstance(block, (BulletsBlock, NumberedBlock)):
        return {"type": block.type, "items": list(block.items)}
    if isinstance(block, CodeBlock):
        out = {"type": block.type, "language": block.language, "lines": list(block.lines)}
        if block.caption is not None:
            out["caption"] = block.caption
        return out
    if isinstance(block, TableBlock):
        out = {
            "type": block.type,
            "headers": list(block.headers),
            "rows": [list(r) for r in block.rows],
        }
        if block.caption is not None:
            out["caption"] = block.caption
        return out
    if isinstance(block, QuoteBlock):
        out = {"type": block.type, "text": block.text}
        if block.author is not None:
            out["author"] = block.author
        return out
    raise TypeError(f"not a content block: {type(block).__name__}")


def _blocks_to_list(blocks: Optional[Tuple[ContentBlock, ...]]) -> Optional[List[Dict[str, Any]]]:
    if blocks is None:
        return None
    return [block_to_dict(b) for b in blocks]


def slide_to_dict(slide: Slide) -> Dict[str, Any]:
    out: Dict[str, Any] = {"layout": slide.layout}
    pairs = (
        ("title", slide.title),
        ("subtitle", slide.subtitle),
        ("content", _blocks_to_list(slide.content)),
        ("leftContent", _blocks_to_list(slide.left_content)),
        ("rightContent", _blocks_to_list(slide.right_content)),
        ("notes", slide.notes),
    )
    for key, value in pairs:
        if value is not None:
            out[key] = value
    return out


def presentation_to_dict(presentation: Presentation) -> Dict[str, Any]:
    return {"slides": [slide_to_dict(s) for s in presentation.slides]}
