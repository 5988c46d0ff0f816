from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from slidefit.deck.sizing import estimate_height, estimate_stack_height
from slidefit.dsl.limits import DEFAULT_LIMITS, DEFAULT_SETTINGS, ContentLimits, PaginationSettings
from slidefit.dsl.model import (
    LAYOUT_SECTION,
    LAYOUT_TITLE_ONLY,
    BulletsBlock,
    CodeBlock,
    ContentBlock,
    NumberedBlock,
    ParagraphBlock,
    Presentation,
    QuoteBlock,
    Slide,
    TableBlock,
)

logger = logging.getLogger(__name__)

_UNSPLIT_LAYOUTS = (LAYOUT_TITLE_ONLY, LAYOUT_SECTION)


def _part_suffix(text: Optional[str], index: int, total: int) -> str:
    return f"{text or ''} ({index}/{total})".strip()


def _chunks(seq: Sequence, size: int) -> List[Sequence]:
    size = max(1, size)
    return [seq[i : i + size] for i in range(0, len(seq), size)]


# -----------------------------
# Phase A: oversized-block splitting
# -----------------------------

def split_block(block: ContentBlock, limits: ContentLimits = DEFAULT_LIMITS) -> List[ContentBlock]:
    """
    Split one block into same-kind parts that respect the per-kind item
    ceilings. Paragraphs and quotes are never split.
    """
    if isinstance(block, CodeBlock):
        if len(block.lines) <= limits.max_code_lines:
            return [block]
        parts = _chunks(block.lines, limits.max_code_lines)
        total = len(parts)
        return [
            CodeBlock(language=block.language, lines=tuple(p), caption=_part_suffix(block.caption, i, total))
            for i, p in enumerate(parts, start=1)
        ]

    if isinstance(block, (BulletsBlock, NumberedBlock)):
        if len(block.items) <= limits.max_list_items:
            return [block]
        cls = type(block)
        return [cls(items=tuple(p)) for p in _chunks(block.items, limits.max_list_items)]

    if isinstance(block, TableBlock):
        if len(block.rows) <= limits.max_table_rows:
            return [block]
        parts = _chunks(block.rows, limits.max_table_rows)
        total = len(parts)
        return [
            TableBlock(headers=block.headers, rows=tuple(p), caption=_part_suffix(block.caption, i, total))
            for i, p in enumerate(parts, start=1)
        ]

    if isinstance(block, (ParagraphBlock, QuoteBlock)):
        return [block]

    raise TypeError(f"not a content block: {type(block).__name__}")


def split_blocks(blocks: Sequence[ContentBlock], limits: ContentLimits = DEFAULT_LIMITS) -> List[ContentBlock]:
    out: List[ContentBlock] = []
    for block in blocks:
        out.extend(split_block(block, limits))
    return out


# -----------------------------
# Phase B: greedy height-based repacking
# -----------------------------

def pack_blocks(blocks: Sequence[ContentBlock], settings: PaginationSettings = DEFAULT_SETTINGS) -> List[List[ContentBlock]]:
    """
    Greedy left-to-right packing into pages of at most `page_budget` inches.

    The first block of a page is always accepted, whatever its height. A final
    page shorter than `min_page_height` is merged into the one before it.
    """
    pages: List[List[ContentBlock]] = []
    current: List[ContentBlock] = []
    current_height = 0.0

    for block in blocks:
        height = estimate_height(block, settings.calibration)
        if not current:
            current = [block]
            current_height = height
            continue

        candidate = current_height + settings.block_spacing + height
        if candidate > settings.page_budget:
            pages.append(current)
            current = [block]
            current_height = height
        else:
            current.append(block)
            current_height = candidate

    if current:
        pages.append(current)

    if len(pages) > 1:
        last_height = estimate_stack_height(pages[-1], settings)
        if last_height < settings.min_page_height:
            tail = pages.pop()
            pages[-1] = pages[-1] + tail
            logger.info("merged short last page (%.2fin) into previous page", last_height)

    return pages


def paginate(slide: Slide, settings: PaginationSettings = DEFAULT_SETTINGS) -> List[Slide]:
    """
    Split one slide into as many slides as its content needs.

    Only single-column content is paginated; title-only, section, two-column
    and comparison slides come back unchanged.
    """
    if slide.layout in _UNSPLIT_LAYOUTS or slide.is_column_layout:
        return [slide]
    if not slide.content:
        return [slide]

    blocks = split_blocks(slide.content, settings.limits)
    pages = pack_blocks(blocks, settings)

    if len(pages) == 1:
        return [replace(slide, content=tuple(pages[0]))]

    total = len(pages)
    return [
        replace(slide, title=_part_suffix(slide.title, i, total), content=tuple(page))
        for i, page in enumerate(pages, start=1)
    ]


def paginate_presentation(presentation: Presentation, settings: PaginationSettings = DEFAULT_SETTINGS) -> Presentation:
    slides: List[Slide] = []
    for slide in presentation.slides:
        slides.extend(paginate(slide, settings))
    if len(slides) != len(presentation.slides):
        logger.info("paginated %d slides into %d", len(presentation.slides), len(slides))
    return Presentation(slides=tuple(slides))
