from __future__ import annotations

import math
from typing import Iterable

from slidefit.dsl.limits import DEFAULT_CALIBRATION, DEFAULT_SETTINGS, HeightCalibration, PaginationSettings
from slidefit.dsl.model import (
    BulletsBlock,
    CodeBlock,
    ContentBlock,
    NumberedBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
)


def _wrapped_text_height(text: str, chars_per_line: int, line_height: float, min_height: float) -> float:
    lines = math.ceil(len(text) / max(1, chars_per_line))
    return max(min_height, lines * line_height)


def estimate_height(block: ContentBlock, calibration: HeightCalibration = DEFAULT_CALIBRATION) -> float:
    """
    Predicted rendered height of one block, in inches.

    Estimates only: no font metrics, O(1) per block. The page budget leaves
    headroom for the error.
    """
    c = calibration
    if isinstance(block, ParagraphBlock):
        return _wrapped_text_height(
            block.text, c.paragraph_chars_per_line, c.paragraph_line_height, c.paragraph_min_height
        )
    if isinstance(block, (BulletsBlock, NumberedBlock)):
        return len(block.items) * c.list_item_height
    if isinstance(block, CodeBlock):
        height = min(len(block.lines) * c.code_line_height + 2 * c.code_padding, c.code_max_height)
        return height + c.caption_height if block.caption else height
    if isinstance(block, TableBlock):
        height = (len(block.rows) + 1) * c.table_row_height
        return height + c.caption_height if block.caption else height
    if isinstance(block, QuoteBlock):
        text_height = _wrapped_text_height(
            block.text, c.quote_chars_per_line, c.quote_line_height, c.quote_min_height
        )
        return text_height + (c.quote_author_height if block.author else c.quote_plain_height)
    raise TypeError(f"not a content block: {type(block).__name__}")


def estimate_stack_height(blocks: Iterable[ContentBlock], settings: PaginationSettings = DEFAULT_SETTINGS) -> float:
    """Sum of block heights plus spacing between consecutive blocks."""
    total = 0.0
    for i, block in enumerate(blocks):
        if i > 0:
            total += settings.block_spacing
        total += estimate_height(block, settings.calibration)
    return total
