from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
import re
from typing import List, Optional, Sequence, Tuple

from pptx import Presentation as PptxPresentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_AUTO_SIZE, PP_ALIGN
from pptx.util import Inches, Pt

from slidefit.deck.sizing import estimate_height
from slidefit.dsl.limits import DEFAULT_SETTINGS, PaginationSettings
from slidefit.dsl.model import (
    LAYOUT_COMPARISON,
    LAYOUT_SECTION,
    LAYOUT_TITLE_ONLY,
    LAYOUT_TWO_COLUMN,
    BulletsBlock,
    CodeBlock,
    ContentBlock,
    NumberedBlock,
    ParagraphBlock,
    Presentation,
    QuoteBlock,
    Slide,
    TableBlock,
    presentation_to_dict,
)

_KEYNOTE_SAFE = str(os.environ.get("PPTX_KEYNOTE_SAFE") or "").strip().lower() in {"1", "true", "yes", "on"}

FONT_NAME = "Arial" if _KEYNOTE_SAFE else "Calibri"
CODE_FONT_NAME = "Courier New" if _KEYNOTE_SAFE else "Consolas"

# Geometry the height estimator is calibrated for (inches).
SLIDE_WIDTH_IN = 10.0
SLIDE_HEIGHT_IN = 5.625
MARGIN_IN = 0.5
TITLE_TOP_IN = 0.35
TITLE_HEIGHT_IN = 0.7
CONTENT_TOP_IN = 1.3
CONTENT_BOTTOM_IN = 5.2
COLUMN_GAP_IN = 0.3
HEADER_BAND_IN = 1.1

TITLE_FONT_SIZE_PT = 26
COVER_TITLE_FONT_SIZE_PT = 40
SECTION_TITLE_FONT_SIZE_PT = 44
SUBTITLE_FONT_SIZE_PT = 20
PARAGRAPH_FONT_SIZE_PT = 16
LIST_FONT_SIZE_PT = 15
CODE_FONT_SIZE_PT = 8
TABLE_HEADER_FONT_SIZE_PT = 12
TABLE_BODY_FONT_SIZE_PT = 11
QUOTE_FONT_SIZE_PT = 14
CAPTION_FONT_SIZE_PT = 9

PRIMARY = RGBColor(0x25, 0x63, 0xEB)
SECONDARY = RGBColor(0x63, 0x66, 0xF1)
TEXT = RGBColor(0x1F, 0x29, 0x37)
TEXT_MUTED = RGBColor(0x6B, 0x72, 0x80)
BACKGROUND_ALT = RGBColor(0xEF, 0xF6, 0xFF)
BACKGROUND_CODE = RGBColor(0xF3, 0xF4, 0xF6)
WHITE = RGBColor(0xFF, 0xFF, 0xFF)


def _slugify(value: str) -> str:
    normalized = re.sub(r"[^A-Za-z0-9._-]+", "_", (value or "").strip())
    normalized = normalized.strip("._-")
    return normalized or "slides"


def reconcile_row(row: Sequence[str], width: int) -> List[str]:
    """Pad or truncate a table row to the header width."""
    cells = list(row[:width])
    return cells + [""] * (width - len(cells))


# -----------------------------
# Shape helpers
# -----------------------------
def _add_text(
    slide,
    text: str,
    left: float,
    top: float,
    width: float,
    height: float,
    *,
    size: int,
    color: RGBColor = TEXT,
    bold: bool = False,
    italic: bool = False,
    font: str = FONT_NAME,
    align=PP_ALIGN.LEFT,
):
    box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
    tf = box.text_frame
    tf.clear()
    tf.word_wrap = True
    tf.auto_size = MSO_AUTO_SIZE.NONE
    lines = text.split("\n") if text else [""]
    for i, line in enumerate(lines):
        p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
        p.text = line
        p.alignment = align
        for run in p.runs:
            run.font.name = font
            run.font.size = Pt(size)
            run.font.bold = bold
            run.font.italic = italic
            run.font.color.rgb = color
    return box


def _add_rect(slide, left: float, top: float, width: float, height: float, color: RGBColor):
    shape = slide.shapes.add_shape(
        MSO_SHAPE.RECTANGLE, Inches(left), Inches(top), Inches(width), Inches(height)
    )
    shape.fill.solid()
    shape.fill.fore_color.rgb = color
    shape.line.fill.background()
    return shape


def _fill_background(slide, color: RGBColor) -> None:
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = color


# -----------------------------
# Content blocks
# -----------------------------
def _add_block(slide, block: ContentBlock, x: float, y: float, w: float, settings: PaginationSettings) -> float:
    height = estimate_height(block, settings.calibration)
    cal = settings.calibration

    if isinstance(block, ParagraphBlock):
        color = {"highlight": PRIMARY, "muted": TEXT_MUTED}.get(block.emphasis or "", TEXT)
        _add_text(slide, block.text, x, y, w, height, size=PARAGRAPH_FONT_SIZE_PT, color=color)

    elif isinstance(block, (BulletsBlock, NumberedBlock)):
        for i, item in enumerate(block.items):
            marker = "•" if isinstance(block, BulletsBlock) else f"{i + 1}."
            item_y = y + i * cal.list_item_height
            _add_text(slide, marker, x, item_y, 0.35, cal.list_item_height,
                      size=LIST_FONT_SIZE_PT, color=PRIMARY, bold=True)
            _add_text(slide, item, x + 0.35, item_y, w - 0.35, cal.list_item_height, size=LIST_FONT_SIZE_PT)

    elif isinstance(block, CodeBlock):
        box_h = height - cal.caption_height if block.caption else height
        _add_rect(slide, x, y, w, box_h, BACKGROUND_CODE)
        _add_text(slide, block.language.upper(), x + w - 0.8, y + 0.03, 0.7, 0.18,
                  size=7, color=TEXT_MUTED, font=CODE_FONT_NAME, align=PP_ALIGN.RIGHT)
        pad = cal.code_padding
        _add_text(slide, "\n".join(block.lines), x + pad, y + pad, w - 2 * pad, max(0.1, box_h - 2 * pad),
                  size=CODE_FONT_SIZE_PT, font=CODE_FONT_NAME)
        if block.caption:
            _add_text(slide, block.caption, x, y + box_h + 0.05, w, 0.2,
                      size=CAPTION_FONT_SIZE_PT, color=TEXT_MUTED, align=PP_ALIGN.CENTER)

    elif isinstance(block, TableBlock):
        n_cols = len(block.headers)
        n_rows = len(block.rows) + 1
        table_h = n_rows * cal.table_row_height
        table = slide.shapes.add_table(n_rows, n_cols, Inches(x), Inches(y), Inches(w), Inches(table_h)).table
        grid = [list(block.headers)] + [reconcile_row(r, n_cols) for r in block.rows]
        for r, row in enumerate(grid):
            for c, value in enumerate(row):
                cell = table.cell(r, c)
                cell.text = value
                for p in cell.text_frame.paragraphs:
                    p.alignment = PP_ALIGN.CENTER
                    for run in p.runs:
                        run.font.name = FONT_NAME
                        run.font.size = Pt(TABLE_HEADER_FONT_SIZE_PT if r == 0 else TABLE_BODY_FONT_SIZE_PT)
                        run.font.bold = r == 0
                        run.font.color.rgb = WHITE if r == 0 else TEXT
                if r == 0:
                    cell.fill.solid()
                    cell.fill.fore_color.rgb = PRIMARY
        if block.caption:
            _add_text(slide, block.caption, x, y + table_h + 0.05, w, 0.2,
                      size=CAPTION_FONT_SIZE_PT + 1, color=TEXT_MUTED, align=PP_ALIGN.CENTER)

    elif isinstance(block, QuoteBlock):
        _add_rect(slide, x, y, 0.06, height, SECONDARY)
        author_h = cal.quote_author_height if block.author else cal.quote_plain_height
        _add_text(slide, block.text, x + 0.2, y + 0.05, w - 0.3, max(0.3, height - author_h),
                  size=QUOTE_FONT_SIZE_PT, italic=True)
        if block.author:
            _add_text(slide, f"- {block.author}", x + 0.2, y + height - author_h, w - 0.3, 0.25,
                      size=12, color=TEXT_MUTED, align=PP_ALIGN.RIGHT)

    else:
        raise TypeError(f"not a content block: {type(block).__name__}")

    return height


def _add_blocks(slide, blocks: Sequence[ContentBlock], x: float, y: float, w: float,
                settings: PaginationSettings) -> None:
    current = y
    for i, block in enumerate(blocks):
        if i > 0:
            current += settings.block_spacing
        current += _add_block(slide, block, x, current, w, settings)


# -----------------------------
# Layouts
# -----------------------------
def _header(slide, title: Optional[str]) -> None:
    _add_rect(slide, 0, 0, SLIDE_WIDTH_IN, HEADER_BAND_IN, BACKGROUND_ALT)
    _add_rect(slide, 0, 0, 0.08, HEADER_BAND_IN, PRIMARY)
    if title:
        _add_text(slide, title, MARGIN_IN, TITLE_TOP_IN, SLIDE_WIDTH_IN - 2 * MARGIN_IN, TITLE_HEIGHT_IN,
                  size=TITLE_FONT_SIZE_PT, bold=True)


def _columns() -> Tuple[Tuple[float, float], Tuple[float, float]]:
    col_w = (SLIDE_WIDTH_IN - 2 * MARGIN_IN - COLUMN_GAP_IN) / 2
    return (MARGIN_IN, col_w), (MARGIN_IN + col_w + COLUMN_GAP_IN, col_w)


def _render_slide(slide, data: Slide, settings: PaginationSettings) -> None:
    inner_w = SLIDE_WIDTH_IN - 2 * MARGIN_IN

    if data.layout == LAYOUT_TITLE_ONLY:
        _fill_background(slide, PRIMARY)
        if data.title:
            _add_text(slide, data.title, MARGIN_IN, 1.8, inner_w, 1.2,
                      size=COVER_TITLE_FONT_SIZE_PT, color=WHITE, bold=True, align=PP_ALIGN.CENTER)
        if data.subtitle:
            _add_text(slide, data.subtitle, MARGIN_IN, 3.2, inner_w, 0.6,
                      size=SUBTITLE_FONT_SIZE_PT, color=WHITE, align=PP_ALIGN.CENTER)

    elif data.layout == LAYOUT_SECTION:
        _fill_background(slide, BACKGROUND_ALT)
        if data.title:
            _add_text(slide, data.title, MARGIN_IN, 2.0, inner_w, 1.2,
                      size=SECTION_TITLE_FONT_SIZE_PT, color=PRIMARY, bold=True, align=PP_ALIGN.CENTER)
        _add_rect(slide, (SLIDE_WIDTH_IN - 2) / 2, 3.4, 2, 0.08, PRIMARY)
        if data.subtitle:
            _add_text(slide, data.subtitle, MARGIN_IN, 3.7, inner_w, 0.6,
                      size=18, color=TEXT_MUTED, align=PP_ALIGN.CENTER)
        if data.content:
            _add_blocks(slide, data.content, MARGIN_IN, 4.4, inner_w, settings)

    elif data.layout in (LAYOUT_TWO_COLUMN, LAYOUT_COMPARISON):
        _header(slide, data.title)
        (lx, cw), (rx, _) = _columns()
        top = CONTENT_TOP_IN
        if data.layout == LAYOUT_COMPARISON:
            _add_rect(slide, lx, top - 0.05, cw, 0.4, PRIMARY)
            _add_rect(slide, rx, top - 0.05, cw, 0.4, SECONDARY)
            top += 0.5
        if data.left_content:
            _add_blocks(slide, data.left_content, lx, top, cw, settings)
        if data.right_content:
            _add_blocks(slide, data.right_content, rx, top, cw, settings)

    else:
        _header(slide, data.title)
        if data.content:
            _add_blocks(slide, data.content, MARGIN_IN, CONTENT_TOP_IN, inner_w, settings)

    if data.notes:
        slide.notes_slide.notes_text_frame.text = data.notes


def build_pptx(
    presentation: Presentation,
    *,
    out_dir: str = "out",
    filename: Optional[str] = None,
    title: Optional[str] = None,
    settings: PaginationSettings = DEFAULT_SETTINGS,
) -> Path:
    if not presentation.slides:
        raise ValueError("presentation must contain at least one slide")

    deck_title = (title or presentation.slides[0].title or "").strip() or "Slides"

    if filename is not None:
        generated_name = filename
        if not generated_name.lower().endswith(".pptx"):
            generated_name += ".pptx"
    else:
        payload = json.dumps(presentation_to_dict(presentation), sort_keys=True, ensure_ascii=False,
                             separators=(",", ":"))
        sha = hashlib.sha1(payload.encode("utf-8")).hexdigest()[:10]
        generated_name = f"{_slugify(deck_title)}_{sha}.pptx"

    out_path = Path(out_dir) / generated_name
    out_path.parent.mkdir(parents=True, exist_ok=True)

    prs = PptxPresentation()
    prs.slide_width = Inches(SLIDE_WIDTH_IN)
    prs.slide_height = Inches(SLIDE_HEIGHT_IN)
    prs.core_properties.title = deck_title
    blank = prs.slide_layouts[6]

    for data in presentation.slides:
        slide = prs.slides.add_slide(blank)
        _render_slide(slide, data, settings)

    prs.save(str(out_path))
    return out_path
