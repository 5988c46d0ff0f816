from __future__ import annotations

import os
from dataclasses import dataclass, field, replace


# -----------------------------
# Content-limit contract (advisory to the generator, enforced by the splitter)
# -----------------------------

@dataclass(frozen=True)
class ContentLimits:
    max_blocks_per_slide: int = 4
    max_blocks_per_column: int = 3
    max_title_chars: int = 100
    max_subtitle_chars: int = 150
    max_paragraph_chars: int = 300
    max_list_items: int = 6
    max_list_item_chars: int = 100
    max_code_lines: int = 15
    max_code_line_chars: int = 120
    max_table_columns: int = 5
    max_table_rows: int = 6
    max_quote_chars: int = 200


# -----------------------------
# Height calibration (inches, 10 x 5.625 canvas)
# -----------------------------

@dataclass(frozen=True)
class HeightCalibration:
    """
    Per-kind constants for the height estimator.

    Calibrated against the bundled pptx renderer: 16pt paragraphs, 15pt list
    items, 8pt code, 0.35in table rows. A different renderer needs its own
    numbers.
    """
    paragraph_chars_per_line: int = 50
    paragraph_line_height: float = 0.25
    paragraph_min_height: float = 0.4

    list_item_height: float = 0.35

    code_line_height: float = 0.16
    code_padding: float = 0.12
    code_max_height: float = 3.5

    table_row_height: float = 0.35

    caption_height: float = 0.3

    quote_chars_per_line: int = 45
    quote_line_height: float = 0.25
    quote_min_height: float = 0.5
    quote_author_height: float = 0.35
    quote_plain_height: float = 0.1


# Usable content area is 5.2 - 1.3 = 3.9in; the budget is widened to 4.2in
# because code blocks render at 8pt and rarely fill their estimate.
DEFAULT_PAGE_BUDGET = 4.2
DEFAULT_BLOCK_SPACING = 0.15
DEFAULT_MIN_PAGE_HEIGHT = 0.8


@dataclass(frozen=True)
class PaginationSettings:
    page_budget: float = DEFAULT_PAGE_BUDGET
    block_spacing: float = DEFAULT_BLOCK_SPACING
    min_page_height: float = DEFAULT_MIN_PAGE_HEIGHT
    calibration: HeightCalibration = field(default_factory=HeightCalibration)
    limits: ContentLimits = field(default_factory=ContentLimits)

    @classmethod
    def from_env(cls) -> "PaginationSettings":
        base = cls()
        limits = replace(
            base.limits,
            max_list_items=_env_int("SLIDEFIT_MAX_LIST_ITEMS", base.limits.max_list_items),
            max_code_lines=_env_int("SLIDEFIT_MAX_CODE_LINES", base.limits.max_code_lines),
            max_table_rows=_env_int("SLIDEFIT_MAX_TABLE_ROWS", base.limits.max_table_rows),
        )
        return replace(
            base,
            page_budget=_env_float("SLIDEFIT_PAGE_BUDGET", base.page_budget),
            block_spacing=_env_float("SLIDEFIT_BLOCK_SPACING", base.block_spacing),
            min_page_height=_env_float("SLIDEFIT_MIN_PAGE_HEIGHT", base.min_page_height),
            limits=limits,
        )


DEFAULT_LIMITS = ContentLimits()
DEFAULT_CALIBRATION = HeightCalibration()
DEFAULT_SETTINGS = PaginationSettings()


def _env_int(name: str, default: int) -> int:
    raw = str(os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = str(os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default
