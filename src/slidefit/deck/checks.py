from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from slidefit.deck.sizing import estimate_stack_height
from slidefit.dsl.limits import DEFAULT_SETTINGS, PaginationSettings
from slidefit.dsl.model import LAYOUT_SECTION, LAYOUT_TITLE_ONLY, ContentBlock, Presentation


@dataclass
class PaginationReport:
    slides: int
    page_budget: float
    errors: List[str] = field(default_factory=list)
    single_block_over_budget: int = 0
    merged_short_tails: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_merged_tail(blocks: Sequence[ContentBlock], settings: PaginationSettings, budget: float) -> bool:
    """True when the overflow is a short trailing run folded back by the paginator."""
    for cut in range(len(blocks) - 1, 0, -1):
        if estimate_stack_height(blocks[:cut], settings) <= budget:
            return estimate_stack_height(blocks[cut:], settings) < settings.min_page_height
    return False


def check_pagination(
    presentation: Presentation,
    settings: PaginationSettings = DEFAULT_SETTINGS,
    page_budget: Optional[float] = None,
) -> PaginationReport:
    """
    Check a paginated deck against the page budget.

    Slides the paginator leaves alone (title-only, section, column layouts,
    missing or empty content) are skipped. A single block taller than the page
    and a merged short tail are counted, not reported as errors.
    """
    budget = settings.page_budget if page_budget is None else page_budget
    report = PaginationReport(slides=len(presentation.slides), page_budget=budget)

    for slide_idx, slide in enumerate(presentation.slides, start=1):
        if slide.layout in (LAYOUT_TITLE_ONLY, LAYOUT_SECTION) or slide.is_column_layout:
            continue
        if not slide.content:
            continue
        height = estimate_stack_height(slide.content, settings)
        if height <= budget:
            continue
        if len(slide.content) == 1:
            report.single_block_over_budget += 1
            continue
        if _is_merged_tail(slide.content, settings, budget):
            report.merged_short_tails += 1
            continue
        report.errors.append(
            f"slide {slide_idx}: {height:.2f}in exceeds budget {budget:.2f}in ({slide.title or ''})"
        )

    return report
