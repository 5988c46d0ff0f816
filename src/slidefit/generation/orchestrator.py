from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from slidefit.deck.splitter import paginate_presentation
from slidefit.dsl.decoder import decode, decode_strict
from slidefit.dsl.limits import DEFAULT_SETTINGS, PaginationSettings
from slidefit.dsl.model import (
    LAYOUT_SECTION,
    LAYOUT_TITLE_CONTENT,
    LAYOUT_TITLE_ONLY,
    BulletsBlock,
    NumberedBlock,
    ParagraphBlock,
    Presentation,
    Slide,
)
from slidefit.generation.prompts import (
    LANGUAGE_EN,
    LANGUAGE_ZH,
    SUPPORTED_LANGUAGES,
    build_generation_prompt,
    build_repair_prompt,
    build_section_prompt,
)

logger = logging.getLogger(__name__)

# prompt, temperature, max_output_tokens -> completion text
LLMGenerateText = Callable[[str, float, int], str]

# talk length (minutes) -> (min, max) total slides
DURATION_TO_SLIDES: Dict[int, Tuple[int, int]] = {
    5: (5, 7),
    10: (8, 11),
    15: (12, 15),
    20: (16, 20),
    30: (22, 28),
}
_FIXED_SLIDES = 3  # cover + contents + thank-you

GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 4096
REPAIR_MAX_TOKENS = 4096


@dataclass(frozen=True)
class DeckText:
    """Fixed slide texts for one output language."""

    cover_subtitle: str
    contents: str
    part: str
    thanks: str
    thanks_subtitle: str
    point_text: str
    point_items: Tuple[str, ...]
    deep_dive: str
    deep_dive_items: Tuple[str, ...]


DECK_TEXT: Dict[str, DeckText] = {
    LANGUAGE_EN: DeckText(
        cover_subtitle="Professional Presentation",
        contents="Contents",
        part="Part {index} of {total}",
        thanks="Thank You",
        thanks_subtitle="Questions & Discussion",
        point_text="{point} is a key component of {section}, essential for understanding the overall concept.",
        point_items=("Core concept analysis", "Key elements explained", "Practical applications"),
        deep_dive="{section} - Deep Dive",
        deep_dive_items=("Detailed analysis", "Case study", "Key insights", "Summary points"),
    ),
    LANGUAGE_ZH: DeckText(
        cover_subtitle="专业演示文稿",
        contents="目录",
        part="第 {index} / {total} 部分",
        thanks="感谢聆听",
        thanks_subtitle="欢迎提问与交流",
        point_text="{point}是{section}的重要组成部分，对理解整体概念至关重要。",
        point_items=("核心概念解析", "关键要素说明", "实践应用建议"),
        deep_dive="{section} - 深入分析",
        deep_dive_items=("详细分析", "案例研究", "关键启示", "总结要点"),
    ),
}


def _texts(language: str) -> DeckText:
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"unsupported language: {language!r} (expected one of {SUPPORTED_LANGUAGES})")
    return DECK_TEXT[language]


@dataclass
class OutlineSection:
    title: str
    points: List[str] = field(default_factory=list)


def slides_per_section(duration: int, n_sections: int) -> int:
    low, high = DURATION_TO_SLIDES.get(duration, DURATION_TO_SLIDES[15])
    target_total = (low + high) // 2
    content_total = target_total - _FIXED_SLIDES
    return max(2, content_total // max(1, n_sections))


# -----------------------------
# Deterministic fallback
# -----------------------------
def fallback_section_slides(
    section: OutlineSection, target_count: int, language: str = LANGUAGE_EN
) -> List[Slide]:
    """
    Template slides used when the model output cannot be salvaged.
    One slide per outline point, padded with generic deep-dive slides.
    """
    t = _texts(language)
    slides: List[Slide] = []
    for point in section.points[: max(0, target_count)]:
        slides.append(
            Slide(
                layout=LAYOUT_TITLE_CONTENT,
                title=point,
                content=(
                    ParagraphBlock(text=t.point_text.format(point=point, section=section.title)),
                    BulletsBlock(items=t.point_items),
                ),
            )
        )

    while len(slides) < target_count:
        slides.append(
            Slide(
                layout=LAYOUT_TITLE_CONTENT,
                title=t.deep_dive.format(section=section.title),
                content=(BulletsBlock(items=t.deep_dive_items),),
            )
        )
    return slides


# -----------------------------
# Per-section generation
# -----------------------------
def _decode_completion(raw: str) -> Optional[Presentation]:
    result = decode_strict(raw)
    if result.ok:
        return result.presentation
    logger.info("strict decode failed (%s), trying lenient", result.error.kind.value)
    result = decode(raw)
    if result.ok:
        return result.presentation
    return None


def generate_section_slides(
    *,
    topic: str,
    section: OutlineSection,
    section_index: int,
    total_sections: int,
    slide_count: int,
    llm_generate_text: LLMGenerateText,
    resource_context: str = "",
    language: str = LANGUAGE_EN,
    settings: PaginationSettings = DEFAULT_SETTINGS,
) -> List[Slide]:
    t = _texts(language)
    divider = Slide(
        layout=LAYOUT_SECTION,
        title=section.title,
        subtitle=t.part.format(index=section_index, total=total_sections),
    )

    prompt = build_generation_prompt(
        build_section_prompt(
            topic=topic,
            section_title=section.title,
            points=section.points,
            section_index=section_index,
            total_sections=total_sections,
            slide_count=slide_count,
            resource_context=resource_context,
            language=language,
        ),
        settings.limits,
        language,
    )

    try:
        raw = llm_generate_text(prompt, GENERATION_TEMPERATURE, GENERATION_MAX_TOKENS)
        presentation = _decode_completion(raw)
        if presentation is None:
            fixed = llm_generate_text(build_repair_prompt(raw), 0.0, REPAIR_MAX_TOKENS)
            presentation = _decode_completion(fixed)
    except Exception:
        logger.exception("section generation failed: %s", section.title)
        presentation = None

    if presentation is not None:
        return [divider, *presentation.slides]

    logger.warning("using fallback slides for section %d: %s", section_index, section.title)
    return [divider, *fallback_section_slides(section, slide_count, language)]


def generate_presentation(
    *,
    topic: str,
    outline: Sequence[OutlineSection],
    llm_generate_text: LLMGenerateText,
    duration: int = 15,
    resource_context: str = "",
    language: str = LANGUAGE_EN,
    settings: PaginationSettings = DEFAULT_SETTINGS,
) -> Presentation:
    if not topic or not topic.strip():
        raise ValueError("topic must be a non-empty string")
    t = _texts(language)

    per_section = slides_per_section(duration, len(outline))
    slides: List[Slide] = [
        Slide(layout=LAYOUT_TITLE_ONLY, title=topic, subtitle=t.cover_subtitle),
    ]
    if outline:
        slides.append(
            Slide(
                layout=LAYOUT_TITLE_CONTENT,
                title=t.contents,
                content=(NumberedBlock(items=tuple(s.title for s in outline)),),
            )
        )

    for i, section in enumerate(outline, start=1):
        slides.extend(
            generate_section_slides(
                topic=topic,
                section=section,
                section_index=i,
                total_sections=len(outline),
                slide_count=per_section,
                llm_generate_text=llm_generate_text,
                resource_context=resource_context,
                language=language,
                settings=settings,
            )
        )

    slides.append(Slide(layout=LAYOUT_TITLE_ONLY, title=t.thanks, subtitle=t.thanks_subtitle))
    return paginate_presentation(Presentation(slides=tuple(slides)), settings)
