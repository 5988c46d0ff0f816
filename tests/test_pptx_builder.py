import pytest
from pptx import Presentation as PptxPresentation
from pptx.util import Inches

from slidefit.deck.pptx_builder import build_pptx, reconcile_row
from slidefit.dsl.model import (
    BulletsBlock,
    CodeBlock,
    NumberedBlock,
    ParagraphBlock,
    Presentation,
    QuoteBlock,
    Slide,
    TableBlock,
)


def _deck():
    return Presentation(
        slides=(
            Slide(layout="title-only", title="Caching 101", subtitle="Patterns"),
            Slide(layout="section", title="Basics", subtitle="Part 1 of 2"),
            Slide(
                layout="title-content",
                title="Read-through",
                notes="Mention TTL jitter.",
                content=(
                    ParagraphBlock(text="The cache loads on miss.", emphasis="highlight"),
                    BulletsBlock(items=("hit", "miss")),
                    CodeBlock(language="python", lines=("value = cache.get(key)",), caption="lookup"),
                ),
            ),
            Slide(
                layout="title-content",
                title="Numbers",
                content=(
                    TableBlock(headers=("op", "p50", "p99"), rows=(("get", "1ms"), ("set", "2ms", "9ms", "x"))),
                    QuoteBlock(text="There are only two hard things.", author="Phil Karlton"),
                ),
            ),
            Slide(
                layout="two-column",
                title="Trade-offs",
                left_content=(NumberedBlock(items=("fast",)),),
                right_content=(QuoteBlock(text="stale"),),
            ),
            Slide(layout="comparison", title="Redis vs Memcached", left_content=(ParagraphBlock(text="a"),)),
        )
    )


def test_reconcile_row():
    assert reconcile_row(("a",), 3) == ["a", "", ""]
    assert reconcile_row(("a", "b", "c", "d"), 2) == ["a", "b"]
    assert reconcile_row((), 1) == [""]


def test_build_pptx_renders_every_slide(tmp_path):
    path = build_pptx(_deck(), out_dir=str(tmp_path))
    assert path.exists()
    assert path.suffix == ".pptx"
    assert path.name.startswith("Caching_101_")

    prs = PptxPresentation(str(path))
    assert prs.slide_width == Inches(10)
    assert len(prs.slides) == 6
    assert prs.slides[2].notes_slide.notes_text_frame.text == "Mention TTL jitter."

    texts = [shape.text_frame.text for shape in prs.slides[2].shapes if shape.has_text_frame]
    assert "Read-through" in texts
    assert "value = cache.get(key)" in texts

    tables = [shape.table for shape in prs.slides[3].shapes if shape.has_table]
    assert len(tables) == 1
    table = tables[0]
    assert len(table.columns) == 3
    assert len(table.rows) == 3
    assert table.cell(1, 2).text == ""
    assert table.cell(2, 2).text == "9ms"


def test_build_pptx_filename_is_deterministic(tmp_path):
    first = build_pptx(_deck(), out_dir=str(tmp_path))
    second = build_pptx(_deck(), out_dir=str(tmp_path))
    assert first == second

    other = build_pptx(Presentation(slides=(Slide(title="Caching 101"),)), out_dir=str(tmp_path))
    assert other != first


def test_build_pptx_explicit_filename(tmp_path):
    path = build_pptx(_deck(), out_dir=str(tmp_path), filename="talk")
    assert path.name == "talk.pptx"
    assert build_pptx(_deck(), out_dir=str(tmp_path), filename="b.PPTX").name == "b.PPTX"


def test_build_pptx_rejects_empty(tmp_path):
    with pytest.raises(ValueError):
        build_pptx(Presentation(slides=()), out_dir=str(tmp_path))
