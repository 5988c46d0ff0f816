from slidefit.deck.checks import check_pagination
from slidefit.deck.splitter import paginate_presentation
from slidefit.dsl.model import BulletsBlock, CodeBlock, ParagraphBlock, Presentation, Slide


def test_empty_content_slide_passes(settings):
    deck = Presentation(slides=(Slide(title="Agenda", content=()), Slide(title="No content")))
    report = check_pagination(paginate_presentation(deck, settings), settings)
    assert report.ok
    assert report.slides == 2


def test_paginated_deck_passes(settings):
    slide = Slide(
        title="Long",
        content=tuple(BulletsBlock(items=(f"{i}-a", f"{i}-b", f"{i}-c")) for i in range(9))
        + (ParagraphBlock(text="x" * 800), ParagraphBlock(text="tail")),
    )
    report = check_pagination(paginate_presentation(Presentation(slides=(slide,)), settings), settings)
    assert report.ok
    assert report.merged_short_tails == 1


def test_single_oversized_block_is_counted(settings):
    deck = Presentation(slides=(Slide(title="Code", content=(CodeBlock(language="c", lines=("x;",) * 40),)),))
    report = check_pagination(deck, settings, page_budget=2.0)
    assert report.ok
    assert report.single_block_over_budget == 1


def test_overflowing_slide_is_reported(settings):
    deck = Presentation(
        slides=(Slide(title="Crowded", content=tuple(ParagraphBlock(text="x" * 400) for _ in range(3))),)
    )
    report = check_pagination(deck, settings)
    assert not report.ok
    assert report.errors[0].startswith("slide 1:")


def test_column_layouts_are_skipped(settings):
    heavy = tuple(ParagraphBlock(text="x" * 800) for _ in range(3))
    deck = Presentation(slides=(Slide(layout="two-column", left_content=heavy, right_content=heavy),))
    assert check_pagination(deck, settings).ok
