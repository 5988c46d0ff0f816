import pytest

from slidefit.deck.sizing import estimate_height, estimate_stack_height
from slidefit.dsl.limits import HeightCalibration
from slidefit.dsl.model import (
    BulletsBlock,
    CodeBlock,
    NumberedBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
)


def test_paragraph_height_grows_with_length():
    assert estimate_height(ParagraphBlock(text="short")) == pytest.approx(0.4)
    assert estimate_height(ParagraphBlock(text="")) == pytest.approx(0.4)
    assert estimate_height(ParagraphBlock(text="x" * 120)) == pytest.approx(0.75)


def test_list_height_per_item():
    assert estimate_height(BulletsBlock(items=("a", "b", "c"))) == pytest.approx(1.05)
    assert estimate_height(NumberedBlock(items=("a",))) == pytest.approx(0.35)


def test_code_height_is_capped():
    assert estimate_height(CodeBlock(language="py", lines=("x",) * 10)) == pytest.approx(1.84)
    assert estimate_height(CodeBlock(language="py", lines=("x",) * 40)) == pytest.approx(3.5)
    assert estimate_height(CodeBlock(language="py", lines=("x",) * 40, caption="c")) == pytest.approx(3.8)


def test_table_height_counts_header_row():
    table = TableBlock(headers=("a", "b"), rows=(("1", "2"), ("3", "4")))
    assert estimate_height(table) == pytest.approx(1.05)
    captioned = TableBlock(headers=("a",), rows=(("1",),), caption="c")
    assert estimate_height(captioned) == pytest.approx(1.0)


def test_quote_height_with_and_without_author():
    assert estimate_height(QuoteBlock(text="q" * 90)) == pytest.approx(0.6)
    assert estimate_height(QuoteBlock(text="q" * 90, author="A")) == pytest.approx(0.85)
    assert estimate_height(QuoteBlock(text="q" * 200)) == pytest.approx(1.35)


def test_custom_calibration():
    cal = HeightCalibration(list_item_height=0.5)
    assert estimate_height(BulletsBlock(items=("a", "b")), cal) == pytest.approx(1.0)


def test_unknown_block_raises():
    with pytest.raises(TypeError):
        estimate_height({"type": "paragraph", "text": "x"})


def test_stack_height_adds_spacing(settings):
    blocks = [BulletsBlock(items=("a",)), BulletsBlock(items=("b",)), BulletsBlock(items=("c",))]
    assert estimate_stack_height(blocks, settings) == pytest.approx(3 * 0.35 + 2 * 0.15)
    assert estimate_stack_height([], settings) == 0.0
