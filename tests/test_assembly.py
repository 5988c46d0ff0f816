import json

from slidefit.deck.assembly import build_presentation
from slidefit.dsl.errors import DecodeErrorKind
from slidefit.dsl.limits import DEFAULT_SETTINGS, ContentLimits, PaginationSettings
from slidefit.dsl.model import presentation_to_dict


RAW_DECK = """```json
{
  "slides": [
    {"layout": "title-only", "title": "Rust for Pythonistas", "subtitle": "A tour"},
    {"layout": "title-content", "title": "Ownership", "content": [
      {"type": "paragraph", "text": "Every value has exactly one owner."},
      {"type": "bullets", "items": ["move", "borrow", "clone", "copy", "drop", "lifetimes", "Rc", "Arc"]},
      {"type": "code", "lang": "rust", "code": "fn main() {\\n    let s = String::new();\\n}"},
      {"type": "table", "text": "| Py | Rust |\\n|---|---|\\n| list | Vec |\\n| dict | HashMap |"},
      {"type": "chart", "data": [1, 2, 3]},
    ]},
    {"layout": "two-column", "title": "Compare", "leftContent": [{"type": "bullets", "items": ["GC"]}],
     "rightContent": [{"type": "bullets", "items": ["RAII"]}]},
    {"layout": "title-content", "title": "Truncat
"""


def test_build_presentation_end_to_end():
    result = build_presentation(RAW_DECK)
    assert result.ok
    slides = result.presentation.slides
    titles = [s.title for s in slides]
    assert titles[0] == "Rust for Pythonistas"
    assert titles[-1] == "Compare"
    assert "Truncat" not in " ".join(t or "" for t in titles)

    ownership = [s for s in slides if (s.title or "").startswith("Ownership")]
    assert len(ownership) >= 2
    kinds = [b.type for s in ownership for b in s.content]
    assert kinds == ["paragraph", "bullets", "bullets", "code", "table"]
    assert all(s.title.endswith(f"/{len(ownership)})") for s in ownership)


def test_build_presentation_returns_errors():
    result = build_presentation("I could not generate slides, sorry.")
    assert not result.ok
    assert result.error.kind == DecodeErrorKind.UNPARSEABLE


def test_build_presentation_strict_mode():
    raw = json.dumps({"slides": [{"layout": "title-content", "title": "A", "content": [{"type": "chart"}]}]})
    assert build_presentation(raw, strict=True).error.kind == DecodeErrorKind.SCHEMA_VIOLATION
    assert build_presentation(raw).ok


def test_build_presentation_respects_settings():
    raw = json.dumps(
        {"slides": [{"title": "L", "content": [{"type": "bullets", "items": [str(i) for i in range(6)]}]}]}
    )
    assert len(build_presentation(raw, DEFAULT_SETTINGS).presentation) == 1

    tight = PaginationSettings(limits=ContentLimits(max_list_items=2))
    out = build_presentation(raw, tight).presentation
    assert len(out) == 1
    assert [len(b.items) for b in out.slides[0].content] == [2, 2, 2]


def test_wire_form_uses_camel_case_keys():
    result = build_presentation(RAW_DECK)
    wire = presentation_to_dict(result.presentation)
    compare = [s for s in wire["slides"] if s.get("title") == "Compare"][0]
    assert "leftContent" in compare and "rightContent" in compare
    assert "content" not in compare


def test_build_presentation_survives_deep_nesting():
    raw = '{"slides":[{"title":"A","notes":' + "[" * 5000 + "]" * 5000 + "}]}"
    result = build_presentation(raw)
    assert result.error.kind == DecodeErrorKind.UNPARSEABLE
