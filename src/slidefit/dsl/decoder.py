from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, List, Optional, Tuple

from slidefit.dsl.errors import DecodeErrorKind, DecodeResult, failure, success
from slidefit.dsl.model import LAYOUT_TITLE_CONTENT, LAYOUTS, Presentation, Slide
from slidefit.dsl.normalize import normalize_blocks
from slidefit.dsl.schema import validate_presentation

logger = logging.getLogger(__name__)

_SLIDES_MARKER_RE = re.compile(r'"slides"\s*:\s*\[')
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


# -----------------------------
# Textual repairs
# -----------------------------
def strip_code_fences(raw: str) -> str:
    cleaned = (raw or "").strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def fix_common_errors(text: str) -> str:
    """
    Drop trailing commas before } / ] and escape raw newline, carriage return
    and tab characters that appear inside string literals.
    """
    out: List[str] = []
    in_str = False
    esc = False
    n = len(text)

    for i, ch in enumerate(text):
        if in_str:
            if esc:
                esc = False
                out.append(ch)
            elif ch == "\\":
                esc = True
                out.append(ch)
            elif ch == '"':
                in_str = False
                out.append(ch)
            else:
                out.append(_CONTROL_ESCAPES.get(ch, ch))
            continue

        if ch == '"':
            in_str = True
            out.append(ch)
            continue
        if ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                continue
        out.append(ch)

    return "".join(out)


def _last_complete_element_end(text: str, start: int, wrapped: bool) -> int:
    """
    Scan from just inside an opening '[' and return the offset of the last '}'
    that closed a direct child object of that array, or -1. Also returns -1 when
    the structure is already balanced (nothing to repair). `wrapped` means the
    array sits inside an outer object whose brace precedes `start`.
    """
    bracket_depth = 1
    brace_depth = 0
    last_end = -1
    in_str = False
    esc = False

    for i in range(start, len(text)):
        ch = text[i]
        if esc:
            esc = False
            continue
        if ch == "\\":
            esc = True
            continue
        if ch == '"':
            in_str = not in_str
            continue
        if in_str:
            continue

        if ch == "{":
            brace_depth += 1
        elif ch == "}":
            brace_depth -= 1
            if brace_depth == 0 and bracket_depth == 1:
                last_end = i
        elif ch == "[":
            bracket_depth += 1
        elif ch == "]":
            bracket_depth -= 1

    if bracket_depth == 0 and brace_depth == (-1 if wrapped else 0):
        return -1
    return last_end


def outermost_bracketed(text: str) -> Optional[str]:
    """
    Substring from the first '{' or '[' that has a matching closer kind
    somewhere after it, up to the last such closer. Linear in len(text).
    """
    last_close = {"{": text.rfind("}"), "[": text.rfind("]")}
    for i, ch in enumerate(text):
        end = last_close.get(ch)
        if end is not None and end > i:
            return text[i : end + 1]
    return None


def repair_truncation(text: str) -> str:
    """
    Keep the complete slide objects of a response cut off mid-generation and
    close the array (and the outer object) after the last one. Returns the text
    unchanged when there is nothing to recover.
    """
    m = _SLIDES_MARKER_RE.search(text)
    if m is not None:
        last_end = _last_complete_element_end(text, m.end(), wrapped=True)
        closer = "]}"
    else:
        stripped = text.lstrip()
        if not stripped.startswith("["):
            return text
        offset = len(text) - len(stripped)
        last_end = _last_complete_element_end(text, offset + 1, wrapped=False)
        closer = "]"

    if last_end <= 0:
        return text

    logger.info("truncation repair: kept %d of %d chars", last_end + 1, len(text))
    return text[: last_end + 1] + closer


# -----------------------------
# Parse chain
# -----------------------------
def _loads(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


def _loads_with_fixups(text: str) -> Tuple[bool, Any]:
    ok, data = _loads(text)
    if ok:
        return ok, data
    return _loads(fix_common_errors(text))


def parse_tolerant(raw: str) -> Tuple[bool, Any, str]:
    """
    Run the repair chain. Returns (ok, data, first_error_message).
    """
    cleaned = strip_code_fences(raw)

    try:
        return True, json.loads(cleaned), ""
    except (ValueError, RecursionError) as exc:
        first_error = str(exc)

    ok, data = _loads(fix_common_errors(cleaned))
    if ok:
        logger.info("parsed after comma/control-character fixups")
        return True, data, first_error

    truncated = repair_truncation(cleaned)
    if truncated != cleaned:
        ok, data = _loads_with_fixups(truncated)
        if ok:
            return True, data, first_error

    outer = outermost_bracketed(cleaned)
    if outer is not None:
        extracted = repair_truncation(outer)
        ok, data = _loads_with_fixups(extracted)
        if ok:
            logger.info("parsed outermost bracketed substring (%d chars)", len(extracted))
            return True, data, first_error

    return False, None, first_error


def _parse_trusted(raw: str) -> Tuple[bool, Any, str]:
    cleaned = strip_code_fences(raw)
    try:
        return True, json.loads(cleaned), ""
    except (ValueError, RecursionError) as exc:
        first_error = str(exc)
    ok, data = _loads(fix_common_errors(cleaned))
    return ok, data, first_error


def _slides_array(data: Any) -> Tuple[Optional[list], Optional[DecodeResult]]:
    if isinstance(data, list):
        slides = data
    elif isinstance(data, dict) and "slides" in data:
        slides = data["slides"]
        if not isinstance(slides, list):
            return None, failure(DecodeErrorKind.UNRECOGNIZED_SHAPE, "slides must be an array")
    else:
        return None, failure(
            DecodeErrorKind.UNRECOGNIZED_SHAPE,
            "unrecognized JSON structure",
            "expected { slides: [...] } or a bare array",
        )
    if not slides:
        return None, failure(DecodeErrorKind.EMPTY_PRESENTATION, "slides array is empty")
    return slides, None


# -----------------------------
# Slide coercion
# -----------------------------
def coerce_slide(raw: Any) -> Optional[Slide]:
    """Best-effort slide construction. Only non-objects are rejected."""
    if not isinstance(raw, dict):
        return None

    layout = raw.get("layout")
    if not isinstance(layout, str) or layout not in LAYOUTS:
        layout = LAYOUT_TITLE_CONTENT

    def _text(key: str) -> Optional[str]:
        value = raw.get(key)
        return value if isinstance(value, str) else None

    return Slide(
        layout=layout,
        title=_text("title"),
        subtitle=_text("subtitle"),
        content=normalize_blocks(raw.get("content")),
        left_content=normalize_blocks(raw.get("leftContent")),
        right_content=normalize_blocks(raw.get("rightContent")),
        notes=_text("notes"),
    )


def _build(slides_raw: list) -> DecodeResult:
    slides: List[Slide] = []
    for idx, raw in enumerate(slides_raw, start=1):
        slide = coerce_slide(raw)
        if slide is None:
            logger.debug("skipped slide %d: not an object", idx)
            continue
        slides.append(slide)

    if not slides:
        return failure(
            DecodeErrorKind.NO_VALID_SLIDES,
            "no valid slides",
            "every slide element failed to parse",
        )
    return success(Presentation(slides=tuple(slides)))


def _decode_with(raw: str, parse: Callable[[str], Tuple[bool, Any, str]], strict: bool) -> DecodeResult:
    ok, data, first_error = parse(raw)
    if not ok:
        return failure(DecodeErrorKind.UNPARSEABLE, "JSON parse failed", first_error)

    slides_raw, err = _slides_array(data)
    if err is not None:
        return err

    if strict:
        model, errors = validate_presentation({"slides": slides_raw})
        if model is None:
            return failure(DecodeErrorKind.SCHEMA_VIOLATION, "schema validation failed", errors)
        slides_raw = model.to_wire()["slides"]

    return _build(slides_raw)


# -----------------------------
# Public API
# -----------------------------
def decode(raw: str) -> DecodeResult:
    """Lenient decode: full repair chain, best-effort slide and block coercion."""
    return _decode_with(raw, parse_tolerant, strict=False)


def decode_strict(raw: str) -> DecodeResult:
    """Strict decode for trusted input: no truncation salvage, schema enforced."""
    return _decode_with(raw, _parse_trusted, strict=True)
