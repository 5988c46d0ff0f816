from __future__ import annotations

import logging
from typing import Optional

from slidefit.deck.splitter import paginate_presentation
from slidefit.dsl.decoder import decode, decode_strict
from slidefit.dsl.errors import DecodeResult, success
from slidefit.dsl.limits import DEFAULT_SETTINGS, PaginationSettings

logger = logging.getLogger(__name__)


def build_presentation(
    raw: str,
    settings: Optional[PaginationSettings] = None,
    *,
    strict: bool = False,
) -> DecodeResult:
    """
    Decode raw model output and paginate every slide so its content fits the
    page budget. Decode errors are returned, not raised.
    """
    result = decode_strict(raw) if strict else decode(raw)
    if not result.ok:
        logger.warning("decode failed: %s (%s)", result.error.kind.value, result.error.message)
        return result

    return success(paginate_presentation(result.unwrap(), settings or DEFAULT_SETTINGS))
