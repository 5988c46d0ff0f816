from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from slidefit.dsl.model import Presentation


class DecodeErrorKind(str, Enum):
    UNPARSEABLE = "UNPARSEABLE"
    UNRECOGNIZED_SHAPE = "UNRECOGNIZED_SHAPE"
    EMPTY_PRESENTATION = "EMPTY_PRESENTATION"
    NO_VALID_SLIDES = "NO_VALID_SLIDES"
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"


@dataclass(frozen=True)
class DecodeError:
    kind: DecodeErrorKind
    message: str
    details: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "code": self.kind.value,
            "details": self.details,
        }


class PresentationDecodeError(Exception):
    def __init__(self, error: DecodeError):
        self.error = error
        super().__init__(f"{error.kind.value}: {error.message}")


@dataclass(frozen=True)
class DecodeResult:
    """Either a presentation or a DecodeError, never both."""

    presentation: Optional[Presentation] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.presentation is not None

    def unwrap(self) -> Presentation:
        if self.error is not None:
            raise PresentationDecodeError(self.error)
        if self.presentation is None:
            raise PresentationDecodeError(
                DecodeError(DecodeErrorKind.NO_VALID_SLIDES, "no presentation produced")
            )
        return self.presentation


def success(presentation: Presentation) -> DecodeResult:
    return DecodeResult(presentation=presentation)


def failure(kind: DecodeErrorKind, message: str, details: Any = None) -> DecodeResult:
    return DecodeResult(error=DecodeError(kind=kind, message=message, details=details))
