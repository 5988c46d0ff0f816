from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from slidefit.dsl.limits import DEFAULT_LIMITS

_L = DEFAULT_LIMITS


class ParagraphBlockModel(BaseModel):
    type: Literal["paragraph"]
    text: str = Field(..., min_length=1, max_length=_L.max_paragraph_chars)
    emphasis: Optional[Literal["normal", "highlight", "muted"]] = None


class BulletsBlockModel(BaseModel):
    type: Literal["bullets"]
    items: List[Annotated[str, Field(min_length=1, max_length=_L.max_list_item_chars)]] = Field(
        ..., min_length=1, max_length=_L.max_list_items
    )


class NumberedBlockModel(BaseModel):
    type: Literal["numbered"]
    items: List[Annotated[str, Field(min_length=1, max_length=_L.max_list_item_chars)]] = Field(
        ..., min_length=1, max_length=_L.max_list_items
    )


class CodeBlockModel(BaseModel):
    type: Literal["code"]
    language: str = Field(..., min_length=1)
    lines: List[str] = Field(..., min_length=1, max_length=_L.max_code_lines)
    caption: Optional[str] = None


class TableBlockModel(BaseModel):
    type: Literal["table"]
    headers: List[str] = Field(..., min_length=1, max_length=_L.max_table_columns)
    rows: List[List[str]] = Field(..., min_length=1, max_length=_L.max_table_rows)
    caption: Optional[str] = None


class QuoteBlockModel(BaseModel):
    type: Literal["quote"]
    text: str = Field(..., min_length=1, max_length=_L.max_quote_chars)
    author: Optional[str] = None


ContentBlockModel = Annotated[
    Union[
        ParagraphBlockModel,
        BulletsBlockModel,
        NumberedBlockModel,
        CodeBlockModel,
        TableBlockModel,
        QuoteBlockModel,
    ],
    Field(discriminator="type"),
]


class SlideModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    layout: Literal["title-only", "title-content", "two-column", "section", "comparison"]
    title: Optional[str] = Field(None, max_length=_L.max_title_chars)
    subtitle: Optional[str] = Field(None, max_length=_L.max_subtitle_chars)
    content: Optional[List[ContentBlockModel]] = Field(None, max_length=_L.max_blocks_per_slide)
    left_content: Optional[List[ContentBlockModel]] = Field(
        None, alias="leftContent", max_length=_L.max_blocks_per_column
    )
    right_content: Optional[List[ContentBlockModel]] = Field(
        None, alias="rightContent", max_length=_L.max_blocks_per_column
    )
    notes: Optional[str] = None


class PresentationModel(BaseModel):
    slides: List[SlideModel] = Field(..., min_length=1)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def _format_errors(exc: ValidationError) -> List[str]:
    out: List[str] = []
    for err in exc.errors():
        path = ".".join(str(p) for p in err.get("loc", ()))
        out.append(f"{path}: {err.get('msg', 'invalid')}")
    return out


def validate_presentation(data: Any) -> Tuple[Optional[PresentationModel], List[str]]:
    """Strict validation. Returns (model, []) or (None, ["path: message", ...])."""
    try:
        return PresentationModel.model_validate(data), []
    except ValidationError as exc:
        return None, _format_errors(exc)
