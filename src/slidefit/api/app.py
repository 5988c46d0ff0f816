from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field, model_validator

from slidefit.deck.assembly import build_presentation
from slidefit.deck.pptx_builder import build_pptx
from slidefit.dsl.decoder import decode, decode_strict
from slidefit.dsl.errors import DecodeResult
from slidefit.dsl.limits import PaginationSettings
from slidefit.dsl.model import slide_to_dict

logger = logging.getLogger(__name__)


class SlidesDecodeRequest(BaseModel):
    raw: str = Field(..., min_length=1)
    strict: bool = False
    paginate: bool = True


class SlidesDecodeResponse(BaseModel):
    slides: List[Dict[str, Any]]
    slide_count: int


class SlidesPptxRequest(BaseModel):
    raw: Optional[str] = None
    presentation: Optional[Dict[str, Any]] = None
    filename: Optional[str] = None
    strict: bool = False

    @model_validator(mode="after")
    def _one_source(self) -> "SlidesPptxRequest":
        if not (self.raw and self.raw.strip()) and self.presentation is None:
            raise ValueError("either 'raw' or 'presentation' is required")
        return self


class SlidesPptxResponse(BaseModel):
    path: str
    filename: str
    size_bytes: int
    slide_count: int


app = FastAPI(title="Slidefit API", version="0.1.0")


@app.get("/healthz")
def healthz() -> Dict[str, str]:
    return {"status": "ok"}


def _decode_request(raw: str, *, strict: bool, paginate: bool, settings: PaginationSettings) -> DecodeResult:
    if paginate:
        return build_presentation(raw, settings, strict=strict)
    return decode_strict(raw) if strict else decode(raw)


@app.post("/slides/decode", response_model=SlidesDecodeResponse)
def slides_decode(req: SlidesDecodeRequest):
    settings = PaginationSettings.from_env()
    result = _decode_request(req.raw, strict=req.strict, paginate=req.paginate, settings=settings)
    if not result.ok:
        return JSONResponse(status_code=422, content=result.error.to_dict())

    slides = [slide_to_dict(s) for s in result.unwrap().slides]
    return SlidesDecodeResponse(slides=slides, slide_count=len(slides))


@app.post("/slides/pptx", response_model=SlidesPptxResponse)
def slides_pptx(req: SlidesPptxRequest, download: int = 0):
    raw = req.raw if req.raw and req.raw.strip() else json.dumps(req.presentation, ensure_ascii=False)
    settings = PaginationSettings.from_env()
    result = build_presentation(raw, settings, strict=req.strict)
    if not result.ok:
        return JSONResponse(status_code=422, content=result.error.to_dict())

    presentation = result.unwrap()
    try:
        pptx_output_dir = os.environ.get("PPTX_OUTPUT_DIR", "out/decks")
        out_path = build_pptx(
            presentation,
            out_dir=pptx_output_dir,
            filename=req.filename,
            settings=settings,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("pptx build failed")
        raise HTTPException(status_code=500, detail=f"PPTX build failed: {e}") from e

    if download == 1:
        return FileResponse(
            path=str(out_path),
            filename=out_path.name,
            media_type="application/vnd.openxmlformats-officedocument.presentationml.presentation",
        )

    return SlidesPptxResponse(
        path=str(out_path),
        filename=out_path.name,
        size_bytes=out_path.stat().st_size,
        slide_count=len(presentation.slides),
    )
