#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from slidefit.deck.assembly import build_presentation
from slidefit.deck.pptx_builder import build_pptx
from slidefit.dsl.limits import PaginationSettings
from slidefit.dsl.model import presentation_to_dict


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"FAIL: input file not found: {path}")
    return p.read_text(encoding="utf-8")


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Decode raw model output into a paginated deck; optionally write JSON and PPTX."
    )
    ap.add_argument("--input", required=True, help="Raw model output file, or - for stdin")
    ap.add_argument("--out-json", default="", help="Write the paginated deck JSON here")
    ap.add_argument("--pptx", action="store_true", help="Also render a .pptx")
    ap.add_argument("--out-dir", default="out/decks", help="PPTX output directory")
    ap.add_argument("--filename", default=None, help="PPTX filename (default: slug_sha10.pptx)")
    ap.add_argument("--strict", action="store_true", help="Reject input that violates the schema")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = PaginationSettings.from_env()
    result = build_presentation(_read_input(args.input), settings, strict=args.strict)
    if not result.ok:
        print(f"FAIL: {result.error.kind.value}: {result.error.message}")
        if result.error.details:
            print(json.dumps(result.error.details, ensure_ascii=False, indent=2))
        raise SystemExit(1)

    presentation = result.unwrap()
    print(f"PASS: decoded {len(presentation)} slides")

    if args.out_json:
        out = Path(args.out_json)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(
            json.dumps(presentation_to_dict(presentation), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        print(f"PASS: wrote {out}")

    if args.pptx:
        path = build_pptx(presentation, out_dir=args.out_dir, filename=args.filename, settings=settings)
        print(f"PASS: wrote {path} ({path.stat().st_size} bytes)")


if __name__ == "__main__":
    main()
