#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict

from slidefit.deck.checks import check_pagination
from slidefit.dsl.decoder import decode
from slidefit.dsl.limits import PaginationSettings


def _load_json(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"FAIL: deck file not found: {path}")
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except Exception as exc:
        raise SystemExit(f"FAIL: invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SystemExit("FAIL: deck root must be a JSON object")
    return payload


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Validate a paginated deck: multi-block content slides stay within the page budget."
    )
    ap.add_argument("--deck-json", required=True, help="Path to a deck JSON ({slides: [...]})")
    ap.add_argument("--page-budget", type=float, default=None, help="Override page budget (inches)")
    args = ap.parse_args()

    deck = _load_json(args.deck_json)
    result = decode(json.dumps(deck, ensure_ascii=False))
    if not result.ok:
        raise SystemExit(f"FAIL: {result.error.kind.value}: {result.error.message}")

    report = check_pagination(result.unwrap(), PaginationSettings.from_env(), args.page_budget)
    if not report.ok:
        print("FAIL")
        for err in report.errors:
            print(f"- {err}")
        raise SystemExit(1)

    print("PASS")
    print(f"- slides: {report.slides}")
    print(f"- page_budget: {report.page_budget:.2f}")
    print(f"- single_block_over_budget: {report.single_block_over_budget}")
    print(f"- merged_short_tails: {report.merged_short_tails}")


if __name__ == "__main__":
    main()
