"""Convert question spreadsheets into the JSON question bank."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from civicsflash import filework

logger = logging.getLogger(__name__)


def merge_categories(sheets: Sequence[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Concatenate category records, merging categories with the same name."""

    merged: Dict[str, List[Dict[str, Any]]] = {}
    for categories in sheets:
        for category in categories:
            merged.setdefault(category["name"], []).extend(category["questions"])
    return [{"name": name, "questions": questions} for name, questions in merged.items()]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the civics question bank from .xlsx or .csv spreadsheets."
    )
    parser.add_argument(
        "sheets",
        nargs="+",
        type=Path,
        help="Spreadsheets with Category, ID, Question and Answers columns.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=filework.BANK_FILE,
        help=f"Bank file to write (defaults to {filework.BANK_FILE}).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be written without touching the bank file.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    categories = merge_categories([filework.import_from_spreadsheet(path) for path in args.sheets])
    total = sum(len(category["questions"]) for category in categories)

    if args.dry_run:
        print(f"Would write {total} question(s) in {len(categories)} categor(ies) to {args.output}")
        return 0

    filework.write_raw_bank(categories, args.output)
    print(f"Wrote {total} question(s) in {len(categories)} categor(ies) to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
