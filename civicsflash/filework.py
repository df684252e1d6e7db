"""Utilities for reading the question bank and the settings file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Paths and constants
# ---------------------------------------------------------------------------
RES_ROOT = Path("res")
BANK_FILE = RES_ROOT / "questions.json"
STATE_ROOT = RES_ROOT / "state"
SETTINGS_FILE = STATE_ROOT / "settings.json"
SPREADSHEET_COLUMNS = ("Category", "ID", "Question", "Answers")
ANSWER_SEPARATOR = ";"

PathLike = Union[str, Path]


class BankUnavailable(Exception):
    """Raised when the question bank file is missing or unreadable."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _write_json(path: Path, payload: Any) -> None:
    _ensure_parent(path)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=4, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Question bank
# ---------------------------------------------------------------------------

def load_raw_bank(path: PathLike = BANK_FILE) -> List[Dict[str, Any]]:
    """Return the category records stored in the bank file at *path*.

    Only the outer shape is checked here; per-question validation happens
    when the records are turned into cards.
    """

    bank_path = Path(path)
    if not bank_path.exists():
        raise BankUnavailable(f"Question bank not found: {bank_path}")
    try:
        payload = _load_json(bank_path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BankUnavailable(f"Question bank {bank_path} is unreadable: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise BankUnavailable(f"Question bank {bank_path} must contain a JSON object")
    categories = payload.get("categories")
    if not isinstance(categories, list):
        raise BankUnavailable(f"Question bank {bank_path} has no 'categories' list")
    return categories


def write_raw_bank(categories: Sequence[Mapping[str, Any]], path: PathLike = BANK_FILE) -> Path:
    bank_path = Path(path)
    _write_json(bank_path, {"categories": [dict(category) for category in categories]})
    return bank_path


def _split_answers(value: Any) -> List[str]:
    if pd.isna(value):
        return []
    return [part.strip() for part in str(value).split(ANSWER_SEPARATOR) if part.strip()]


def _read_sheet(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_excel(path)


def import_from_spreadsheet(path: PathLike) -> List[Dict[str, Any]]:
    """Convert a question spreadsheet into bank category records.

    The sheet needs ``Category``, ``ID``, ``Question`` and ``Answers``
    columns; answers within a cell are separated by ``;``. Rows keep their
    order and categories are listed in order of first appearance. Reading
    stops at the first row without a question.
    """

    sheet_path = Path(path)
    if not sheet_path.exists():
        raise FileNotFoundError(f"Spreadsheet not found: {sheet_path}")

    frame = _read_sheet(sheet_path)
    missing = [column for column in SPREADSHEET_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"{sheet_path} is missing column(s): {', '.join(missing)}")

    categories: Dict[str, List[Dict[str, Any]]] = {}
    for _, row in frame.iterrows():
        question = row.get("Question")
        if pd.isna(question):
            break
        raw_id = row.get("ID")
        if pd.isna(raw_id):
            raise ValueError(f"Question {question!r} in {sheet_path} has no ID")
        category = "" if pd.isna(row.get("Category")) else str(row.get("Category")).strip()
        categories.setdefault(category, []).append(
            {
                "id": int(raw_id),
                "question": str(question).strip(),
                "answers": _split_answers(row.get("Answers")),
            }
        )

    logger.info(
        f"Imported {sum(len(q) for q in categories.values())} question(s) "
        f"in {len(categories)} categor(ies) from {sheet_path}"
    )
    return [{"name": name, "questions": questions} for name, questions in categories.items()]


# ---------------------------------------------------------------------------
# Settings store (JSON)
# ---------------------------------------------------------------------------

class JsonSettingsStore:
    """Settings store persisted as a flat JSON object on disk."""

    def __init__(self, path: PathLike = SETTINGS_FILE) -> None:
        self.path = Path(path)

    def _read(self) -> MutableMapping[str, Any]:
        if not self.path.exists():
            return {}
        payload = _load_json(self.path)
        if not isinstance(payload, MutableMapping):
            raise ValueError(f"Settings file {self.path} must contain a JSON object")
        return payload

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        payload = self._read()
        payload[key] = str(value)
        _write_json(self.path, payload)


__all__ = [
    "BANK_FILE",
    "BankUnavailable",
    "JsonSettingsStore",
    "SETTINGS_FILE",
    "import_from_spreadsheet",
    "load_raw_bank",
    "write_raw_bank",
]
