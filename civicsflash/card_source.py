"""Build the flat card bank from raw question data and user overrides."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from civicsflash import filework
from civicsflash.card import Card
from civicsflash.overrides import (
    OVERRIDE_ELIGIBLE_IDS,
    SettingsStore,
    current_overrides,
    resolve_answer,
)

logger = logging.getLogger(__name__)

CardLoader = Callable[[], List[Card]]


def _flatten(raw_bank: Sequence[Mapping[str, Any]]) -> List[Card]:
    cards: List[Card] = []
    for category in raw_bank:
        if not isinstance(category, Mapping):
            raise TypeError("category records must be mappings")
        name = category.get("name")
        questions = category.get("questions")
        if not isinstance(name, str) or not isinstance(questions, list):
            raise ValueError(f"malformed category record: {category!r}")
        cards.extend(Card.from_record(name, question) for question in questions)
    return cards


def drop_duplicates(cards: Sequence[Card]) -> List[Card]:
    unique: List[Card] = []
    seen: Dict[int, Card] = {}
    for card in cards:
        if card.id in seen:
            logger.warning(f"Dropping duplicate question id {card.id}: {card.question!r}")
            continue
        seen[card.id] = card
        unique.append(card)
    return unique


def apply_overrides(cards: Sequence[Card], overrides: Mapping[int, str]) -> List[Card]:
    """Replace the answers of location dependent cards.

    Eligible cards always end up with exactly one answer: the user value
    when one is set, the default placeholder otherwise.
    """

    return [
        card.with_answers([resolve_answer(card.id, overrides)])
        if card.id in OVERRIDE_ELIGIBLE_IDS
        else card
        for card in cards
    ]


def load_cards(
    raw_bank: Optional[Sequence[Mapping[str, Any]]],
    overrides: Optional[Mapping[int, str]] = None,
) -> List[Card]:
    """Flatten *raw_bank* into cards, applying *overrides*.

    A missing or malformed bank yields an empty list; callers show that as
    a "no content" state rather than an error.
    """

    if raw_bank is None:
        return []
    try:
        cards = _flatten(raw_bank)
    except (TypeError, ValueError) as exc:
        logger.warning(f"Question bank is malformed, continuing with no cards: {exc}")
        return []
    return apply_overrides(drop_duplicates(cards), overrides or {})


def load_bank(
    path: filework.PathLike = filework.BANK_FILE,
    store: Optional[SettingsStore] = None,
) -> List[Card]:
    """Read the bank file at *path* and apply the overrides held in *store*."""

    try:
        raw_bank = filework.load_raw_bank(path)
    except filework.BankUnavailable as exc:
        logger.warning(f"{exc}; continuing with no cards")
        raw_bank = None
    try:
        overrides = current_overrides(store)
    except (OSError, ValueError) as exc:
        logger.warning(f"Settings are unreadable, continuing without overrides: {exc}")
        overrides = {}
    return load_cards(raw_bank, overrides)


def bank_loader(
    path: filework.PathLike = filework.BANK_FILE,
    store: Optional[SettingsStore] = None,
) -> CardLoader:
    """Return a zero-argument loader suitable for :meth:`DeckEngine.reload`."""

    return lambda: load_bank(path, store)


__all__ = [
    "CardLoader",
    "apply_overrides",
    "bank_loader",
    "drop_duplicates",
    "load_bank",
    "load_cards",
]
