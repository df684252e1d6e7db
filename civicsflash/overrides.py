"""User supplied answers for the location dependent civics questions."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_VARY_MESSAGE = "Answers will vary by location. Please add via settings."

# Setting name -> question id in the bank.
OVERRIDE_SETTINGS: Mapping[str, int] = {
    "senator": 23,
    "representative": 29,
    "governor": 61,
    "capital": 62,
}
OVERRIDE_ELIGIBLE_IDS = frozenset(OVERRIDE_SETTINGS.values())


class SettingsStore(Protocol):
    """Key-value store the surrounding application persists settings in."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemorySettingsStore:
    """In-process :class:`SettingsStore` backed by a dictionary."""

    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def current_overrides(store: Optional[SettingsStore]) -> Dict[int, str]:
    """Read the override settings from *store* and key them by card id.

    Blank values are left out so the caller falls back to
    :data:`DEFAULT_VARY_MESSAGE`. Nothing is cached: every call reads the
    store again.
    """

    if store is None:
        return {}
    overrides: Dict[int, str] = {}
    for setting, card_id in OVERRIDE_SETTINGS.items():
        value = _clean(store.get(setting))
        if value is not None:
            overrides[card_id] = value
    logger.debug(f"Resolved {len(overrides)} answer override(s)")
    return overrides


def resolve_answer(card_id: int, overrides: Mapping[int, str]) -> str:
    """Return the override for *card_id* or the default placeholder."""

    return _clean(overrides.get(card_id)) or DEFAULT_VARY_MESSAGE


__all__ = [
    "DEFAULT_VARY_MESSAGE",
    "MemorySettingsStore",
    "OVERRIDE_ELIGIBLE_IDS",
    "OVERRIDE_SETTINGS",
    "SettingsStore",
    "current_overrides",
    "resolve_answer",
]
