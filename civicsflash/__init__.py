"""Flashcard deck navigation for the civics question bank."""

from .auto_reveal import AutoRevealTimer, RevealToken
from .card import Card
from .card_source import apply_overrides, bank_loader, load_bank, load_cards
from .config import EngineConfig, load_config
from .deck_engine import BankStatus, DeckEngine, DeckSnapshot, Direction
from .overrides import (
    DEFAULT_VARY_MESSAGE,
    MemorySettingsStore,
    SettingsStore,
    current_overrides,
)

__all__ = [
    "AutoRevealTimer",
    "BankStatus",
    "Card",
    "DEFAULT_VARY_MESSAGE",
    "DeckEngine",
    "DeckSnapshot",
    "Direction",
    "EngineConfig",
    "MemorySettingsStore",
    "RevealToken",
    "SettingsStore",
    "apply_overrides",
    "bank_loader",
    "current_overrides",
    "load_bank",
    "load_cards",
    "load_config",
]
