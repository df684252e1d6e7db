"""Deck navigation: shuffle order, visit history, reveal state and auto-reveal."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from civicsflash.auto_reveal import AutoRevealTimer, RevealToken
from civicsflash.card import Card
from civicsflash.card_source import CardLoader, bank_loader, drop_duplicates
from civicsflash.config import EngineConfig, load_config
from civicsflash.filework import JsonSettingsStore
from civicsflash.overrides import SettingsStore

logger = logging.getLogger(__name__)


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class BankStatus(Enum):
    """Whether a bank has been loaded, and whether it holds any card."""

    NOT_LOADED = "not_loaded"
    EMPTY = "empty"
    LOADED = "loaded"


@dataclass(frozen=True)
class DeckSnapshot:
    current: Optional[Card]
    is_revealed: bool
    is_complete: bool
    direction: Direction
    can_go_back: bool
    can_go_forward: bool
    remaining_count: int
    total_count: Optional[int]
    status: BankStatus


Listener = Callable[[DeckSnapshot], None]


class DeckEngine:
    """Shuffled walk through a card bank with back/forward history.

    ``deck`` holds the cards not shown yet and is consumed from its tail.
    ``history`` holds the cards shown so far in display order and
    ``cursor`` indexes the displayed one (``-1`` before the first card).
    Every navigation hides the answers and restarts the auto-reveal timer
    for the new card.
    """

    def __init__(
        self,
        loader: Optional[CardLoader] = None,
        *,
        config: Optional[EngineConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        rng: Optional[random.Random] = None,
        timer: Optional[AutoRevealTimer] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._loader = loader
        self._rng = rng or random.Random(self.config.shuffle_seed)
        self._timer = timer or AutoRevealTimer(loop)
        self._listeners: List[Listener] = []

        self.all_cards: List[Card] = []
        self.deck: List[Card] = []
        self.history: List[Card] = []
        self.cursor = -1
        self.current: Optional[Card] = None
        self.is_revealed = False
        self.is_complete = False
        self.direction = Direction.FORWARD
        self.status = BankStatus.NOT_LOADED

    @classmethod
    def from_config(
        cls,
        config: Optional[EngineConfig] = None,
        *,
        store: Optional[SettingsStore] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> "DeckEngine":
        """Build an engine reading the bank and settings files named in *config*."""

        cfg = config or load_config()
        settings = store if store is not None else JsonSettingsStore(cfg.settings_path)
        return cls(bank_loader(cfg.bank_path, settings), config=cfg, loop=loop)

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------
    @property
    def can_go_back(self) -> bool:
        return self.cursor > 0

    @property
    def can_go_forward(self) -> bool:
        return self.cursor < len(self.history) - 1

    @property
    def remaining_count(self) -> int:
        return len(self.deck) + (1 if self.current is not None else 0)

    @property
    def total_count(self) -> Optional[int]:
        """Bank size, or ``None`` when there is nothing to show.

        Use :attr:`status` to tell an unloaded engine from an empty bank.
        """

        return len(self.all_cards) or None

    @property
    def pending_reveal(self) -> Optional[RevealToken]:
        return self._timer.pending

    def snapshot(self) -> DeckSnapshot:
        return DeckSnapshot(
            current=self.current,
            is_revealed=self.is_revealed,
            is_complete=self.is_complete,
            direction=self.direction,
            can_go_back=self.can_go_back,
            can_go_forward=self.can_go_forward,
            remaining_count=self.remaining_count,
            total_count=self.total_count,
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every state change.

        Returns a function that removes the listener again.
        """

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def reload(self) -> None:
        """Fetch a fresh bank from the loader and start a new session."""

        if self._loader is None:
            raise RuntimeError("DeckEngine was created without a card loader")
        self.initialize(self._loader())

    def initialize(self, bank: Sequence[Card]) -> None:
        """Start a session over *bank*; repeated ids keep their first card."""

        self.all_cards = drop_duplicates(bank)
        self.status = BankStatus.LOADED if self.all_cards else BankStatus.EMPTY
        logger.info(f"Deck initialised with {len(self.all_cards)} card(s)")
        self.reset_deck()

    def reset_deck(self) -> None:
        """Reshuffle the whole bank and show the first card."""

        self._timer.cancel()
        self.is_complete = False
        self.is_revealed = False
        self.deck = list(self.all_cards)
        self._rng.shuffle(self.deck)
        self.history = []
        self.cursor = -1
        self.current = None
        self.advance()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def advance(self) -> None:
        """Move to the next card, replaying forward history first."""

        self.is_revealed = False
        self._timer.cancel()
        self.direction = Direction.FORWARD

        if self.can_go_forward:
            self.cursor += 1
            self.current = self.history[self.cursor]
        elif not self.deck:
            self.current = None
            self.is_complete = True
            logger.debug("Deck exhausted")
            self._notify()
            return
        else:
            card = self.deck.pop()
            del self.history[self.cursor + 1:]
            self.history.append(card)
            self.cursor = len(self.history) - 1
            self.current = card

        logger.debug(f"Showing card {self.current.id} ({self.cursor + 1}/{len(self.all_cards)})")
        self._schedule_auto_reveal()
        self._notify()

    def retreat(self) -> None:
        """Go back to the previously shown card; does nothing at the start.

        From the completed state the last shown card is restored first.
        """

        if not self.can_go_back:
            return

        self.is_revealed = False
        self._timer.cancel()
        self.direction = Direction.BACKWARD
        if self.is_complete:
            self.is_complete = False
        else:
            self.cursor -= 1
        self.current = self.history[self.cursor]

        logger.debug(f"Back to card {self.current.id}")
        self._schedule_auto_reveal()
        self._notify()

    def toggle_reveal(self) -> None:
        """Reveal the answers, or move on when they are already shown."""

        if self.is_revealed:
            self.advance()
        else:
            self.reveal()

    def reveal(self) -> None:
        if self.current is None or self.is_revealed:
            return
        self._timer.cancel()
        self.is_revealed = True
        self._notify()

    # ------------------------------------------------------------------
    # Auto-reveal
    # ------------------------------------------------------------------
    def _schedule_auto_reveal(self) -> None:
        if self.current is None or not self.config.auto_reveal_enabled:
            return
        self._timer.schedule(
            self.config.auto_reveal_delay,
            self._on_auto_reveal,
            card_id=self.current.id,
        )

    def _on_auto_reveal(self, token: RevealToken) -> None:
        if self.current is None or self.current.id != token.card_id:
            logger.debug(f"Ignoring auto-reveal for card {token.card_id}")
            return
        self.is_revealed = True
        self._notify()

    def close(self) -> None:
        """Cancel any pending auto-reveal; the engine stays usable."""

        self._timer.cancel()


__all__ = ["BankStatus", "DeckEngine", "DeckSnapshot", "Direction", "Listener"]
