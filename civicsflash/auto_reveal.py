"""Single-shot, cancelable timer that reveals the displayed card."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

RevealCallback = Callable[["RevealToken"], None]


@dataclass(eq=False)
class RevealToken:
    """Handle for one scheduled reveal.

    A token stays valid until it fires or is cancelled. Once invalid it can
    never trigger its callback again.
    """

    card_id: Optional[int]
    delay: float
    handle: Optional[asyncio.Handle] = field(default=None, repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class AutoRevealTimer:
    """Keeps at most one pending reveal on an asyncio event loop.

    Scheduling and firing both happen on *loop*; engine methods must be
    called from that loop's thread so a cancel always runs before a stale
    fire could.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._token: Optional[RevealToken] = None

    @property
    def pending(self) -> Optional[RevealToken]:
        if self._token is not None and self._token.pending:
            return self._token
        return None

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def schedule(
        self,
        delay: float,
        on_fire: RevealCallback,
        *,
        card_id: Optional[int] = None,
    ) -> Optional[RevealToken]:
        """Cancel any pending reveal and start a new one after *delay* seconds.

        Returns ``None`` when no event loop is available to run the timer.
        """

        self.cancel()
        loop = self._resolve_loop()
        if loop is None:
            logger.warning("No event loop available; auto-reveal skipped")
            return None

        token = RevealToken(card_id=card_id, delay=delay)
        token.handle = loop.call_later(delay, self._fire, token, on_fire)
        self._token = token
        logger.debug(f"Auto-reveal scheduled for card {card_id} in {delay:.1f}s")
        return token

    def cancel(self, token: Optional[RevealToken] = None) -> None:
        """Cancel *token*, or whatever is pending when *token* is ``None``."""

        target = token if token is not None else self._token
        if target is None or not target.pending:
            return
        target.cancelled = True
        if target.handle is not None:
            target.handle.cancel()
        if target is self._token:
            self._token = None
        logger.debug(f"Auto-reveal cancelled for card {target.card_id}")

    def _fire(self, token: RevealToken, on_fire: RevealCallback) -> None:
        if token is not self._token or not token.pending:
            return
        token.fired = True
        self._token = None
        logger.debug(f"Auto-reveal fired for card {token.card_id}")
        on_fire(token)


__all__ = ["AutoRevealTimer", "RevealCallback", "RevealToken"]
