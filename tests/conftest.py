import heapq
import itertools
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from civicsflash.card import Card


class FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Just enough of an asyncio loop to drive ``call_later`` by hand."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._counter = itertools.count()

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def scheduled(self):
        return [handle for _, _, handle in self._queue if not handle.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                handle.callback(*handle.args)
        self.now = target


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def make_cards():
    def _make(count):
        return [
            Card(id=i, category="American Government", question=f"Q{i}", answers=(f"A{i}",))
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def raw_bank():
    return [
        {
            "name": "Principles of American Democracy",
            "questions": [
                {"id": 1, "question": "What is the supreme law of the land?", "answers": ["the Constitution"]},
                {"id": 2, "question": "What does the Constitution do?", "answers": ["sets up the government", "defines the government"]},
            ],
        },
        {
            "name": "System of Government",
            "questions": [
                {"id": 23, "question": "Who is one of your state's U.S. Senators now?", "answers": ["varies"]},
                {"id": 29, "question": "Name your U.S. Representative.", "answers": ["varies"]},
                {"id": 61, "question": "Who is the Governor of your state now?", "answers": ["varies"]},
                {"id": 62, "question": "What is the capital of your state?", "answers": ["varies"]},
            ],
        },
    ]
