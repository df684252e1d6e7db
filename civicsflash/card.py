"""Domain model for a civics flashcard.

This module defines :class:`Card`, the immutable value shown by the deck
engine, together with helpers that convert between cards and the JSON
records stored in the question bank file.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Sequence, Tuple


def _coerce_answers(value: Any) -> Tuple[str, ...]:
    """Normalise a raw answers field into a tuple of strings."""

    if isinstance(value, str):
        raise TypeError("answers must be a sequence of strings, not a string")
    if not isinstance(value, Sequence):
        raise TypeError("answers must be a sequence of strings")
    answers = []
    for entry in value:
        if not isinstance(entry, str):
            raise TypeError(f"answer entries must be strings, got {type(entry).__name__}")
        answers.append(entry)
    return tuple(answers)


@dataclass(frozen=True)
class Card:
    """A single question card.

    Parameters
    ----------
    id:
        Question number from the bank. Unique within a bank.
    category:
        Name of the category the question was listed under.
    question:
        Text shown on the front of the card.
    answers:
        Accepted answers, in display order.
    """

    id: int
    category: str
    question: str
    answers: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f"Card id must be an int, got {self.id!r}")
        if not isinstance(self.answers, tuple):
            object.__setattr__(self, "answers", _coerce_answers(self.answers))

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_record(cls, category: str, payload: Mapping[str, Any]) -> "Card":
        """Create a :class:`Card` from a question record of the bank file."""

        if not isinstance(payload, Mapping):
            raise TypeError("question records must be mappings")
        try:
            card_id = payload["id"]
            question = payload["question"]
        except KeyError as exc:
            raise ValueError(f"question record is missing {exc.args[0]!r}") from exc
        if not isinstance(question, str):
            raise TypeError("question text must be a string")
        return cls(
            id=card_id,
            category=str(category),
            question=question,
            answers=_coerce_answers(payload.get("answers", [])),
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialise the card back into a bank question record."""

        return {
            "id": self.id,
            "question": self.question,
            "answers": list(self.answers),
        }

    def with_answers(self, answers: Sequence[str]) -> "Card":
        """Return a copy of the card with *answers* replacing its own."""

        return replace(self, answers=_coerce_answers(answers))
