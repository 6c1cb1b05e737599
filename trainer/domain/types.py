from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from .enums import TermStatus
from ..config import DISTRACTOR_COUNT


@dataclass(frozen=True)
class TermCard:
    """
    One learnable term as seen by the scheduler.

    Content fields are never touched by scheduling; only ``status``,
    ``next_review_at`` and ``review_stage`` change after a review.
    """

    id: str
    group_id: str
    term: str
    definition_cn: str
    next_review_at: datetime
    phonetic: str = ""
    term_translation: Optional[str] = None
    definition_en: str = ""
    example: str = ""
    wrong_definitions: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    status: TermStatus = TermStatus.NEW
    review_stage: int = 0
    # Stored for later use, the transition never reads it.
    consecutive_failures: int = 0

    def is_due(self, now: datetime) -> bool:
        return self.next_review_at <= now


@dataclass(frozen=True)
class ReviewOutcome:
    term_id: str
    success: bool


@dataclass(frozen=True)
class QuizItem:
    """A term as it sits in a review session queue."""

    term_id: str
    term: str
    answer: str
    phonetic: str = ""
    distractors: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_card(cls, card) -> "QuizItem":
        return cls(
            term_id=card.id,
            term=card.term,
            answer=card.definition_cn,
            phonetic=card.phonetic,
            distractors=tuple(card.wrong_definitions[:DISTRACTOR_COUNT]),
        )

    def to_dict(self) -> dict:
        return {
            "term_id": self.term_id,
            "term": self.term,
            "answer": self.answer,
            "phonetic": self.phonetic,
            "distractors": list(self.distractors),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizItem":
        return cls(
            term_id=data["term_id"],
            term=data["term"],
            answer=data["answer"],
            phonetic=data.get("phonetic", ""),
            distractors=tuple(data.get("distractors", ())),
        )
