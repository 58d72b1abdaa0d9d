"""Spaced-repetition review scheduling for flashcards.

Cards are immutable; every transition returns an updated copy. Writes of the
same card must be serialized by whoever stores it.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

from ielts_coach.models.flashcard import MAX_MASTERY, Flashcard

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class SchedulePolicy:
    """
    Interval curve and lapse behavior.

    The interval after reaching mastery level n >= 1 is
    ``base_interval_ms * growth ** (n - 1)``. `growth` must be at least 1 so a
    higher level never shortens the interval.
    """
    base_interval_ms: int = DAY_MS
    growth: float = 2.0
    lapse: Literal["reset", "decrement"] = "decrement"

    def __post_init__(self):
        if self.base_interval_ms < 0:
            raise ValueError("base_interval_ms must be non-negative")
        if self.growth < 1:
            raise ValueError("growth must be >= 1 to keep intervals monotonic")
        if self.lapse not in ("reset", "decrement"):
            raise ValueError(f"Unknown lapse policy: {self.lapse}")


DEFAULT_POLICY = SchedulePolicy()


def review_interval(level: int, policy: SchedulePolicy = DEFAULT_POLICY) -> int:
    """Milliseconds until the next review for a card at `level`."""
    if level <= 0:
        return 0
    return int(policy.base_interval_ms * policy.growth ** (level - 1))


def new_card(
    owner_uid: str,
    word: str,
    sentence: str,
    definition: str,
    now: int,
    card_id: Optional[str] = None,
) -> Flashcard:
    """Create a card at mastery 0, due immediately."""
    return Flashcard(
        id=card_id or str(uuid.uuid4()),
        owner_uid=owner_uid,
        word=word,
        original_sentence=sentence,
        definition=definition,
        next_review=now,
        mastery_level=0,
        created_at=now,
    )


def record_review(
    card: Flashcard,
    recalled: bool,
    now: int,
    policy: SchedulePolicy = DEFAULT_POLICY,
) -> Flashcard:
    """
    Apply one review outcome.

    Recalled: mastery goes up by one (capped at 5) and the card moves out by
    the interval for the new level, never earlier than it was already due.
    Missed or skipped: mastery is reset or decremented per `policy.lapse` and
    the card is due again at `now`.
    """
    if recalled:
        level = min(card.mastery_level + 1, MAX_MASTERY)
        next_review = max(card.next_review, now + review_interval(level, policy))
    else:
        level = 0 if policy.lapse == "reset" else max(card.mastery_level - 1, 0)
        next_review = now

    logger.debug(
        f"Card {card.id} ({card.word!r}): mastery {card.mastery_level} -> {level}, "
        f"next review {card.next_review} -> {next_review}"
    )
    return card.model_copy(update={"mastery_level": level, "next_review": next_review})


def due_cards(now: int, cards: Iterable[Flashcard]) -> list[Flashcard]:
    """Cards due at `now`, oldest-due first; ties keep creation order."""
    due = [c for c in cards if c.next_review <= now]
    # sorted() is stable, so full ties keep input order
    return sorted(due, key=lambda c: (c.next_review, c.created_at))


def cards_for_owner(cards: Iterable[Flashcard], owner_uid: str) -> list[Flashcard]:
    return [c for c in cards if c.owner_uid == owner_uid]
