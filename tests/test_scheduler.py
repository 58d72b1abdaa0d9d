"""Tests for ielts_coach.tools.scheduler."""
import pytest

from ielts_coach.tools.scheduler import (
    DAY_MS,
    SchedulePolicy,
    cards_for_owner,
    due_cards,
    new_card,
    record_review,
    review_interval,
)

NOW = 1_700_000_000_000


def _card(word: str = "resilient", now: int = NOW, owner: str = "uid-1", **update):
    card = new_card(owner, word, f"The {word} plant survived.", "able to recover", now)
    return card.model_copy(update=update) if update else card


def test_new_card_is_due_immediately() -> None:
    card = _card()
    assert card.mastery_level == 0
    assert card.next_review == NOW
    assert card.created_at == NOW
    assert due_cards(NOW, [card]) == [card]


def test_recalled_raises_mastery_and_pushes_review_out() -> None:
    card = record_review(_card(), recalled=True, now=NOW)
    assert card.mastery_level == 1
    assert card.next_review == NOW + DAY_MS


def test_mastery_capped_at_five() -> None:
    card = _card(mastery_level=5)
    updated = record_review(card, recalled=True, now=NOW)
    assert updated.mastery_level == 5
    assert updated.next_review >= card.next_review


@pytest.mark.parametrize("level", range(0, 6))
@pytest.mark.parametrize("next_review", [NOW - DAY_MS, NOW, NOW + 30 * DAY_MS])
def test_recalled_never_moves_backwards(level: int, next_review: int) -> None:
    card = _card(mastery_level=level, next_review=next_review)
    updated = record_review(card, recalled=True, now=NOW)
    assert updated.mastery_level >= card.mastery_level
    assert updated.next_review >= card.next_review


@pytest.mark.parametrize("level", range(0, 6))
@pytest.mark.parametrize("lapse", ["reset", "decrement"])
def test_missed_is_due_now(level: int, lapse: str) -> None:
    card = _card(mastery_level=level, next_review=NOW + 10 * DAY_MS)
    updated = record_review(card, recalled=False, now=NOW + 5, policy=SchedulePolicy(lapse=lapse))
    assert updated.next_review == NOW + 5
    if lapse == "reset":
        assert updated.mastery_level == 0
    else:
        assert updated.mastery_level == max(level - 1, 0)


def test_interval_is_monotonic() -> None:
    for policy in (SchedulePolicy(), SchedulePolicy(growth=1.0), SchedulePolicy(base_interval_ms=60_000, growth=3)):
        intervals = [review_interval(level, policy) for level in range(0, 6)]
        assert intervals == sorted(intervals)


def test_policy_rejects_shrinking_growth() -> None:
    with pytest.raises(ValueError):
        SchedulePolicy(growth=0.5)
    with pytest.raises(ValueError):
        SchedulePolicy(lapse="forget")


def test_due_cards_filters_and_sorts() -> None:
    later = _card("b", next_review=NOW - 10)
    earliest = _card("a", next_review=NOW - 100)
    exactly_now = _card("c", next_review=NOW)
    future = _card("d", next_review=NOW + 1)

    assert due_cards(NOW, [later, future, exactly_now, earliest]) == [earliest, later, exactly_now]


def test_due_cards_ties_break_by_creation() -> None:
    newer = _card("newer", now=NOW - 10, next_review=NOW - 50)
    older = _card("older", now=NOW - 20, next_review=NOW - 50)
    same_a = _card("same-a", now=NOW - 30, next_review=NOW - 60)
    same_b = _card("same-b", now=NOW - 30, next_review=NOW - 60)

    assert due_cards(NOW, [newer, same_a, older, same_b]) == [same_a, same_b, older, newer]


def test_cards_for_owner() -> None:
    mine = _card("mine", owner="uid-1")
    theirs = _card("theirs", owner="uid-2")
    assert cards_for_owner([mine, theirs], "uid-1") == [mine]
