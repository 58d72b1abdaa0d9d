"""Tests for ielts_coach.tools.storage_io."""
from pathlib import Path

import pytest

from ielts_coach.tools.scheduler import new_card, record_review
from ielts_coach.tools.storage_io import (
    find_card,
    load_deck,
    load_exam,
    replace_card,
    save_deck,
    save_model_json,
)
from ielts_coach.tools.transformers import to_exam


def test_load_missing_deck_is_empty(tmp_path: Path) -> None:
    assert load_deck(tmp_path / "flashcards.json").cards == []


def test_deck_persists_cards(tmp_path: Path) -> None:
    deck_path = tmp_path / "state" / "flashcards.json"
    deck = load_deck(deck_path)
    card = new_card("uid-1", "erratic", "Rainfall is erratic.", "irregular", 1000)
    deck.cards.append(card)
    save_deck(deck, deck_path)

    reloaded = load_deck(deck_path)
    assert reloaded.cards == [card]
    assert not deck_path.with_suffix(".tmp").exists()


def test_replace_card_keeps_order(tmp_path: Path) -> None:
    deck = load_deck(tmp_path / "flashcards.json")
    first = new_card("uid-1", "a", "A.", "def", 1)
    second = new_card("uid-1", "b", "B.", "def", 2)
    deck.cards.extend([first, second])

    reviewed = record_review(first, recalled=True, now=10)
    replace_card(deck, reviewed)

    assert deck.cards == [reviewed, second]
    assert find_card(deck, first.id).mastery_level == 1
    assert find_card(deck, "missing") is None


def test_replace_unknown_card(tmp_path: Path) -> None:
    deck = load_deck(tmp_path / "flashcards.json")
    with pytest.raises(KeyError):
        replace_card(deck, new_card("uid-1", "a", "A.", "def", 1))


def test_exam_json(tmp_path: Path, exam_payload: dict) -> None:
    exam = to_exam(exam_payload)
    path = tmp_path / "exams" / "test1.json"
    save_model_json(exam, path)
    assert load_exam(path) == exam
