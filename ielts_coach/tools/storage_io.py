"""Local JSON persistence for exams, reports and the flashcard deck."""
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from ielts_coach.models.exam import Exam
from ielts_coach.models.flashcard import Flashcard, FlashcardDeck

logger = logging.getLogger(__name__)


def save_model_json(model: BaseModel, output_path: Path) -> None:
    """Save a model to JSON atomically (write temp then replace)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = output_path.with_suffix(".tmp")
    temp_path.write_text(model.model_dump_json(indent=2))
    temp_path.replace(output_path)


def load_exam(path: Path) -> Exam:
    return Exam.model_validate_json(path.read_text())


def load_deck(deck_path: Path) -> FlashcardDeck:
    """Load the deck, or an empty one if the file does not exist yet."""
    if not deck_path.exists():
        return FlashcardDeck()
    data = json.loads(deck_path.read_text())
    return FlashcardDeck(**data)


def save_deck(deck: FlashcardDeck, deck_path: Path) -> None:
    save_model_json(deck, deck_path)
    logger.debug(f"Saved {len(deck.cards)} card(s) to {deck_path}")


def find_card(deck: FlashcardDeck, card_id: str) -> Optional[Flashcard]:
    return next((c for c in deck.cards if c.id == card_id), None)


def replace_card(deck: FlashcardDeck, card: Flashcard) -> None:
    """Swap in an updated copy of a card, keeping deck order."""
    for i, existing in enumerate(deck.cards):
        if existing.id == card.id:
            deck.cards[i] = card
            return
    raise KeyError(f"Card {card.id} not in deck")
