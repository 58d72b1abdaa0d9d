"""Vocabulary flashcard models."""
from pydantic import BaseModel, ConfigDict, Field

MAX_MASTERY = 5


class Flashcard(BaseModel):
    """A word or short phrase saved from a reading passage."""
    model_config = ConfigDict(frozen=True)

    id: str
    owner_uid: str  # identity provider uid of the learner who owns the card
    word: str
    original_sentence: str
    definition: str
    next_review: int  # epoch milliseconds
    mastery_level: int = Field(default=0, ge=0, le=MAX_MASTERY)
    created_at: int  # epoch milliseconds


class FlashcardDeck(BaseModel):
    """All flashcards known to the local store."""
    version: int = 1
    cards: list[Flashcard] = Field(default_factory=list)
