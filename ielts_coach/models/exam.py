"""Reading exam models extracted from IELTS PDFs."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    """Question kinds the extractor may emit."""
    MULTIPLE_CHOICE = "MCQ"
    TRUE_FALSE_NOT_GIVEN = "TFNG"
    FILL_IN_THE_BLANKS = "FIB"


class Question(BaseModel):
    """Single question within a reading section."""
    model_config = ConfigDict(frozen=True)

    id: str  # unique within its section, taken verbatim from the model
    text: str
    type: QuestionType
    options: Optional[tuple[str, ...]] = None  # MCQ only
    correct_answer: str


class Section(BaseModel):
    """One reading passage and its questions."""
    model_config = ConfigDict(frozen=True)

    section_id: str
    title: str
    passage_text: str
    questions: tuple[Question, ...] = ()


class Exam(BaseModel):
    """Extracted reading test. Three sections are expected."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    sections: tuple[Section, ...] = ()

    @property
    def total_questions(self) -> int:
        return sum(len(s.questions) for s in self.sections)


class ReadingResult(BaseModel):
    """Outcome of a learner's attempt at an exam."""
    test_id: str
    score: int
    total_questions: int
    user_answers: dict[str, str] = Field(default_factory=dict)  # answer key -> answer
    incorrect: list[str] = Field(default_factory=list)  # answer keys of missed questions
