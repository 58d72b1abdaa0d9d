"""ADK tool wrappers for the IELTS tutor agent.

Each tool wraps a workflow handler and reports back a status dict the agent
can read; failures become {"status": "error", "message": ...} and leave
stored state untouched.
"""
import logging
from pathlib import Path
from typing import Optional

from ielts_coach.models.grading import ScorePolicy
from ielts_coach.tools.errors import InvalidSelection, PipelineError
from ielts_coach.tools.gateway import get_gateway
from ielts_coach.tools.handlers import create_flashcard, explain_answer, grade_essay, now_ms
from ielts_coach.tools.reading_score import score_reading_attempt
from ielts_coach.tools.scheduler import cards_for_owner, due_cards, record_review
from ielts_coach.tools.storage_io import find_card, load_deck, load_exam, replace_card, save_deck

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
STATE_DIR = PROJECT_ROOT / "storage" / "state"
DECK_PATH = STATE_DIR / "flashcards.json"
EXAMS_DIR = STATE_DIR / "exams"


# ============================================================================
# WRITING
# ============================================================================

async def grade_writing_essay(essay: str, question: str) -> dict:
    """
    Grade an IELTS Task 2 essay as a strict examiner.

    Args:
        essay: The student's essay text
        question: The Task 2 question the essay answers

    Returns:
        dict with:
        - status: "success" or "error"
        - overall_score, task_response, coherence, lexical, grammar: band scores
        - critique_points: list of improvement points
        - rewritten_essay: Band 8.5+ rewrite
    """
    try:
        score_policy = ScorePolicy.from_env()
    except ValueError as e:
        return {"status": "error", "message": str(e)}

    try:
        report = await grade_essay(get_gateway(), essay, question, score_policy=score_policy)
    except PipelineError as e:
        logger.error(f"Grading failed: {e}")
        return {"status": "error", "message": f"Error grading essay: {e}"}

    return {"status": "success", **report.model_dump(mode="json")}


# ============================================================================
# READING
# ============================================================================

def list_exams() -> dict:
    """
    List extracted reading exams available for practice.

    Returns:
        dict with:
        - status: "success"
        - exams: list of {exam_file, title, sections, questions}
    """
    exams = []
    if EXAMS_DIR.exists():
        for exam_file in sorted(EXAMS_DIR.glob("*.json")):
            exam = load_exam(exam_file)
            exams.append({
                "exam_file": exam_file.stem,
                "title": exam.title,
                "sections": len(exam.sections),
                "questions": exam.total_questions,
            })
    return {"status": "success", "exams": exams, "message": f"Found {len(exams)} exam(s)."}


def score_reading_test(exam_file: str, answers: dict[str, str]) -> dict:
    """
    Score a learner's answers to an extracted exam.

    Args:
        exam_file: Exam file name (without .json) from list_exams
        answers: Map of "sectionId:questionId" to the learner's answer

    Returns:
        dict with status, score, total_questions and the keys answered incorrectly
    """
    exam_path = EXAMS_DIR / f"{exam_file}.json"
    if not exam_path.exists():
        return {"status": "error", "message": f"Exam {exam_file} not found"}

    result = score_reading_attempt(load_exam(exam_path), answers)
    return {
        "status": "success",
        "score": result.score,
        "total_questions": result.total_questions,
        "incorrect": result.incorrect,
    }


async def explain_reading_answer(
    question_text: str,
    user_answer: str,
    correct_answer: str,
    passage_snippet: str,
) -> dict:
    """
    Explain why the learner's answer to a reading question is wrong.

    Returns:
        dict with status and explanation
    """
    try:
        explanation = await explain_answer(
            get_gateway(), question_text, user_answer, correct_answer, passage_snippet
        )
    except PipelineError as e:
        return {"status": "error", "message": f"Explanation failed: {e}"}
    return {"status": "success", "explanation": explanation}


# ============================================================================
# FLASHCARDS
# ============================================================================

async def add_flashcard(owner_uid: str, selection: str, passage_text: str) -> dict:
    """
    Save a word or short phrase (max 3 words) from a passage as a flashcard.

    Args:
        owner_uid: uid of the learner
        selection: The selected word or phrase
        passage_text: The passage the selection came from

    Returns:
        dict with status and the new card (word, original_sentence, definition)
    """
    try:
        card = await create_flashcard(get_gateway(), owner_uid, selection, passage_text)
    except InvalidSelection as e:
        return {"status": "error", "message": str(e)}
    except PipelineError as e:
        logger.error(f"Flashcard creation failed: {e}")
        return {"status": "error", "message": f"Could not create flashcard: {e}"}

    deck = load_deck(DECK_PATH)
    deck.cards.append(card)
    save_deck(deck, DECK_PATH)

    return {
        "status": "success",
        "card": card.model_dump(mode="json"),
        "message": f'Saved "{card.word}" to Flashcards!',
    }


def list_due_flashcards(owner_uid: str, now: Optional[int] = None) -> dict:
    """
    List the learner's flashcards that are due for review, oldest first.

    Returns:
        dict with status and cards (id, word, original_sentence, mastery_level)
    """
    deck = load_deck(DECK_PATH)
    cards = due_cards(now if now is not None else now_ms(), cards_for_owner(deck.cards, owner_uid))
    return {
        "status": "success",
        "cards": [
            {
                "id": c.id,
                "word": c.word,
                "original_sentence": c.original_sentence,
                "mastery_level": c.mastery_level,
            }
            for c in cards
        ],
        "total_due": len(cards),
    }


def review_flashcard(owner_uid: str, card_id: str, recalled: bool, now: Optional[int] = None) -> dict:
    """
    Record whether the learner recalled a flashcard.

    Args:
        owner_uid: uid of the learner
        card_id: Card ID from list_due_flashcards
        recalled: True for "Got it", False for a miss or skip

    Returns:
        dict with status, new mastery_level and next_review (epoch ms)
    """
    deck = load_deck(DECK_PATH)
    card = find_card(deck, card_id)
    if card is None or card.owner_uid != owner_uid:
        return {"status": "error", "message": f"Card {card_id} not found"}

    updated = record_review(card, recalled, now if now is not None else now_ms())
    replace_card(deck, updated)
    save_deck(deck, DECK_PATH)

    return {
        "status": "success",
        "mastery_level": updated.mastery_level,
        "next_review": updated.next_review,
    }
