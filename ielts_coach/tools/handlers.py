"""Workflow handlers: prompt -> gateway -> transformer -> typed result.

Persistence and presentation belong to the caller. Errors propagate
unchanged, except empty free-text responses which fall back to a fixed
sentinel string.
"""
import asyncio
import logging
import time
from typing import Optional

from ielts_coach.models.exam import Exam
from ielts_coach.models.flashcard import Flashcard
from ielts_coach.models.grading import GradingReport, ScorePolicy
from ielts_coach.tools.errors import EmptyResponse
from ielts_coach.tools.gateway import AIGateway, AIRequest
from ielts_coach.tools.pdf_inspect import inspect_pdf
from ielts_coach.tools.prompts import (
    build_definition_request,
    build_explanation_request,
    build_extraction_request,
    build_grading_request,
)
from ielts_coach.tools.scheduler import new_card
from ielts_coach.tools.segmentation import SentenceSegmenter, find_context_sentence, validate_selection
from ielts_coach.tools.transformers import to_definition, to_exam, to_explanation, to_grading_report

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


async def grade_essay(
    gateway: AIGateway,
    essay: str,
    question_prompt: str,
    *,
    score_policy: ScorePolicy = ScorePolicy.TRUST,
) -> GradingReport:
    """Grade an IELTS Task 2 essay."""
    logger.info(f"Grading essay ({len(essay.split())} words)")
    result = await gateway.invoke(build_grading_request(essay, question_prompt))
    report = to_grading_report(result.data, policy=score_policy)
    logger.info(f"Essay graded: overall band {report.overall_score}")
    return report


async def extract_exam(gateway: AIGateway, document: bytes, *, inspect: bool = True) -> Exam:
    """Extract a three-passage reading exam from PDF bytes."""
    if inspect:
        info = await asyncio.to_thread(inspect_pdf, document)
        logger.info(f"Extracting exam from PDF ({info.num_pages} pages)")
    result = await gateway.invoke(build_extraction_request(document))
    exam = to_exam(result.data)
    logger.info(f"Extracted exam {exam.id}: {len(exam.sections)} sections, {exam.total_questions} questions")
    return exam


async def explain_answer(
    gateway: AIGateway,
    question_text: str,
    user_answer: str,
    correct_answer: str,
    passage: str,
) -> str:
    """Explain to the learner why their answer was wrong."""
    request = AIRequest(build_explanation_request(question_text, user_answer, correct_answer, passage))
    try:
        result = await gateway.invoke(request)
    except EmptyResponse:
        logger.warning("Empty explanation from model, using fallback")
        return to_explanation(None)
    return to_explanation(result.text)


async def define_word(gateway: AIGateway, word: str, sentence: str) -> str:
    """Short definition of `word` as used in `sentence`."""
    try:
        result = await gateway.invoke(AIRequest(build_definition_request(word, sentence)))
    except EmptyResponse:
        logger.warning(f"Empty definition for {word!r}, using fallback")
        return to_definition(None)
    return to_definition(result.text)


async def create_flashcard(
    gateway: AIGateway,
    owner_uid: str,
    selection: str,
    passage_text: str,
    *,
    now: Optional[int] = None,
    segmenter: Optional[SentenceSegmenter] = None,
) -> Flashcard:
    """Turn a selected span of a passage into a new, immediately due card."""
    word = validate_selection(selection)
    sentence = find_context_sentence(passage_text, word, segmenter)
    definition = await define_word(gateway, word, sentence)
    card = new_card(owner_uid, word, sentence, definition, now if now is not None else now_ms())
    logger.info(f"Created flashcard {card.id} for {word!r}")
    return card
