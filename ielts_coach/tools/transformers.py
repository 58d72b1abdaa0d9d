"""Turn validated model JSON into typed domain entities."""
import logging
import math
import uuid
from typing import Any, Optional

from pydantic import ValidationError

from ielts_coach.models.exam import Exam, Question, QuestionType, Section
from ielts_coach.models.grading import GradingReport, ScorePolicy
from ielts_coach.tools.errors import InconsistentScore, MalformedDomainObject

logger = logging.getLogger(__name__)

EXPECTED_SECTIONS = 3
FALLBACK_DEFINITION = "Definition unavailable."
FALLBACK_EXPLANATION = "Explanation unavailable."
SCORE_TOLERANCE = 0.5


def to_exam(data: dict, exam_id: Optional[str] = None) -> Exam:
    """
    Build an `Exam` from extraction output.

    The exam gets a fresh id; section and question ids are kept verbatim
    because answers are matched against them. Missing or duplicate ids are
    never invented or repaired.

    Raises:
        MalformedDomainObject: when an id is missing, blank or duplicated, or
            a multiple-choice question has no options or an answer outside them.
    """
    raw_sections = data.get("sections") or []
    if len(raw_sections) != EXPECTED_SECTIONS:
        logger.warning(f"Expected {EXPECTED_SECTIONS} sections, extraction returned {len(raw_sections)}")

    sections = []
    seen_sections: set[str] = set()
    for i, raw_section in enumerate(raw_sections):
        path = f"$.sections[{i}]"
        section_id = _require_id(raw_section, "sectionId", path)
        if section_id in seen_sections:
            raise MalformedDomainObject(f"{path}.sectionId", f"duplicate section id {section_id!r}")
        seen_sections.add(section_id)

        questions = []
        seen_questions: set[str] = set()
        for j, raw_question in enumerate(raw_section.get("questions") or []):
            q_path = f"{path}.questions[{j}]"
            question_id = _require_id(raw_question, "id", q_path)
            if question_id in seen_questions:
                raise MalformedDomainObject(f"{q_path}.id", f"duplicate question id {question_id!r}")
            seen_questions.add(question_id)
            questions.append(_to_question(raw_question, question_id, q_path))

        sections.append(Section(
            section_id=section_id,
            title=raw_section.get("title", ""),
            passage_text=raw_section.get("passageText", ""),
            questions=tuple(questions),
        ))

    return Exam(
        id=exam_id or str(uuid.uuid4()),
        title=data.get("title", ""),
        sections=tuple(sections),
    )


def _require_id(raw: Any, field: str, path: str) -> str:
    value = raw.get(field) if isinstance(raw, dict) else None
    if not isinstance(value, str) or not value.strip():
        raise MalformedDomainObject(f"{path}.{field}", "missing identifier")
    return value


def _to_question(raw: dict, question_id: str, path: str) -> Question:
    try:
        kind = QuestionType(raw.get("type"))
    except ValueError as e:
        raise MalformedDomainObject(f"{path}.type", f"unknown question type {raw.get('type')!r}") from e

    options = raw.get("options") or None
    correct_answer = raw.get("correctAnswer", "")

    if kind is QuestionType.MULTIPLE_CHOICE:
        if not options:
            raise MalformedDomainObject(f"{path}.options", "multiple choice question has no options")
        if correct_answer not in options:
            raise MalformedDomainObject(f"{path}.correctAnswer", "answer is not one of the options")
    elif options:
        logger.debug(f"Dropping options on {kind.value} question at {path}")
        options = None

    try:
        return Question(
            id=question_id,
            text=raw.get("text", ""),
            type=kind,
            options=tuple(options) if options else None,
            correct_answer=correct_answer,
        )
    except ValidationError as e:
        raise MalformedDomainObject(path, str(e)) from e


def to_grading_report(data: dict, policy: ScorePolicy = ScorePolicy.TRUST) -> GradingReport:
    """
    Map grading output field by field.

    Under the default `TRUST` policy the reported overall band is kept as
    given, even when it disagrees with the sub-scores. `CROSS_CHECK` rejects
    a band more than half a band away from the rounded mean; `RECOMPUTE`
    always replaces it with that mean.
    """
    critique = tuple(data.get("critiquePoints") or ())
    if not critique:
        raise MalformedDomainObject("$.critiquePoints", "no critique points")

    try:
        report = GradingReport(
            task_response=data["taskResponse"],
            coherence=data["coherence"],
            lexical=data["lexical"],
            grammar=data["grammar"],
            overall_score=data["overallScore"],
            critique_points=critique,
            rewritten_essay=data["rewrittenEssay"],
        )
    except KeyError as e:
        raise MalformedDomainObject(f"$.{e.args[0]}", "missing field") from e
    except ValidationError as e:
        raise MalformedDomainObject("$", str(e)) from e

    if policy is ScorePolicy.TRUST:
        return report

    expected = overall_band(*report.sub_scores)
    if policy is ScorePolicy.CROSS_CHECK:
        if abs(expected - report.overall_score) > SCORE_TOLERANCE:
            raise InconsistentScore(
                "$.overallScore",
                f"reported {report.overall_score} but sub-scores give {expected}",
            )
        return report

    if report.overall_score != expected:
        logger.warning(f"Replacing reported overall band {report.overall_score} with {expected}")
    return report.model_copy(update={"overall_score": expected})


def overall_band(*sub_scores: float) -> float:
    """IELTS overall band: mean rounded to the nearest half, .25 and .75 rounding up."""
    mean = sum(sub_scores) / len(sub_scores)
    return math.floor(mean * 2 + 0.5) / 2


def to_definition(raw_text: Optional[str]) -> str:
    """Trimmed definition, or the fallback when the model said nothing."""
    text = (raw_text or "").strip()
    return text or FALLBACK_DEFINITION


def to_explanation(raw_text: Optional[str]) -> str:
    text = (raw_text or "").strip()
    return text or FALLBACK_EXPLANATION
