"""Tests for ielts_coach.tools.prompts."""
from ielts_coach.tools.prompts import (
    DEFINITION_WORD_LIMIT,
    EXAM_SHAPE,
    EXCERPT_LIMIT,
    GRADING_SHAPE,
    build_definition_request,
    build_explanation_request,
    build_extraction_request,
    build_grading_request,
)


def test_grading_request_is_deterministic() -> None:
    first = build_grading_request("Short essay.", "Discuss X")
    second = build_grading_request("Short essay.", "Discuss X")
    assert first == second


def test_grading_request_embeds_inputs_and_asks_for_all_parts() -> None:
    essay = "Some people think \"cities\" are better.\nOthers disagree."
    request = build_grading_request(essay, "Discuss both views.")
    text = request.instruction_text
    assert essay in text
    assert "Discuss both views." in text
    for name in ("taskResponse", "coherence", "lexical", "grammar", "overallScore"):
        assert name in text
    assert "0-9" in text
    assert "3-5" in text
    assert "rewrite" in text
    assert request.output_shape == GRADING_SHAPE
    assert request.attachment is None


def test_grading_shape_requires_every_field() -> None:
    assert set(GRADING_SHAPE.required) == {
        "taskResponse", "coherence", "lexical", "grammar",
        "overallScore", "critiquePoints", "rewrittenEssay",
    }


def test_extraction_request_attaches_pdf() -> None:
    request = build_extraction_request(b"%PDF-1.7 ...")
    assert request.attachment.data == b"%PDF-1.7 ..."
    assert request.attachment.mime_type == "application/pdf"
    assert request.output_shape == EXAM_SHAPE
    assert "exactly 3" in request.instruction_text


def test_exam_shape_question_requirements() -> None:
    question = EXAM_SHAPE.properties["sections"].items.properties["questions"].items
    assert set(question.required) == {"id", "text", "type", "correctAnswer"}
    assert question.properties["type"].enum == ("MCQ", "TFNG", "FIB")


def test_explanation_request_bounds_passage_and_addresses_learner() -> None:
    passage = "x" * (EXCERPT_LIMIT + 250)
    text = build_explanation_request("Q?", "A", "B", passage)
    assert "x" * EXCERPT_LIMIT in text
    assert "x" * (EXCERPT_LIMIT + 1) not in text
    assert "You chose" in text
    assert '"A" (Incorrect)' in text
    assert '"B"' in text


def test_explanation_request_blank_answer() -> None:
    text = build_explanation_request("Q?", "  ", "B", "passage")
    assert "(No Answer)" in text


def test_definition_request() -> None:
    text = build_definition_request("climate change", "Climate change affects yields.")
    assert '"climate change"' in text
    assert '"Climate change affects yields."' in text
    assert f"under {DEFINITION_WORD_LIMIT} words" in text
