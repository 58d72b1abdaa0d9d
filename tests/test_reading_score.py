"""Tests for ielts_coach.tools.reading_score."""
from ielts_coach.tools.reading_score import answer_key, score_reading_attempt
from ielts_coach.tools.transformers import to_exam


def test_score_reading_attempt(exam_payload: dict) -> None:
    exam = to_exam(exam_payload, exam_id="exam-1")
    answers = {
        answer_key("p1", "1"): "Mesopotamia",
        answer_key("p1", "2"): " false ",
        answer_key("p2", "1"): "adopt",
    }

    result = score_reading_attempt(exam, answers)

    assert result.test_id == "exam-1"
    assert result.score == 2
    assert result.total_questions == 4
    assert result.incorrect == ["p2:1", "p3:1"]
    assert result.user_answers == answers


def test_mcq_requires_exact_choice(exam_payload: dict) -> None:
    exam = to_exam(exam_payload)
    result = score_reading_attempt(exam, {answer_key("p1", "1"): "mesopotamia"})
    assert "p1:1" in result.incorrect


def test_same_question_id_in_different_sections(exam_payload: dict) -> None:
    exam = to_exam(exam_payload)
    result = score_reading_attempt(exam, {answer_key("p3", "1"): "FALSE"})
    assert result.score == 1
    assert "p2:1" in result.incorrect
