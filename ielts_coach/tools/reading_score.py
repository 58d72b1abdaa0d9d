"""Score a learner's answers against an extracted exam."""
from typing import Mapping

from ielts_coach.models.exam import Exam, Question, QuestionType, ReadingResult


def answer_key(section_id: str, question_id: str) -> str:
    """Question ids are only unique per section, so answers are keyed by both."""
    return f"{section_id}:{question_id}"


def is_correct(question: Question, answer: str | None) -> bool:
    if answer is None:
        return False
    if question.type is QuestionType.MULTIPLE_CHOICE:
        return answer == question.correct_answer
    return _normalize(answer) == _normalize(question.correct_answer)


def _normalize(text: str) -> str:
    return " ".join(text.split()).casefold()


def score_reading_attempt(exam: Exam, answers: Mapping[str, str]) -> ReadingResult:
    """Count correct answers; unanswered questions count as incorrect."""
    score = 0
    incorrect = []
    for section in exam.sections:
        for question in section.questions:
            key = answer_key(section.section_id, question.id)
            if is_correct(question, answers.get(key)):
                score += 1
            else:
                incorrect.append(key)

    return ReadingResult(
        test_id=exam.id,
        score=score,
        total_questions=exam.total_questions,
        user_answers=dict(answers),
        incorrect=incorrect,
    )
