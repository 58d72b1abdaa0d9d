"""Prompt constructors for each AI workflow.

Every builder is a pure function of its inputs: no timestamps, no
randomness, so identical inputs always produce identical requests.
"""
from ielts_coach.models.exam import QuestionType
from ielts_coach.models.shape import NumberShape, StringShape, array, obj
from ielts_coach.tools.gateway import AIRequest, Attachment

EXCERPT_LIMIT = 500  # characters of passage context sent with explanations
DEFINITION_WORD_LIMIT = 20
PDF_MIME_TYPE = "application/pdf"

GRADING_SHAPE = obj({
    "taskResponse": NumberShape(),
    "coherence": NumberShape(),
    "lexical": NumberShape(),
    "grammar": NumberShape(),
    "overallScore": NumberShape(),
    "critiquePoints": array(StringShape(), min_items=1),
    "rewrittenEssay": StringShape(),
})

QUESTION_SHAPE = obj(
    {
        "id": StringShape(),
        "text": StringShape(),
        "type": StringShape(enum=tuple(t.value for t in QuestionType)),
        "options": array(StringShape()),
        "correctAnswer": StringShape(),
    },
    required=["id", "text", "type", "correctAnswer"],
)

SECTION_SHAPE = obj({
    "sectionId": StringShape(),
    "title": StringShape(),
    "passageText": StringShape(),
    "questions": array(QUESTION_SHAPE),
})

EXAM_SHAPE = obj({
    "title": StringShape(),
    "sections": array(SECTION_SHAPE),
})


def build_grading_request(essay: str, question_prompt: str) -> AIRequest:
    """Ask for an IELTS Task 2 grading of `essay` against `question_prompt`."""
    instruction = f"""Act as a strict IELTS examiner. Grade the following Task 2 essay based on the question: "{question_prompt}".

Provide:
1. Band scores (0-9) for: Task Response (taskResponse), Coherence & Cohesion (coherence), Lexical Resource (lexical), Grammatical Range & Accuracy (grammar).
2. An overall Band Score (overallScore).
3. 3-5 specific bullet points on errors or improvements (critiquePoints).
4. A complete rewrite of the essay that would score a Band 8.5+, improving vocabulary and flow while keeping the original argument (rewrittenEssay).

Student Essay:
"{essay}"
"""
    return AIRequest(instruction_text=instruction, output_shape=GRADING_SHAPE)


def build_extraction_request(document_bytes: bytes, mime_type: str = PDF_MIME_TYPE) -> AIRequest:
    """Ask for the three passages and their questions in an attached exam PDF."""
    kinds = ", ".join(t.value for t in QuestionType)
    instruction = f"""Analyze the attached PDF which contains an IELTS Reading Exam.
Extract exactly 3 distinct reading passages and their associated questions.

For each passage provide:
- sectionId: a short identifier unique within the exam
- title: the passage title
- passageText: the full passage text, unchanged
- questions: every question belonging to this passage

For each question provide:
- id: the question number as printed, unique within the passage
- text: the question text
- type: one of {kinds}
- options: the answer choices (multiple choice questions only)
- correctAnswer: the correct answer; for multiple choice it must be one of the options

Output a valid JSON object matching the requested schema.
"""
    return AIRequest(
        instruction_text=instruction,
        attachment=Attachment(data=document_bytes, mime_type=mime_type),
        output_shape=EXAM_SHAPE,
    )


def build_explanation_request(
    question_text: str,
    user_answer: str,
    correct_answer: str,
    passage_excerpt: str,
) -> str:
    """Free-text request explaining a wrong answer to the learner."""
    snippet = passage_excerpt[:EXCERPT_LIMIT]
    answer = user_answer.strip() or "(No Answer)"
    return f"""Context: IELTS Reading Test.
Passage Snippet: "...{snippet}..."
Question: "{question_text}"
User Answer: "{answer}" (Incorrect)
Correct Answer: "{correct_answer}"

Explain clearly in 2-3 sentences why the user's answer is wrong and why the correct answer is right based on the text evidence. Address the user directly ("You chose...").
"""


def build_definition_request(word: str, sentence: str) -> str:
    """Free-text request for a short in-context definition."""
    return f"""Define the word "{word}" as it is used in this sentence: "{sentence}".
Keep the definition concise (under {DEFINITION_WORD_LIMIT} words).
"""
