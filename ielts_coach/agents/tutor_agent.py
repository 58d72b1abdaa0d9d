"""Tutor agent: ADK entrypoint for essay grading, reading practice and flashcards."""
import os

from dotenv import load_dotenv
from google.adk.agents.llm_agent import Agent

from ielts_coach.agents.tools import (
    add_flashcard,
    explain_reading_answer,
    grade_writing_essay,
    list_due_flashcards,
    list_exams,
    review_flashcard,
    score_reading_test,
)
from ielts_coach.tools.gateway import DEFAULT_MODEL, GatewayConfig, GeminiGateway, RetryingGateway, init_gateway

load_dotenv()
init_gateway(gateway=RetryingGateway(GeminiGateway(GatewayConfig.from_env())))

root_agent = Agent(
    model=os.getenv("CHAT_MODEL", DEFAULT_MODEL),
    name="ielts_tutor",
    description="An IELTS tutor for writing feedback, reading practice and vocabulary review.",
    instruction=(
        "Help the learner prepare for IELTS. Grade Task 2 essays with grade_writing_essay. "
        "List and score reading exams with list_exams and score_reading_test, and use "
        "explain_reading_answer for questions the learner got wrong. Save vocabulary with "
        "add_flashcard and run reviews with list_due_flashcards and review_flashcard. "
        "Always pass the learner's uid as owner_uid."
    ),
    tools=[
        grade_writing_essay,
        list_exams,
        score_reading_test,
        explain_reading_answer,
        add_flashcard,
        list_due_flashcards,
        review_flashcard,
    ],
)
