"""Shared fixtures: a fake google-genai client and sample model payloads."""
import copy
import json
from types import SimpleNamespace

import fitz
import pytest

from ielts_coach.tools.gateway import GatewayConfig, GeminiGateway, reset_gateway


class FakeModels:
    """Stands in for `client.aio.models`, replaying queued responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeClient:
    def __init__(self, responses):
        self.models = FakeModels(responses)
        self.aio = SimpleNamespace(models=self.models)


def _as_response(payload):
    if isinstance(payload, Exception):
        return payload
    if isinstance(payload, (dict, list)):
        payload = json.dumps(payload)
    return SimpleNamespace(text=payload, prompt_feedback=None)


@pytest.fixture
def fake_gemini():
    """Build a GeminiGateway over a fake client.

    Each payload is one response: a dict/list (sent as JSON), a string, None
    (no text) or an exception to raise.
    """
    def _make(*payloads):
        client = FakeClient([_as_response(p) for p in payloads])
        gateway = GeminiGateway(GatewayConfig(api_key="test-key", model="test-model"), client=client)
        return gateway, client.models
    return _make


@pytest.fixture(autouse=True)
def _clean_gateway_singleton():
    reset_gateway()
    yield
    reset_gateway()


@pytest.fixture
def pdf_bytes() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "IELTS Academic Reading")
    data = doc.tobytes()
    doc.close()
    return data


GRADING_PAYLOAD = {
    "taskResponse": 6,
    "coherence": 6,
    "lexical": 5,
    "grammar": 6,
    "overallScore": 6,
    "critiquePoints": ["Develop the second body paragraph with an example."],
    "rewrittenEssay": "A rewritten essay.",
}

EXAM_PAYLOAD = {
    "title": "Academic Reading Test 1",
    "sections": [
        {
            "sectionId": "p1",
            "title": "The History of Glass",
            "passageText": "Glass was first made in Mesopotamia. It spread quickly.",
            "questions": [
                {
                    "id": "1",
                    "text": "Where was glass first made?",
                    "type": "MCQ",
                    "options": ["Egypt", "Mesopotamia", "Rome"],
                    "correctAnswer": "Mesopotamia",
                },
                {
                    "id": "2",
                    "text": "Glass spread slowly.",
                    "type": "TFNG",
                    "correctAnswer": "FALSE",
                },
            ],
        },
        {
            "sectionId": "p2",
            "title": "Climate and Crops",
            "passageText": "Climate change affects yields. Farmers adapt.",
            "questions": [
                {
                    "id": "1",
                    "text": "Farmers ____ to new conditions.",
                    "type": "FIB",
                    "correctAnswer": "adapt",
                },
            ],
        },
        {
            "sectionId": "p3",
            "title": "Urban Bees",
            "passageText": "Bees thrive in cities. Rooftop hives are common.",
            "questions": [
                {
                    "id": "1",
                    "text": "Rooftop hives are rare.",
                    "type": "TFNG",
                    "correctAnswer": "FALSE",
                },
            ],
        },
    ],
}


@pytest.fixture
def grading_payload() -> dict:
    return copy.deepcopy(GRADING_PAYLOAD)


@pytest.fixture
def exam_payload() -> dict:
    return copy.deepcopy(EXAM_PAYLOAD)
