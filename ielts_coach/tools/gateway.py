"""AI gateway: the single chokepoint for Gemini calls.

Handlers receive an `AIGateway` explicitly. The process-wide instance is
created once at the edges (CLIs, the ADK agent) with `init_gateway`.
"""
import asyncio
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx
from google import genai
from google.genai import errors, types

from ielts_coach.models.shape import (
    ArrayShape,
    BooleanShape,
    IntegerShape,
    NumberShape,
    ObjectShape,
    StringShape,
)
from ielts_coach.tools.errors import EmptyResponse, NetworkError, SchemaViolation, UpstreamError
from ielts_coach.tools.schema_validator import validate

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class Attachment:
    """Binary document sent alongside the instruction text."""
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class AIRequest:
    """One request to the model. `output_shape` makes the call structured."""
    instruction_text: str
    attachment: Optional[Attachment] = None
    output_shape: Any = None


@dataclass(frozen=True)
class RawResult:
    """Model response. `data` holds the validated JSON for structured calls."""
    text: str
    data: Any = None


class AIGateway(Protocol):
    async def invoke(self, request: AIRequest) -> RawResult: ...


@dataclass(frozen=True)
class GatewayConfig:
    api_key: str
    model: str = DEFAULT_MODEL
    temperature: Optional[float] = None

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Read GOOGLE_API_KEY, CHAT_MODEL and GEMINI_TEMPERATURE."""
        api_key = os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise RuntimeError("GOOGLE_API_KEY environment variable not set")
        temperature = os.getenv("GEMINI_TEMPERATURE")
        return cls(
            api_key=api_key,
            model=os.getenv("CHAT_MODEL", DEFAULT_MODEL),
            temperature=float(temperature) if temperature else None,
        )


class GeminiGateway:
    """`AIGateway` backed by the google-genai async client."""

    def __init__(self, config: GatewayConfig, client: Optional[genai.Client] = None):
        self.model = config.model
        self.temperature = config.temperature
        self._client = client if client is not None else genai.Client(api_key=config.api_key)

    async def invoke(self, request: AIRequest) -> RawResult:
        structured = request.output_shape is not None
        logger.info(
            f"Calling {self.model} (structured={structured}, "
            f"attachment={request.attachment.mime_type if request.attachment else None})"
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=self._contents(request),
                config=self._config(request),
            )
        except errors.ServerError as e:
            logger.error(f"Model endpoint unavailable: {e}")
            raise NetworkError(f"Model endpoint unavailable: {e}") from e
        except errors.ClientError as e:
            logger.error(f"Model rejected request: {e}")
            raise UpstreamError(f"Model rejected request: {e}") from e
        except (httpx.TransportError, ConnectionError, asyncio.TimeoutError) as e:
            logger.error(f"Transport failure: {e}")
            raise NetworkError(f"Transport failure: {e}") from e

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise UpstreamError(f"Prompt blocked by model: {feedback.block_reason}")

        text = response.text
        if not text or not text.strip():
            raise EmptyResponse("Model returned an empty response")

        logger.debug(f"Raw model response ({len(text)} chars): {text}")

        if not structured:
            return RawResult(text=text)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Unparsable JSON payload at line {e.lineno}, column {e.colno}")
            raise EmptyResponse(f"Unparsable JSON payload: {e}") from e

        try:
            validate(request.output_shape, data)
        except SchemaViolation as e:
            logger.error(f"Schema violation in model output: {e}")
            raise UpstreamError(f"Model output failed validation: {e}", violation=e) from e

        return RawResult(text=text, data=data)

    def _contents(self, request: AIRequest) -> Any:
        if request.attachment is None:
            return request.instruction_text
        return [
            types.Part.from_bytes(data=request.attachment.data, mime_type=request.attachment.mime_type),
            request.instruction_text,
        ]

    def _config(self, request: AIRequest) -> types.GenerateContentConfig:
        if request.output_shape is None:
            return types.GenerateContentConfig(temperature=self.temperature)
        return types.GenerateContentConfig(
            temperature=self.temperature,
            response_mime_type="application/json",
            response_schema=to_genai_schema(request.output_shape),
        )


class RetryingGateway:
    """Caller-side retry policy: re-invoke on `NetworkError` only."""

    def __init__(self, inner: AIGateway, attempts: int = 3, delay: float = 1.0, backoff: float = 2.0):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.inner = inner
        self.attempts = attempts
        self.delay = delay
        self.backoff = backoff

    async def invoke(self, request: AIRequest) -> RawResult:
        delay = self.delay
        for attempt in range(1, self.attempts + 1):
            try:
                return await self.inner.invoke(request)
            except NetworkError:
                if attempt == self.attempts:
                    raise
                logger.warning(f"Network error, retrying in {delay}s (attempt {attempt}/{self.attempts})")
                await asyncio.sleep(delay)
                delay *= self.backoff
        raise AssertionError("unreachable")


def to_genai_schema(shape) -> types.Schema:
    """Convert a shape description into a Gemini response schema."""
    if isinstance(shape, ObjectShape):
        return types.Schema(
            type=types.Type.OBJECT,
            description=shape.description,
            properties={name: to_genai_schema(s) for name, s in shape.properties.items()},
            property_ordering=list(shape.properties),
            required=list(shape.required),
        )
    if isinstance(shape, ArrayShape):
        return types.Schema(
            type=types.Type.ARRAY,
            description=shape.description,
            items=to_genai_schema(shape.items),
            min_items=shape.min_items,
        )
    if isinstance(shape, StringShape):
        if shape.enum is not None:
            return types.Schema(
                type=types.Type.STRING,
                description=shape.description,
                format="enum",
                enum=list(shape.enum),
            )
        return types.Schema(type=types.Type.STRING, description=shape.description)
    if isinstance(shape, NumberShape):
        return types.Schema(type=types.Type.NUMBER, description=shape.description)
    if isinstance(shape, IntegerShape):
        return types.Schema(type=types.Type.INTEGER, description=shape.description)
    if isinstance(shape, BooleanShape):
        return types.Schema(type=types.Type.BOOLEAN, description=shape.description)
    raise TypeError(f"Unsupported shape: {shape!r}")


_gateway: Optional[AIGateway] = None


def init_gateway(config: Optional[GatewayConfig] = None, *, gateway: Optional[AIGateway] = None) -> AIGateway:
    """Install the process-wide gateway. May only be called once."""
    global _gateway
    if _gateway is not None:
        raise RuntimeError("AI gateway already initialized")
    if gateway is None:
        gateway = GeminiGateway(config or GatewayConfig.from_env())
    _gateway = gateway
    return _gateway


def get_gateway() -> AIGateway:
    if _gateway is None:
        raise RuntimeError("AI gateway not initialized; call init_gateway() first")
    return _gateway


def reset_gateway() -> None:
    """Drop the process-wide gateway. Tests only."""
    global _gateway
    _gateway = None
