"""Error taxonomy for the AI pipeline.

Callers branch on the concrete type: retry `NetworkError`, surface
`UpstreamError`, fall back on `EmptyResponse` for free-text workflows.
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for every failure raised by the pipeline."""


class NetworkError(PipelineError):
    """Transport to the model endpoint failed. Safe to retry."""


class UpstreamError(PipelineError):
    """The model was reached but rejected the request or broke the contract."""

    def __init__(self, message: str, violation: Optional["SchemaViolation"] = None):
        super().__init__(message)
        self.violation = violation


class EmptyResponse(PipelineError):
    """The model returned no usable text payload."""


class SchemaViolation(PipelineError):
    """A candidate value does not match its declared shape."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class MalformedDomainObject(PipelineError):
    """Structurally valid JSON that still cannot become a domain entity."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class InconsistentScore(MalformedDomainObject):
    """Reported overall band disagrees with the four sub-scores."""


class InvalidDocument(PipelineError):
    """Uploaded bytes are not a readable PDF."""


class InvalidSelection(PipelineError, ValueError):
    """A flashcard selection is empty or longer than the allowed span."""
