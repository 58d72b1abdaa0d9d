"""Essay grading report models."""
import os
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ScorePolicy(str, Enum):
    """How the model-reported overall band is treated."""
    TRUST = "trust"  # take the reported overall as-is
    CROSS_CHECK = "cross_check"  # reject when it disagrees with the sub-scores
    RECOMPUTE = "recompute"  # replace it with the rounded mean of the sub-scores

    @classmethod
    def from_env(cls) -> "ScorePolicy":
        """Read SCORE_POLICY, defaulting to TRUST."""
        value = os.getenv("SCORE_POLICY", cls.TRUST.value)
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid SCORE_POLICY {value!r}; expected one of {[p.value for p in cls]}"
            ) from None


class GradingReport(BaseModel):
    """Examiner feedback for one essay submission."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    task_response: float
    coherence: float
    lexical: float
    grammar: float
    overall_score: float
    critique_points: tuple[str, ...]
    rewritten_essay: str

    @property
    def sub_scores(self) -> tuple[float, float, float, float]:
        return (self.task_response, self.coherence, self.lexical, self.grammar)
