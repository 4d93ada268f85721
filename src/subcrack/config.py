from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from subcrack.algorithm.backtrack import PUBLISH_EVERY
from subcrack.algorithm.planner import SKIP_FRACTION, TARGET_DISTINCT
from subcrack.models.frequency import GuessOrder


class DecryptConfig(BaseModel):
    """Tunables of a decryption attempt."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    skip_fraction: float = Field(default=SKIP_FRACTION, ge=0.0, le=1.0)
    target_distinct: int = Field(default=TARGET_DISTINCT, ge=1)
    guess_order: GuessOrder = "aligned"
    # Retry with skip budgets 0..n so the first solution uses as few skips as possible.
    escalate_skips: bool = False
    max_steps: Optional[int] = Field(default=None, gt=0)
    time_limit: Optional[float] = Field(default=None, gt=0)
    # Rendered in place of cipher letters the key leaves unassigned; None keeps them.
    unknown_marker: Optional[str] = Field(default=None, min_length=1, max_length=1)
    publish_every: int = Field(default=PUBLISH_EVERY, gt=0)
