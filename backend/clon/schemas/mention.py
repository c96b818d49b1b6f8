"""
CONTRACT 4: Mention Responder

Input: free-text comment containing the bot handle
Output: MentionResponse

Two-timeframe (4H + 1H) analysis with a confluence note.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from clon.schemas.analysis import Bias
from clon.schemas.signal import Direction


class MentionIntent(str, Enum):
    LONG = "long"
    SHORT = "short"
    WAIT = "wait"
    GENERAL = "general"


class ResponseType(str, Enum):
    ANALYSIS = "analysis"
    ERROR = "error"


class QuickSetup(BaseModel):
    """Indicative setup attached to a mention reply."""

    direction: Direction
    entry: str = Field(..., description="'low - high' entry zone")
    stop: float
    targets: tuple[float, float]


class MentionResponse(BaseModel):
    type: ResponseType
    message: Optional[str] = None
    asset: Optional[str] = None
    current_price: Optional[float] = None
    intent: Optional[MentionIntent] = None
    overview: list[str] = []
    bias: Optional[Bias] = None
    setup: Optional[QuickSetup] = None
    risk_note: list[str] = []


class MentionRequest(BaseModel):
    text: str = Field(..., min_length=1)
    user_id: Optional[str] = None
