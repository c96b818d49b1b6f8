"""
CONTRACT 5: Support Agent

Input: SupportRequest
Output: SupportReply
"""

from typing import Optional
from pydantic import BaseModel, Field


class SupportRequest(BaseModel):
    message: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class SupportReply(BaseModel):
    reply: str
    session_id: str
