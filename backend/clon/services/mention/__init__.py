"""
Mention Responder Service

CONTRACT:
    Input:  comment text containing the bot handle
    Output: MentionResponse (analysis or error), None without a mention
"""

from clon.services.mention.parser import (
    ASSET_MAP,
    MentionResponder,
    build_mention_response,
    extract_asset,
    extract_intent,
    get_mention_responder,
    is_mention,
)

__all__ = [
    "ASSET_MAP",
    "MentionResponder",
    "build_mention_response",
    "extract_asset",
    "extract_intent",
    "get_mention_responder",
    "is_mention",
]
