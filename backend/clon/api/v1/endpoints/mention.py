"""
Mention API Endpoints

Routes "@tradebot ..." comments to the mention responder.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from clon.schemas.mention import MentionRequest, MentionResponse
from clon.services.mention import MentionResponder, get_mention_responder

router = APIRouter()


@router.post("", response_model=Optional[MentionResponse])
async def post_mention(
    request: MentionRequest,
    responder: MentionResponder = Depends(get_mention_responder),
):
    """
    Answer a bot mention.

    Returns null when the text does not mention the bot.
    Unknown assets and failed analyses come back as type "error".
    """
    return await responder.handle_mention(request.text)
