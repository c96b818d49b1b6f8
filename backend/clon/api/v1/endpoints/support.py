"""
Support Chat API Endpoints
"""

from fastapi import APIRouter, Depends

from clon.api.v1.errors import http_error_for
from clon.schemas.support import SupportRequest, SupportReply
from clon.services.base import ServiceError
from clon.services.support import SupportAgent, get_support_agent

router = APIRouter()


@router.post("", response_model=SupportReply)
async def post_support(
    request: SupportRequest,
    agent: SupportAgent = Depends(get_support_agent),
):
    """Send a message to the support agent. Pass session_id back to continue a conversation."""
    try:
        return await agent.respond(request.message, request.session_id)
    except ServiceError as e:
        raise http_error_for(e)
