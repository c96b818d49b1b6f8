"""
Support Agent Service

Claude-backed platform support chat with per-session history.
"""

from clon.services.support.agent import SessionStore, SupportAgent, SYSTEM_PROMPT, get_support_agent

__all__ = ["SessionStore", "SupportAgent", "SYSTEM_PROMPT", "get_support_agent"]
