"""
Support Agent

Platform support chatbot backed by Claude. Conversation history is kept
per session in memory, trimmed per session and evicted least recently used.
"""

import asyncio
import logging
import uuid
import weakref
from collections import OrderedDict
from typing import Optional

import anthropic

from clon.core.config import Settings, settings as default_settings
from clon.schemas.support import SupportReply
from clon.services.base import ExternalAPIError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Clon, an AI trading assistant embedded in a professional trading platform.

Your role:
1. Answer questions about platform functionality (placing trades, viewing charts, using leverage, account settings).
2. Explain trading terminology clearly and concisely.
3. Provide risk education when appropriate.
4. Be a knowledgeable, calm presence.

Your personality:
- Confident but not arrogant.
- Analytical, not emotional.
- Concise and structured.
- No hype, no guarantees, no slang.
- Always emphasize risk management.

You must NEVER:
- Provide financial guarantees or predict outcomes with certainty.
- Encourage reckless use of leverage.
- Suggest "all-in" trades or revenge trading.
- Claim to be human if directly asked.

End every response that involves trade setups or market analysis with:
"This is for informational purposes only. Trade responsibly. Market conditions change rapidly."

If asked about something outside your scope (account security issues, withdrawals, bugs), direct the user to contact human support."""

FALLBACK_REPLY = "Sorry, I could not process your request."


class SessionStore:
    """Keyed conversation history with per-session trimming and LRU eviction."""

    def __init__(self, history_limit: int = 20, max_sessions: int = 1000):
        self.history_limit = history_limit
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, list[dict]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> list[dict]:
        history = self._sessions.get(session_id)
        if history is None:
            return []
        self._sessions.move_to_end(session_id)
        return list(history)

    def trim(self, messages: list[dict]) -> list[dict]:
        """Keep the newest messages, starting on a user turn."""
        trimmed = messages[-self.history_limit:]
        while trimmed and trimmed[0]["role"] != "user":
            trimmed = trimmed[1:]
        return trimmed

    def save(self, session_id: str, messages: list[dict]) -> None:
        self._sessions[session_id] = self.trim(messages)
        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted support session {evicted}")


class SupportAgent:
    """Answers platform questions through the Anthropic Messages API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[anthropic.AsyncAnthropic] = None,
        store: Optional[SessionStore] = None,
    ):
        self.settings = settings or default_settings
        self._client = client
        self.store = store or SessionStore(
            history_limit=self.settings.support_history_limit,
            max_sessions=self.settings.support_max_sessions,
        )
        # One in-flight turn per session; entries vanish once no request holds them
        self._session_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    @property
    def name(self) -> str:
        return "SupportAgent"

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.settings.anthropic_api_key)
        return self._client

    @staticmethod
    def new_session_id() -> str:
        return f"session_{uuid.uuid4().hex[:12]}"

    async def respond(self, message: str, session_id: Optional[str] = None) -> SupportReply:
        session_id = session_id or self.new_session_id()
        lock = self._session_locks.setdefault(session_id, asyncio.Lock())

        # History is read and written back around the API call
        async with lock:
            messages = self.store.trim(self.store.get(session_id) + [{"role": "user", "content": message}])

            try:
                response = await self._get_client().messages.create(
                    model=self.settings.claude_model,
                    max_tokens=self.settings.support_max_tokens,
                    system=SYSTEM_PROMPT,
                    messages=messages,
                )
            except anthropic.APIError as e:
                logger.error(f"Anthropic API error: {e}")
                raise ExternalAPIError(self.name, f"Support reply failed: {e}", {"session_id": session_id}) from e

            text_blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
            reply = text_blocks[0] if text_blocks else FALLBACK_REPLY

            self.store.save(session_id, messages + [{"role": "assistant", "content": reply}])

        return SupportReply(reply=reply, session_id=session_id)


# Singleton instance
_agent_instance: Optional[SupportAgent] = None


def get_support_agent() -> SupportAgent:
    """Get or create support agent instance."""
    global _agent_instance
    if _agent_instance is None:
        _agent_instance = SupportAgent()
    return _agent_instance
