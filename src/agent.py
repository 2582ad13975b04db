# agent.py — One agent session: transcript, memory store and client settings
from typing import Callable, Optional

from conversation import Conversation
from directives import Token, interpret
from llm import API_URL, MAX_TOKENS, MODEL, complete
from memory import MemoryStore


class AgentSession:
    """
    Holds everything a turn needs. send_message() runs one turn:
    user message → completion → directive interpretation → assistant message.
    """

    def __init__(
        self,
        api_key: str,
        memory: MemoryStore,
        model: str = MODEL,
        max_tokens: int = MAX_TOKENS,
        api_url: str = API_URL,
        on_directive: Optional[Callable[[Token, str], None]] = None,
    ):
        self.api_key = api_key
        self.memory = memory
        self.model = model
        self.max_tokens = max_tokens
        self.api_url = api_url
        self.on_directive = on_directive
        self.history = Conversation()

    def send_message(self, user_input: str) -> str:
        """
        Run one turn and return the rewritten assistant reply.

        The user message is appended before the request and is not removed
        if the request fails.
        """
        self.history.append("user", user_input)
        raw = complete(
            self.history.to_api_messages(),
            self.memory.render_context(),
            api_key=self.api_key,
            model=self.model,
            max_tokens=self.max_tokens,
            api_url=self.api_url,
        )
        content = interpret(raw, self.memory, self.on_directive)
        self.history.append("assistant", content)
        return content

    def clear_history(self) -> None:
        self.history.clear()

    def clear_memory(self) -> dict:
        return self.memory.clear()
