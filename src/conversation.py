# conversation.py — In-process transcript of the current session
from typing import Dict, Iterator, List, NamedTuple

ROLES = ("user", "assistant")


class Message(NamedTuple):
    role: str
    content: str


class Conversation:
    """Ordered, append-only list of messages. Never persisted.

    Turn alternation is not checked: two user messages in a row are kept
    as-is (e.g. after a failed request).
    """

    def __init__(self):
        self._messages: List[Message] = []

    def append(self, role: str, content: str) -> Message:
        if role not in ROLES:
            raise ValueError(f"Invalid role: {role}. Must be one of: {', '.join(ROLES)}")
        message = Message(role, content)
        self._messages.append(message)
        return message

    def all(self) -> List[Message]:
        """Return a copy of the messages in chronological order."""
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def is_empty(self) -> bool:
        return not self._messages

    def to_api_messages(self) -> List[Dict[str, str]]:
        """Role/content dicts in the shape the completion endpoint expects."""
        return [{"role": m.role, "content": m.content} for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))
