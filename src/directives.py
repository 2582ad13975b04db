"""
Directive interpreter for model output.

The model calls its tools by writing inline markup:

    <remember>key: value</remember>
    <recall>key</recall>
    <clear-memory/>
    <send-email>to@email.com | Subject | Message body</send-email>

tokenize() turns a completion into a stream of text and directive tokens;
render() walks that stream once, left to right, executing each directive
against the memory store and replacing its span with a status string.
Directives that fail to parse are still removed and replaced by an error
marker.
"""

import re
from typing import Callable, List, NamedTuple, Optional, Union

from memory import MemoryStore

# Spans may cross lines; non-greedy so a span never runs past its own closing tag.
DIRECTIVE_PATTERN = re.compile(
    r"<remember>(?P<remember>.*?)</remember>"
    r"|<recall>(?P<recall>.*?)</recall>"
    r"|(?P<clear><clear-memory\s*/>)"
    r"|<send-email>(?P<email>.*?)</send-email>",
    re.DOTALL,
)

INVALID_MEMORY = "[Invalid memory format]"
MEMORY_CLEARED = "[Memory cleared]"
INVALID_EMAIL = "[Invalid email format - use: to@email.com | Subject | Message]"


class TextToken(NamedTuple):
    text: str


class RememberDirective(NamedTuple):
    raw: str
    key: Optional[str]
    value: Optional[str]

    @property
    def valid(self) -> bool:
        return bool(self.key)


class RecallDirective(NamedTuple):
    raw: str
    key: str


class ClearMemoryDirective(NamedTuple):
    raw: str


class SendEmailDirective(NamedTuple):
    raw: str
    to: Optional[str]
    subject: Optional[str]
    body: Optional[str]

    @property
    def valid(self) -> bool:
        return self.to is not None


Token = Union[TextToken, RememberDirective, RecallDirective, ClearMemoryDirective, SendEmailDirective]


def _parse_remember(raw: str, inner: str) -> RememberDirective:
    key, sep, value = inner.partition(":")
    if not sep:
        return RememberDirective(raw, None, None)
    return RememberDirective(raw, key.strip(), value.strip())


def _parse_send_email(raw: str, inner: str) -> SendEmailDirective:
    parts = inner.strip().split("|", 2)
    if len(parts) < 3:
        return SendEmailDirective(raw, None, None, None)
    to, subject, body = (p.strip() for p in parts)
    return SendEmailDirective(raw, to, subject, body)


def tokenize(text: str) -> List[Token]:
    """Split text into TextToken runs and parsed directive tokens, in order."""
    tokens: List[Token] = []
    pos = 0
    for match in DIRECTIVE_PATTERN.finditer(text):
        if match.start() > pos:
            tokens.append(TextToken(text[pos:match.start()]))
        raw = match.group(0)
        if match.group("remember") is not None:
            tokens.append(_parse_remember(raw, match.group("remember")))
        elif match.group("recall") is not None:
            tokens.append(RecallDirective(raw, match.group("recall").strip().lower()))
        elif match.group("clear") is not None:
            tokens.append(ClearMemoryDirective(raw))
        else:
            tokens.append(_parse_send_email(raw, match.group("email")))
        pos = match.end()
    if pos < len(text):
        tokens.append(TextToken(text[pos:]))
    return tokens


# --- Directive handlers ---


def _handle_remember(token: RememberDirective, memory: MemoryStore) -> str:
    if not token.valid:
        return INVALID_MEMORY
    memory.set(token.key, token.value)
    return f"[Remembered: {token.key}]"


def _handle_recall(token: RecallDirective, memory: MemoryStore) -> str:
    return memory.recall(token.key)


def _handle_clear_memory(token: ClearMemoryDirective, memory: MemoryStore) -> str:
    memory.clear()
    return MEMORY_CLEARED


def _handle_send_email(token: SendEmailDirective, memory: MemoryStore) -> str:
    # Simulated: nothing leaves the process.
    if not token.valid:
        return INVALID_EMAIL
    return f"[Email sent to {token.to} - \nSubject: {token.subject} - \nBody: {token.body}]"


_DIRECTIVE_DISPATCH = {
    RememberDirective: ("remember", _handle_remember),
    RecallDirective: ("recall", _handle_recall),
    ClearMemoryDirective: ("clear_memory", _handle_clear_memory),
    SendEmailDirective: ("send_email", _handle_send_email),
}


def directive_name(token: Token) -> Optional[str]:
    entry = _DIRECTIVE_DISPATCH.get(type(token))
    return entry[0] if entry else None


def directive_args(token: Token) -> dict:
    """Parsed fields of a directive token, for display."""
    fields = {k: v for k, v in token._asdict().items() if k != "raw"}
    if isinstance(token, (RememberDirective, SendEmailDirective)) and not token.valid:
        return {"raw": token.raw}
    return fields


def execute_directive(token: Token, memory: MemoryStore) -> str:
    """Run one directive and return its replacement text."""
    entry = _DIRECTIVE_DISPATCH.get(type(token))
    if entry is None:
        raise TypeError(f"Not a directive token: {token!r}")
    return entry[1](token, memory)


def render(
    tokens: List[Token],
    memory: MemoryStore,
    on_directive: Optional[Callable[[Token, str], None]] = None,
) -> str:
    parts = []
    for token in tokens:
        if isinstance(token, TextToken):
            parts.append(token.text)
            continue
        replacement = execute_directive(token, memory)
        if on_directive:
            on_directive(token, replacement)
        parts.append(replacement)
    return "".join(parts)


def interpret(
    text: str,
    memory: MemoryStore,
    on_directive: Optional[Callable[[Token, str], None]] = None,
) -> str:
    """Execute every directive in text and return the rewritten text."""
    return render(tokenize(text), memory, on_directive)
