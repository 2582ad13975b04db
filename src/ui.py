"""
UI components and display helpers using Rich.

Handles all terminal output: welcome banner, prompt, replies, memory and
history panels, directive panels, error lines.
"""

from rich.console import Console
from rich.panel import Panel
from rich.markdown import Markdown
from rich.text import Text
from rich.style import Style
from rich.theme import Theme

MAIL_THEME = Theme({
    "cyan": "#00D9FF",
    "magenta": "#FF10F0",
    "neon_green": "#39FF14",
    "dim_cyan": "dim #00D9FF",
    "bright_white": "bright_white",
})

console = Console(theme=MAIL_THEME)
err_console = Console(theme=MAIL_THEME, stderr=True)

# Styles
STYLE_DIRECTIVE = Style(color="#00D9FF", bold=True)
STYLE_DIRECTIVE_RESULT = Style(color="#FF10F0")
STYLE_SUCCESS = Style(color="#39FF14")
STYLE_ERROR = Style(color="#FF10F0", bold=True)
STYLE_USER = Style(color="#FFD700", bold=True)

COMMANDS = ("quit", "history", "clear", "memory", "forget")

MEMORY_VALUE_PREVIEW = 55
HISTORY_CONTENT_PREVIEW = 150


def truncate(text: str, limit: int) -> str:
    """Shorten text to limit characters, ending with '...' when cut."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def display_directive(name: str, args: dict, result: str):
    """Display an executed directive and its replacement text."""
    args_display = ", ".join(f'{k}="{v}"' for k, v in args.items() if v)
    call_text = f"{name}({args_display})"

    body = Text()
    body.append(call_text, style=STYLE_DIRECTIVE)
    body.append("\n")
    body.append(truncate(result, 200), style=STYLE_DIRECTIVE_RESULT)

    panel = Panel(
        body,
        title="[bold #00D9FF]DIRECTIVE[/bold #00D9FF]",
        title_align="left",
        border_style="#00D9FF",
        padding=(0, 1),
    )
    console.print(panel)


def display_welcome():
    """Display welcome banner with the command list and a starter hint."""
    title = Text()
    title.append("MAIL MEMORY AGENT", style="bold #00D9FF")
    title.append(" - email assistant", style="dim white")

    commands = Text()
    commands.append("Commands: ", style="dim white")
    for i, command in enumerate(COMMANDS):
        if i:
            commands.append(", ", style="dim white")
        commands.append(command, style="#FF10F0")

    hint = Text("Try: 'I want to send happy birthday wishes to a friend'", style="dim white")

    panel = Panel(
        Text.assemble(title, "\n", commands, "\n", hint),
        border_style="#00D9FF",
        padding=(0, 2),
    )
    console.print(panel)
    console.print()


def get_user_input() -> str:
    """Get user input with styled prompt. Returns 'quit' on Ctrl+C/Ctrl+D."""
    console.print()
    prompt = Text()
    prompt.append("> ", style="bold #00D9FF")
    console.print(prompt, end="")
    try:
        return input().strip()
    except (KeyboardInterrupt, EOFError):
        console.print()
        return "quit"


def display_response(content: str):
    """Display assistant response as rendered markdown."""
    if content:
        console.print()
        console.print(Markdown(content))


def display_memory(entries: list):
    """Display stored (key, value) pairs in a panel."""
    body = Text()
    if not entries:
        body.append("No memories stored", style="dim white")
    for i, (key, value) in enumerate(entries):
        if i:
            body.append("\n")
        body.append(f"{key:<15}", style="bold #00D9FF")
        body.append(": ")
        body.append(truncate(value, MEMORY_VALUE_PREVIEW))

    console.print(Panel(
        body,
        title="[bold #00D9FF]MEMORY[/bold #00D9FF]",
        title_align="left",
        border_style="#00D9FF",
        padding=(0, 1),
    ))


def display_history(messages: list):
    """Display the conversation transcript in a panel."""
    body = Text()
    if not messages:
        body.append("No history", style="dim white")
    for i, message in enumerate(messages):
        if i:
            body.append("\n")
        label = "You" if message.role == "user" else "LLM"
        body.append(f"{label:<4}: ", style=STYLE_USER)
        body.append(truncate(message.content, HISTORY_CONTENT_PREVIEW))

    console.print(Panel(
        body,
        title="[bold #00D9FF]CONVERSATION HISTORY[/bold #00D9FF]",
        title_align="left",
        border_style="#00D9FF",
        padding=(0, 1),
    ))


def display_info(message: str):
    console.print(Text(message, style=STYLE_SUCCESS))


def display_error(message: str):
    """Print an error line on stderr."""
    err_console.print(Text(message, style=STYLE_ERROR))
