# chat.py
import argparse
import os
import sys
from pathlib import Path

import requests

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv

from agent import AgentSession
from directives import directive_args, directive_name
from llm import MAX_TOKENS, MODEL, RemoteServiceError
from memory import MEMORY_FILE, MemoryStore
from ui import (
    console,
    display_directive,
    display_error,
    display_history,
    display_info,
    display_memory,
    display_response,
    display_welcome,
    get_user_input,
)

load_dotenv()

API_KEY_ENV = "CLAUDE_API_KEY"
QUIT_COMMANDS = ("quit", "exit")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Mail Memory Agent")
    parser.add_argument(
        "--memory-file",
        default=MEMORY_FILE,
        help="Path of the key=value memory file (default: %(default)s)",
    )
    parser.add_argument(
        "--model",
        default=MODEL,
        help="Model identifier sent to the completion endpoint",
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=MAX_TOKENS,
        help="Maximum tokens per completion",
    )
    return parser.parse_args(argv)


def show_directive(token, replacement: str) -> None:
    console.print()
    display_directive(directive_name(token), directive_args(token), replacement)


def handle_command(agent: AgentSession, user_input: str) -> bool:
    """
    Run a reserved command word. Returns True if the input was a command
    (other than quit), False if it should go to the model.
    """
    command = user_input.lower()
    if command == "clear":
        agent.clear_history()
        display_info("History cleared.")
    elif command == "memory":
        display_memory(agent.memory.items())
    elif command == "forget":
        agent.clear_memory()
        display_info("Memory cleared.")
    elif command == "history":
        display_history(agent.history.all())
    else:
        return False
    return True


def run_turn(agent: AgentSession, user_input: str) -> None:
    """Send one message; report failures without ending the session."""
    try:
        response = agent.send_message(user_input)
    except RemoteServiceError as e:
        display_error(str(e))
        return
    except requests.exceptions.RequestException as e:
        display_error(f"Error calling LLM: {e}")
        return
    except Exception as e:
        display_error(f"Error: {e}")
        return
    display_response(response)


def main(argv=None):
    args = parse_args(argv)

    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        display_error(f"Please set {API_KEY_ENV} environment variable")
        sys.exit(1)

    memory = MemoryStore.from_file(args.memory_file)
    agent = AgentSession(
        api_key,
        memory,
        model=args.model,
        max_tokens=args.max_tokens,
        on_directive=show_directive,
    )

    display_welcome()

    while True:
        user_input = get_user_input()

        if user_input.lower() in QUIT_COMMANDS:
            console.print()
            console.print("Goodbye!", style="bold #FF10F0")
            break

        if not user_input:
            continue

        if handle_command(agent, user_input):
            continue

        run_turn(agent, user_input)


if __name__ == "__main__":
    main()
