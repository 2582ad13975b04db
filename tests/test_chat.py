"""
Tests for the CLI loop: startup checks, reserved commands, error reporting.
User input is fed through a patched get_user_input.
"""
from unittest.mock import patch

import pytest
import requests

import chat
from conversation import Conversation, Message
from llm import RemoteServiceError


def run_main(monkeypatch, inputs, memory_path, reply="ok"):
    monkeypatch.setenv("CLAUDE_API_KEY", "test-key")
    feed = iter(inputs)
    with patch("chat.get_user_input", side_effect=lambda: next(feed)), \
            patch("agent.complete", return_value=reply) as complete:
        chat.main(["--memory-file", str(memory_path)])
    return complete


def test_missing_api_key_exits(monkeypatch, memory_path):
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    with pytest.raises(SystemExit) as exc_info:
        chat.main(["--memory-file", str(memory_path)])
    assert exc_info.value.code == 1


def test_quit_is_case_insensitive(monkeypatch, memory_path):
    complete = run_main(monkeypatch, ["QUIT"], memory_path)
    assert complete.call_count == 0


def test_commands_do_not_reach_model(monkeypatch, memory_path):
    complete = run_main(monkeypatch, ["memory", "History", "clear", "forget", "", "quit"], memory_path)
    assert complete.call_count == 0


def test_message_reaches_model_and_directives_run(monkeypatch, memory_path):
    complete = run_main(
        monkeypatch,
        ["remember my email", "quit"],
        memory_path,
        reply="<remember>email: me@x.com</remember>",
    )
    assert complete.call_count == 1
    assert "email=me@x.com" in memory_path.read_text(encoding="utf-8")


def test_forget_clears_persisted_memory(monkeypatch, memory_path):
    memory_path.write_text("# Memory - 2025-01-01T00:00:00\nname=Alice\n", encoding="utf-8")
    run_main(monkeypatch, ["forget", "quit"], memory_path)
    lines = memory_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 and lines[0].startswith("#")


def test_turn_errors_do_not_end_session(monkeypatch, memory_path):
    monkeypatch.setenv("CLAUDE_API_KEY", "test-key")
    feed = iter(["first", "second", "third", "fourth", "quit"])
    errors = [
        RemoteServiceError(401, "unauthorized"),
        requests.exceptions.ConnectionError("down"),
        KeyError("content"),
        "fine",
    ]
    with patch("chat.get_user_input", side_effect=lambda: next(feed)), \
            patch("agent.complete", side_effect=errors) as complete, \
            patch("chat.display_error") as display_error, \
            patch("chat.display_response") as display_response:
        chat.main(["--memory-file", str(memory_path)])

    assert complete.call_count == 4
    assert display_error.call_count == 3
    assert "401" in display_error.call_args_list[0][0][0]
    assert "Error calling LLM" in display_error.call_args_list[1][0][0]
    assert "content" in display_error.call_args_list[2][0][0]
    display_response.assert_called_once_with("fine")


class FakeAgent:
    def __init__(self, memory):
        self.memory = memory
        self.history = Conversation()
        self.history_cleared = False

    def clear_history(self):
        self.history_cleared = True
        self.history.clear()

    def clear_memory(self):
        return self.memory.clear()


def test_handle_command(memory):
    agent = FakeAgent(memory)
    memory.set("a", "1")
    agent.history.append("user", "hi")

    with patch("chat.display_memory") as display_memory, \
            patch("chat.display_history") as display_history:
        assert chat.handle_command(agent, "MEMORY")
        display_memory.assert_called_once_with([("a", "1")])
        assert chat.handle_command(agent, "history")
        display_history.assert_called_once_with([Message("user", "hi")])

    assert chat.handle_command(agent, "Clear")
    assert agent.history_cleared
    assert chat.handle_command(agent, "forget")
    assert len(memory) == 0
    assert not chat.handle_command(agent, "clear the subject line")


def test_parse_args_defaults():
    args = chat.parse_args([])
    assert args.max_tokens == chat.MAX_TOKENS
    assert args.model == chat.MODEL
