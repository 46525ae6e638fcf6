"""Terminal session driver: agent menu, read loop and streamed event rendering.

The agent menu is numbered (type a number or a name, Enter picks the first
entry) rather than navigated with arrow keys.
"""

import asyncio
import json
import logging
import os
import sys
import threading
from enum import Enum
from typing import Any, Callable, List, Optional

from agent_kit.chat import Chat, ChatEventKind
from agent_kit.errors import SessionClosed


logger = logging.getLogger("TerminalChat")

EXIT_COMMANDS = {"exit", "quit"}

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[33m"
RED = "\033[91m"
GREY = "\033[90m"
WHITE = "\033[97m"
RESET = "\033[0m"


class SessionState(str, Enum):
    SELECTING = "selecting"
    CHATTING = "chatting"
    CLOSED = "closed"


class TerminalSession:
    """
    Drive one interactive chat in the terminal.

    States move Selecting -> Chatting -> Closed. Input and output are
    injectable so the loop can be driven from tests.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_stream = None,
        use_color: Optional[bool] = None,
    ):
        self.input_func = input_func
        self.output_stream = output_stream or sys.stdout
        self.use_color = ("NO_COLOR" not in os.environ) if use_color is None else bool(use_color)
        self.state = SessionState.SELECTING
        self.chat: Optional[Chat] = None
        self.agent_name = ""
        self._midline = False

    def select_agent(self, choices: List[str]) -> Optional[str]:
        """
        Show a numbered menu and return the chosen name.

        Enter picks the first entry; a number or a name (any case) picks that
        entry. Returns None, closing the session, when input ends.
        """
        self._ensure_state(SessionState.SELECTING)
        if not choices:
            raise ValueError("No agents to choose from")

        self._writeline("Select an agent and press enter to start the chat:")
        for number, choice in enumerate(choices, start = 1):
            self._writeline(f"  {number}) {choice}")

        while True:
            try:
                raw = self.input_func(self._paint(f"Choice [1-{len(choices)}, default 1]: ", BLUE))
            except EOFError:
                self.close()
                return None

            picked = _match_choice(raw, choices)
            if picked is not None:
                return picked
            self._writeline(self._paint(f"Invalid choice: {raw.strip()}", RED))

    def start(self, chat: Chat, agent_name: str) -> None:
        """Enter the Chatting state and print the greeting banner."""
        self._ensure_state(SessionState.SELECTING)
        self.chat = chat
        self.agent_name = agent_name
        self.state = SessionState.CHATTING

        self._writeline(self._paint(f"\n🚀 {agent_name} is ready!", GREEN))
        self._writeline(self._paint("Type your question below to talk to the agent.", GREY))
        self._writeline(self._paint('Type "exit" or "quit" to end the conversation.\n', GREY))

    async def run(self) -> int:
        """Read and answer lines until the session closes; returns the exit code."""
        self._ensure_state(SessionState.CHATTING)
        while self.state is SessionState.CHATTING:
            try:
                line = await self._read_line(self._paint("You: ", BLUE))
            except EOFError:
                self.close()
                break
            await self.handle_line(line)
        return 0

    async def handle_line(self, line: str) -> None:
        """Process one input line: exit, skip blank input, or run a chat turn."""
        self._ensure_state(SessionState.CHATTING)
        text = (line or "").strip()

        if text.lower() in EXIT_COMMANDS:
            self._writeline(self._paint("👋 Goodbye!", GREEN))
            self.close()
            return

        if not text:
            return

        await self._render_turn(text)

    async def _read_line(self, prompt: str) -> str:
        """
        Read one line on a daemon thread.

        A blocked read never holds up interpreter or event-loop shutdown, so
        Ctrl-C exits without waiting for Enter.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(value, error):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(value)

        def worker():
            try:
                value, error = self.input_func(prompt), None
            except Exception as exc:
                value, error = None, exc
            try:
                loop.call_soon_threadsafe(settle, value, error)
            except RuntimeError:
                # Loop already closed; nobody is waiting for this line.
                pass

        threading.Thread(target = worker, name = "terminal-input", daemon = True).start()
        return await future

    def close(self) -> None:
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self._writeline(self._paint("Chat session ended.", GREY))

    async def _render_turn(self, text: str) -> None:
        self._writeline(self._paint("Assistant is thinking...", GREY))
        first = True
        try:
            async for event in self.chat.prompt(text):
                if event.kind is ChatEventKind.CONTENT:
                    chunk = event.text
                    if first:
                        self._write(self._paint("🤖 Assistant: ", GREEN))
                        first = False
                    self._write(self._paint(chunk, WHITE))
                    self._midline = not chunk.endswith("\n")
                elif event.kind is ChatEventKind.TOOL_CALL:
                    self._break_line()
                    self._writeline(
                        f"{self._paint('[Calling Tool]', YELLOW)} {event.tool_name} "
                        f"{self._paint(_format_arguments(event.arguments), GREY)}"
                    )
                elif event.kind is ChatEventKind.END:
                    self._break_line()
                    self._writeline("")
                elif event.kind is ChatEventKind.ERROR:
                    self._report_error(event.message)
        except Exception as exc:
            logger.debug("Chat turn raised", exc_info = True)
            self._report_error(str(exc))

    def _report_error(self, message: str) -> None:
        self._break_line()
        self._writeline(self._paint(f"❌ Error: {message}", RED))

    def _ensure_state(self, expected: SessionState) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionClosed("Terminal session is closed")
        if self.state is not expected:
            raise RuntimeError(f"Expected state {expected.value}, session is {self.state.value}")

    def _paint(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{RESET}"

    def _break_line(self) -> None:
        if self._midline:
            self._write("\n")
            self._midline = False

    def _writeline(self, text: str) -> None:
        self._write(text + "\n")

    def _write(self, text: str) -> None:
        """Write text to configured stream with immediate flush."""
        self.output_stream.write(text)
        self.output_stream.flush()


def _match_choice(raw: str, choices: List[str]) -> Optional[str]:
    text = (raw or "").strip()
    if not text:
        return choices[0]
    if text.isdigit():
        index = int(text) - 1
        if 0 <= index < len(choices):
            return choices[index]
        return None
    for choice in choices:
        if choice.lower() == text.lower():
            return choice
    return None


def _format_arguments(arguments: Any) -> str:
    if isinstance(arguments, (dict, list)):
        return json.dumps(arguments, ensure_ascii = False)
    return str(arguments)
