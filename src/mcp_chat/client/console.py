"""Terminal chat UI.

Run with ``mcp-chat`` (or ``python -m mcp_chat.client``). Plain lines are sent
to the agent; slash commands control the session.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme as RichTheme

from ..config import get_settings
from .api import ChatAPI, ChatAPIError
from .session import ChatSession, format_timestamp
from .types import Message

logger = logging.getLogger(__name__)

THEMES: dict[str, RichTheme] = {
    "light": RichTheme(
        {
            "chat.user": "bold blue",
            "chat.assistant": "black",
            "chat.system": "bold red",
            "chat.muted": "grey50",
            "chat.error": "red",
            "chat.border": "blue",
        }
    ),
    "dark": RichTheme(
        {
            "chat.user": "bold cyan",
            "chat.assistant": "white",
            "chat.system": "bold bright_red",
            "chat.muted": "grey62",
            "chat.error": "bright_red",
            "chat.border": "cyan",
        }
    ),
}

ROLE_LABELS = {"user": "You", "assistant": "Assistant", "system": "System"}

HELP_TEXT = (
    "/new     start a new chat (new session id)\n"
    "/clear   clear the transcript, keep the session\n"
    "/retry   resend your last message\n"
    "/theme   toggle light/dark\n"
    "/health  check the API\n"
    "/quit    exit"
)


def render_message(message: Message) -> Panel:
    body = Text(message.content, style=f"chat.{message.role}")
    if message.status == "error":
        body.append("  (failed)", style="chat.error")
    title = f"{ROLE_LABELS[message.role]} · {format_timestamp(message.timestamp)}"
    align = "right" if message.role == "user" else "left"
    return Panel(body, title=title, title_align=align, border_style="chat.border", expand=False)


class ChatConsole:
    def __init__(self, session: ChatSession, api: ChatAPI, console: Console | None = None) -> None:
        self.session = session
        self.api = api
        self.console = console or Console(theme=THEMES[session.theme])
        self._theme_pushed = False

    def _apply_theme(self) -> None:
        # At most one pushed theme sits on top of the console's base theme
        if self._theme_pushed:
            self.console.pop_theme()
        self.console.push_theme(THEMES[self.session.theme])
        self._theme_pushed = True

    def render_header(self) -> None:
        self.console.rule(
            f"[chat.user]MCP Chat Assistant[/] [chat.muted]· Session: {self.session.thread_id[-8:]}[/]"
        )
        if self.session.error:
            self.console.print(f"[chat.error]⚠ {self.session.error}[/]  [chat.muted](/retry to resend)[/]")

    def render_transcript(self) -> None:
        self.console.clear()
        self.render_header()
        for message in self.session.messages:
            self.console.print(render_message(message))

    async def _send(self, content: str) -> None:
        with self.console.status("[chat.muted]Thinking...[/]", spinner="dots"):
            await self.session.send_message(content)
        self.render_transcript()

    async def handle_command(self, command: str) -> bool:
        """Run a slash command. Returns False when the user asked to quit."""
        name = command.strip().lower()
        if name in ("/quit", "/exit"):
            return False
        if name == "/new":
            self.session.start_new_chat()
            self.render_transcript()
        elif name == "/clear":
            self.session.clear_chat()
            self.render_transcript()
        elif name == "/retry":
            last = self.session.last_user_message()
            if last is None:
                self.console.print("[chat.muted]Nothing to retry.[/]")
            else:
                await self._send(last.content)
        elif name == "/theme":
            self.session.toggle_theme()
            self._apply_theme()
            self.render_transcript()
        elif name == "/health":
            try:
                health = await self.api.check_health()
                self.console.print(f"[chat.muted]{health.get('status')}: {health.get('message')}[/]")
            except (ChatAPIError, httpx.HTTPError) as exc:
                self.console.print(f"[chat.error]{exc}[/]")
        else:
            self.console.print(HELP_TEXT, style="chat.muted")
        return True

    async def run(self) -> None:
        self.render_transcript()
        self.console.print(HELP_TEXT, style="chat.muted")
        while True:
            try:
                line = await asyncio.to_thread(self.console.input, "[chat.user]> [/]")
            except (EOFError, KeyboardInterrupt):
                break
            if not line.strip():
                continue
            if line.startswith("/"):
                if not await self.handle_command(line):
                    break
                continue
            await self._send(line)


async def _run() -> None:
    settings = get_settings()
    api = ChatAPI(settings.chat_api_base_url)
    try:
        await ChatConsole(ChatSession(api), api).run()
    finally:
        await api.close()


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
