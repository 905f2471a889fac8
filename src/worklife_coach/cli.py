"""
Interactive console for the coaching core.

Prompts for a user id, then relays each line to the orchestrator and prints
the response. Commands:
    /end    close the session (its context stays recoverable)
    /stats  show session statistics
    /quit   leave the console
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from .conversation.coach_behavior import STARTER_QUESTIONS, WELCOME_MESSAGE
from .models.config import CoachParams
from .orchestrator import CoachingOrchestrator, CoachingRequest
from .persistence.file_store import FileDataStore
from .utils.logger import configure_logging

DATA_DIR_ENV = "WORKLIFE_COACH_DATA_DIR"

console = Console()
logger = structlog.get_logger(__name__)


def load_params() -> CoachParams:
    """Configured parameters, or defaults when no config file exists."""
    try:
        return CoachParams.load()
    except FileNotFoundError:
        console.print("[dim][i] No config/coach_params.json found, using defaults[/dim]")
        return CoachParams()


def print_stats(orchestrator: CoachingOrchestrator) -> None:
    stats = orchestrator.session_manager.get_stats()
    age = stats.oldest_session_age_seconds
    console.print(
        f"[cyan]Active sessions:[/cyan] {stats.active_sessions}  "
        f"[cyan]Preserved:[/cyan] {stats.preserved_states}  "
        f"[cyan]Oldest:[/cyan] {f'{age:.0f}s' if age is not None else '-'}"
    )


async def run_console(orchestrator: CoachingOrchestrator, user_id: str) -> None:
    session_id: Optional[str] = None

    console.print(Panel(WELCOME_MESSAGE, title="WorkLife Coach", border_style="green"))
    console.print("[dim]Not sure where to start? Try:[/dim]")
    for question in STARTER_QUESTIONS[:3]:
        console.print(f"[dim]  - {question}[/dim]")

    while True:
        message = await asyncio.to_thread(Prompt.ask, "\n[bold]You[/bold]")
        command = message.strip().lower()

        if command in ("/quit", "/exit"):
            break
        if command == "/stats":
            print_stats(orchestrator)
            continue
        if command == "/end":
            if session_id and await orchestrator.end_session(session_id):
                console.print("[yellow]Session ended. Your next message resumes it.[/yellow]")
            else:
                console.print("[yellow]No active session.[/yellow]")
            continue
        if not command:
            continue

        response = await orchestrator.process_request(
            CoachingRequest(user_id=user_id, message=message, session_id=session_id)
        )
        session_id = response.session_id
        console.print(
            Panel(
                Markdown(response.content),
                title=f"Coach ({response.intent.type.value})",
                border_style="blue",
            )
        )

    if session_id:
        await orchestrator.end_session(session_id)


def main() -> None:
    """Console script entry point."""
    load_dotenv()
    params = load_params()
    configure_logging(params.log_file, params.log_level)

    store = FileDataStore(Path(os.getenv(DATA_DIR_ENV, "data")))
    orchestrator = CoachingOrchestrator(store, params=params)

    user_id = Prompt.ask("User id", default=os.getenv("USER", "guest"))
    logger.info("console_started", user_id=user_id)
    try:
        asyncio.run(run_console(orchestrator, user_id))
    except (KeyboardInterrupt, EOFError):
        console.print("\n[dim]Goodbye.[/dim]")
    finally:
        orchestrator.session_manager.shutdown()


if __name__ == "__main__":
    main()
