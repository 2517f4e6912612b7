"""Terminal dashboard for AsyncBrief.

Usage:
    asyncbrief-dashboard show
    asyncbrief-dashboard watch --interval 30
    asyncbrief-dashboard done "Book the room"
    asyncbrief-dashboard prompts list
    asyncbrief-dashboard prompts set sentiment "Rate the mood..."
    asyncbrief-dashboard prompts reset sentiment
"""

import argparse
import asyncio
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from ..config import get_settings
from ..llm.prompts import PROMPT_NAMES
from ..log import setup_logging
from .client import DashboardClient, DashboardSnapshot
from .render import render_dashboard
from .state import DashboardSession


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="asyncbrief-dashboard",
        description="Slack conversation dashboard: summary, sentiment, action items, miscommunications",
    )
    parser.add_argument("--api-url", default=settings.DASHBOARD_API_URL, help="AsyncBrief API base URL")
    parser.add_argument("--state-path", default=settings.DASHBOARD_STATE_PATH, help="Local prompt override file; action item marks are kept next to it")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Fetch and render one snapshot")
    show.add_argument("--done", action="append", default=[], metavar="TASK", help="Mark an action item as done")

    watch = sub.add_parser("watch", help="Refresh the dashboard periodically")
    watch.add_argument("--interval", type=float, default=30.0, help="Seconds between refreshes")
    watch.add_argument("--done", action="append", default=[], metavar="TASK", help="Mark an action item as done")

    done = sub.add_parser("done", help="Toggle the done mark of an action item")
    done.add_argument("task", help="Action item text as shown on the dashboard")

    prompts = sub.add_parser("prompts", help="Manage local prompt templates")
    prompts_sub = prompts.add_subparsers(dest="prompts_command", required=True)
    prompts_sub.add_parser("list", help="Show current prompt templates")
    set_cmd = prompts_sub.add_parser("set", help="Override a prompt template")
    set_cmd.add_argument("key", choices=PROMPT_NAMES)
    set_cmd.add_argument("text")
    reset_cmd = prompts_sub.add_parser("reset", help="Restore the default prompt template")
    reset_cmd.add_argument("key", choices=PROMPT_NAMES)
    return parser


def refresh(client: DashboardClient, session: DashboardSession, done: List[str]) -> DashboardSnapshot:
    snapshot = asyncio.run(client.fetch_all())
    # Marks may have been changed from another terminal since the last cycle.
    session.checklist.load()
    for task in done:
        session.checklist.mark_done(task)
    if "/actionItems" not in snapshot.errors:
        session.checklist.prune(item.task for item in snapshot.action_items)
    session.checklist.save()
    return snapshot


def run_prompts(args, session: DashboardSession, console: Console) -> int:
    if args.prompts_command == "list":
        for key, text in session.prompts.items():
            title = f"{key} (custom)" if session.prompts.is_customized(key) else key
            console.print(Panel(text.strip(), title=title))
    elif args.prompts_command == "set":
        session.prompts.set(args.key, args.text)
        console.print(f"Saved custom prompt for [bold]{args.key}[/bold]")
    elif args.prompts_command == "reset":
        session.prompts.reset(args.key)
        console.print(f"Restored default prompt for [bold]{args.key}[/bold]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    console = Console()

    with DashboardSession(Path(args.state_path).expanduser()) as session:
        if args.command == "prompts":
            return run_prompts(args, session, console)
        if args.command == "done":
            marked = session.checklist.toggle(args.task)
            state = "done" if marked else "not done"
            console.print(f"Marked [bold]{args.task}[/bold] as {state}")
            return 0

        client = DashboardClient(args.api_url, notifier=session.notifier)
        if args.command == "show":
            snapshot = refresh(client, session, args.done)
            console.print(render_dashboard(snapshot, session))
            return 1 if snapshot.errors else 0

        snapshot = refresh(client, session, args.done)
        with Live(render_dashboard(snapshot, session), console=console, refresh_per_second=1) as live:
            try:
                while True:
                    time.sleep(args.interval)
                    snapshot = refresh(client, session, [])
                    live.update(render_dashboard(snapshot, session))
            except KeyboardInterrupt:
                pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
