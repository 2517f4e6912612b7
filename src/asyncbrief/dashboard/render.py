"""Rich renderables for the terminal dashboard."""

from datetime import datetime
from typing import Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .client import DashboardSnapshot
from .state import DashboardSession


def format_ts(ts: Optional[str]) -> str:
    try:
        return datetime.fromtimestamp(float(ts)).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return ts or "?"


def render_summary(snapshot: DashboardSnapshot) -> Panel:
    return Panel(snapshot.summary, title="Summary", border_style="blue")


def render_sentiment(snapshot: DashboardSnapshot) -> Panel:
    sentiment = snapshot.sentiment
    if sentiment is None:
        body = Text("No sentiment available.", style="dim")
    else:
        color = "green" if sentiment.score >= 7 else "yellow" if sentiment.score >= 4 else "red"
        body = Text.assemble((f"{sentiment.score}/10", f"bold {color}"), "  ", sentiment.summary)
    return Panel(body, title="Sentiment", border_style="magenta")


def render_action_items(snapshot: DashboardSnapshot, session: DashboardSession) -> Panel:
    if not snapshot.action_items:
        return Panel(Text("No action items.", style="dim"), title="Action Items", border_style="green")

    lines = []
    for item in snapshot.action_items:
        done = session.checklist.is_done(item.task)
        box = "[x]" if done else "[ ]"
        owner = f" ({item.suggestedOwner})" if item.suggestedOwner else ""
        lines.append(Text(f"{box} {item.task}{owner}", style="strike dim" if done else ""))
    return Panel(Group(*lines), title="Action Items", border_style="green")


def render_messages(snapshot: DashboardSnapshot) -> Panel:
    if not snapshot.messages:
        return Panel(Text("No messages yet.", style="dim"), title="Recent Slack Messages")

    flagged = snapshot.flagged_by_ts()
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("", width=2)
    table.add_column("Message", ratio=3)
    table.add_column("User")
    table.add_column("Time")
    for message in snapshot.messages:
        reason = flagged.get(message.ts)
        text = Text(message.text or "")
        if reason:
            text.append(f"\n  {reason}", style="italic yellow")
        table.add_row("!" if reason else "", text, message.user or "?", format_ts(message.ts),
                      style="on grey15" if reason else None)
    return Panel(table, title="Recent Slack Messages")


def render_notifications(session: DashboardSession) -> Optional[Panel]:
    if not session.notifier.notifications:
        return None
    n = session.notifier.notifications[0]
    return Panel(n.description or n.title, title=n.title, border_style="red" if n.variant == "destructive" else "white")


def render_dashboard(snapshot: DashboardSnapshot, session: DashboardSession) -> Group:
    parts = [
        render_summary(snapshot),
        render_sentiment(snapshot),
        render_action_items(snapshot, session),
        render_messages(snapshot),
    ]
    notifications = render_notifications(session)
    if notifications is not None:
        parts.insert(0, notifications)
    return Group(*parts)
