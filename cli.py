#!/usr/bin/env python3
"""
Peer Review - terminal views over the JSON store.

Read-only: progression stats, review queues, the leaderboard,
calendar sync peers and visible calendar events.
"""

import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from config import get_settings
from repositories import JsonRepository
from workflow import WorkflowEngine, WorkflowError

console = Console()


def show_stats(engine: WorkflowEngine, username: str):
    """Show a user's progression summary"""
    user = engine.catalog.find_user(username)
    stats = engine.user_stats(user.id)

    console.print(Panel.fit(
        f"[bold]{stats.username}[/bold]\n"
        f"Level: {stats.level}  ({stats.total_experience} XP)\n"
        f"PRP points: {stats.points}\n"
        f"Submissions: {stats.submissions_count} ({stats.completed_submissions} completed)\n"
        f"Reviews written: {stats.reviews_count}\n"
        f"Average rating given: {stats.average_rating_given:.2f}",
        title="Progression"
    ))


def show_queue(engine: WorkflowEngine, username: str):
    """Show submissions waiting for this user's review"""
    user = engine.catalog.find_user(username)
    queue = sorted(engine.pending_for(user.id), key=lambda s: s.id)

    if not queue:
        console.print(f"[dim]Nothing to review for {user.username}[/dim]")
        return

    table = Table(title=f"Review queue for {user.username}", box=box.ROUNDED)
    table.add_column("ID", justify="right")
    table.add_column("Assignment", justify="right")
    table.add_column("Reviews", justify="center")
    table.add_column("Content")

    for submission in queue:
        table.add_row(
            str(submission.id),
            str(submission.assignment_id),
            f"{submission.reviews_received}/{submission.reviews_required}",
            submission.content[:60],
        )
    console.print(table)


def show_leaderboard(engine: WorkflowEngine, limit: int):
    """Show top users by PRP points"""
    table = Table(title="Leaderboard", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("User")
    table.add_column("PRP", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("XP", justify="right")

    for rank, user in enumerate(engine.leaderboard(limit), 1):
        table.add_row(str(rank), user.username, str(user.points), str(user.level), str(user.total_experience))
    console.print(table)


def show_peers(engine: WorkflowEngine, username: str):
    """Show synced calendar peers and pending requests"""
    user = engine.catalog.find_user(username)
    peers = engine.synced_peers(user.id)
    incoming = engine.sync.incoming(user.id)

    if peers:
        console.print(f"[bold]Synced with:[/bold] {', '.join(p.username for p in peers)}")
    else:
        console.print("[dim]No synced peers[/dim]")

    for request in incoming:
        sender = engine.repo.users.get(request.from_user_id)
        name = sender.username if sender else f"user {request.from_user_id}"
        console.print(f"  [yellow]pending[/yellow] request #{request.id} from {name}")


def show_calendar(engine: WorkflowEngine, username: str):
    """Show own events and shared events of synced peers"""
    user = engine.catalog.find_user(username)
    events = engine.visible_events(user.id)

    if not events:
        console.print(f"[dim]No events for {user.username}[/dim]")
        return

    table = Table(title=f"Calendar for {user.username}", box=box.ROUNDED)
    table.add_column("When")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Owner")

    for event in events:
        owner = "you" if event.user_id == user.id else engine.catalog.get_user(event.user_id).username
        table.add_row(
            f"{event.start:%Y-%m-%d %H:%M} - {event.end:%H:%M}",
            event.type.value,
            event.title,
            owner,
        )
    console.print(table)


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(
        description="Peer review progression views",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peer-review --stats alice        # Points, level and counts
  peer-review --queue alice        # Submissions alice can review
  peer-review --leaderboard        # Top reviewers
  peer-review --peers alice        # Calendar sync peers
  peer-review --calendar alice     # Own and shared peer events
        """
    )
    parser.add_argument("--data", type=Path, help="Data directory (default from settings)")
    parser.add_argument("--stats", metavar="USER", help="Show user stats")
    parser.add_argument("--queue", metavar="USER", help="Show review queue")
    parser.add_argument("--leaderboard", "-l", action="store_true", help="Show leaderboard")
    parser.add_argument("--limit", type=int, default=10, help="Leaderboard size")
    parser.add_argument("--peers", metavar="USER", help="Show synced peers")
    parser.add_argument("--calendar", metavar="USER", help="Show visible calendar events")

    args = parser.parse_args(argv)

    settings = get_settings()
    engine = WorkflowEngine(JsonRepository(base_path=args.data or settings.data_dir), settings)

    try:
        if args.stats:
            show_stats(engine, args.stats)
        elif args.queue:
            show_queue(engine, args.queue)
        elif args.leaderboard:
            show_leaderboard(engine, args.limit)
        elif args.peers:
            show_peers(engine, args.peers)
        elif args.calendar:
            show_calendar(engine, args.calendar)
        else:
            parser.print_help()
    except WorkflowError as e:
        console.print(f"[red]{e.message}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
