#!/usr/bin/env python3
"""
Quotie command line.

Usage:
    quotie add "Feelings are data." --author "Esther Perel" --source "Podcast"
    quotie list [--favorites] [--recent 10]
    quotie search grief [--category Books]
    quotie favorite <id>
    quotie delete <id>
    quotie resurface
    quotie today
    quotie status
    quotie snack [--source Songs] [--add 2]
    quotie widget [--enable | --disable]
    quotie nudge [--test] [--seconds 10]
    quotie deliver
"""

import argparse
import sys
from typing import List, Optional

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from .app import QuotieApp
from .codec import CURRENT_VERSION
from .config import QuotieConfig
from .daily_state import HUNGER_MAX
from .logging_setup import setup_logging
from .models import FontStyle, PastelStyle, Quote
from .notifications import FileNotificationCenter
from .search import SourceCategory, parse_quote_input
from .snacks import SnackSource, by_source, recommended


console = Console()

PANEL_COLORS = {
    PastelStyle.MINT: "aquamarine1",
    PastelStyle.BLUSH: "pink1",
    PastelStyle.LILAC: "plum1",
    PastelStyle.SKY: "sky_blue1",
    PastelStyle.PEACH: "light_salmon1",
    PastelStyle.BUTTER: "khaki1",
}


def hunger_bar(level: int) -> str:
    style = "green" if level > 3 else "yellow" if level > 1 else "red"
    return f"[{style}]{'●' * level}{'○' * (HUNGER_MAX - level)}[/{style}] {level}/{HUNGER_MAX}"


def quote_table(quotes: List[Quote], title: str) -> Table:
    table = Table(title=f"[bold]{title}[/bold]", box=ROUNDED, header_style="bold cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Quote")
    table.add_column("Author", style="cyan")
    table.add_column("Source")
    table.add_column("★", justify="center")
    for q in quotes:
        table.add_row(q.id[:8], q.text, q.author, q.source, "★" if q.is_favorite else "")
    return table


def quote_panel(quote: Quote, title: str) -> Panel:
    body = f"“{quote.text}”"
    if quote.author:
        body += f"\n[cyan]— {quote.author}[/cyan]"
    if quote.memmi_reaction:
        body += f"\n\n[magenta]Memmi:[/magenta] {quote.memmi_reaction}"
    return Panel(body, title=title, border_style=PANEL_COLORS[quote.color_style], box=ROUNDED)


def resolve_id(app: QuotieApp, prefix: str) -> Optional[str]:
    """Accept a full id or a unique prefix."""
    matches = [q.id for q in app.store.quotes if q.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        console.print(f"[red]No quote matches {prefix!r}[/red]")
    else:
        console.print(f"[yellow]{prefix!r} is ambiguous ({len(matches)} matches)[/yellow]")
    return None


# =============================================================================
# Commands
# =============================================================================

def cmd_add(app: QuotieApp, args) -> int:
    text, author, source = args.text, args.author, args.source
    if args.parse:
        parsed = parse_quote_input(text)
        if parsed is None:
            console.print("[red]Nothing to add[/red]")
            return 1
        text, author, source = parsed.text, parsed.author or author, parsed.source or source
    try:
        quote = app.add_quote(
            text,
            author=author,
            source=source,
            color_style=PastelStyle(args.color),
            font_style=FontStyle(args.font),
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return 1
    console.print(quote_panel(quote, "Saved"))
    console.print(f"Memmi: {hunger_bar(app.hunger.level)}")
    if app.store.last_save_error:
        console.print(f"[yellow]Not saved to disk: {app.store.last_save_error}[/yellow]")
    return 0


def cmd_list(app: QuotieApp, args) -> int:
    if args.favorites:
        console.print(quote_table(app.store.favorites(), "Favorites"))
    elif args.recent:
        console.print(quote_table(app.store.recent(args.recent), "Recent"))
    else:
        console.print(quote_table(app.store.quotes, "All quotes"))
    return 0


def cmd_search(app: QuotieApp, args) -> int:
    category = SourceCategory(args.category) if args.category else None
    results = app.store.search(args.query or "", category)
    console.print(quote_table(results, f"Results ({len(results)})"))
    return 0


def cmd_favorite(app: QuotieApp, args) -> int:
    quote_id = resolve_id(app, args.id)
    if quote_id is None:
        return 1
    app.store.toggle_favorite(quote_id)
    state = "favorited" if app.store.get(quote_id).is_favorite else "unfavorited"
    console.print(f"[green]Quote {quote_id[:8]} {state}[/green]")
    return 0


def cmd_delete(app: QuotieApp, args) -> int:
    quote_id = resolve_id(app, args.id)
    if quote_id is None:
        return 1
    app.store.delete(quote_id)
    console.print(f"[green]Deleted {quote_id[:8]}[/green]")
    return 0


def cmd_resurface(app: QuotieApp, args) -> int:
    quote = app.store.resurface()
    if quote is None:
        console.print("[yellow]Nothing to resurface yet[/yellow]")
        return 0
    console.print(quote_panel(quote, f"Resurfaced ×{quote.times_resurfaced}"))
    return 0


def cmd_today(app: QuotieApp, args) -> int:
    quote = app.store.quote_of_the_day()
    if quote is None:
        console.print("[yellow]No quotes yet[/yellow]")
        return 0
    console.print(quote_panel(quote, "Quote of the day"))
    return 0


def cmd_status(app: QuotieApp, args) -> int:
    table = Table(title="[bold]Quotie Status[/bold]", box=ROUNDED, show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Saved quotes", str(app.store.count))
    table.add_row("Favorites", str(len(app.store.favorites())))
    table.add_row("Storage version", str(CURRENT_VERSION))
    table.add_row("Loaded from", app.store.loaded_format.value if app.store.loaded_format else "-")
    table.add_row("Memmi hunger", hunger_bar(app.hunger.level))
    table.add_row("Nudge", app.nudges.status().value)
    for request in app.pending_nudges():
        table.add_row("Pending", f"{request.fire_at:%Y-%m-%d %H:%M} {request.body}")
    console.print(table)
    return 0


def cmd_snack(app: QuotieApp, args) -> int:
    source = SnackSource(args.source) if args.source else None
    snacks = by_source(source) if source else recommended()
    if args.add:
        for snack in snacks[:args.add]:
            app.add_snack(snack)
            console.print(f"[green]Added[/green] “{snack.text}” — {snack.author}")
        console.print(f"Memmi: {hunger_bar(app.hunger.level)}")
        return 0

    table = Table(title="[bold]Snack Bar[/bold]", box=ROUNDED, header_style="bold cyan")
    table.add_column("Quote")
    table.add_column("Author", style="cyan")
    table.add_column("From")
    table.add_column("Type", style="dim")
    for snack in snacks:
        table.add_row(snack.text, snack.author, snack.origin, snack.source.value)
    console.print(table)
    return 0


def cmd_widget(app: QuotieApp, args) -> int:
    from Widget.timeline import WidgetTimelineProvider

    if args.enable or args.disable:
        app.set_widget_enabled(bool(args.enable))

    timeline = WidgetTimelineProvider(app.shared_store).timeline()
    entry = timeline.entries[0]
    if entry.quote is None:
        console.print(Panel("Open Quotich and pick a quote for your widget.", title="No quote yet"))
    else:
        body = f"“{entry.quote.text}”"
        if entry.quote.author:
            body += f"\n— {entry.quote.author}"
        console.print(Panel(body, title="Widget", box=ROUNDED))
    console.print(f"[dim]Next refresh: {timeline.refresh_after:%Y-%m-%d %H:%M}[/dim]")
    return 0


def cmd_nudge(app: QuotieApp, args) -> int:
    if args.test:
        if not app.nudges.schedule_test_nudge(args.seconds):
            console.print("[yellow]Notifications are not permitted[/yellow]")
            return 1
        console.print(f"[green]Test nudge scheduled in {args.seconds:g}s[/green] (run `quotie deliver` to see it)")
        return 0

    console.print(f"Memmi: {hunger_bar(app.hunger.level)}")
    console.print(f"Nudge: {app.nudges.status().value}")
    for request in app.pending_nudges():
        console.print(f"  {request.fire_at:%Y-%m-%d %H:%M} ({request.identifier}) {request.body}")
    return 0


def cmd_deliver(app: QuotieApp, args) -> int:
    center = app.nudges.center
    if not isinstance(center, FileNotificationCenter):
        return 0
    for request in center.deliver_due(app.store.clock()):
        console.print(Panel(request.body, title=request.title, border_style="magenta"))
    return 0


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "search": cmd_search,
    "favorite": cmd_favorite,
    "delete": cmd_delete,
    "resurface": cmd_resurface,
    "today": cmd_today,
    "status": cmd_status,
    "snack": cmd_snack,
    "widget": cmd_widget,
    "nudge": cmd_nudge,
    "deliver": cmd_deliver,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quotie", description="Quotie - your quote journal")
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Save a quote")
    add.add_argument("text")
    add.add_argument("--author", default="")
    add.add_argument("--source", default="")
    add.add_argument("--color", default=PastelStyle.MINT.value, choices=[s.value for s in PastelStyle])
    add.add_argument("--font", default=FontStyle.ROUNDED.value, choices=[s.value for s in FontStyle])
    add.add_argument("--parse", action="store_true", help='Split "Text. By Author. Source"')

    lst = sub.add_parser("list", help="List quotes")
    lst.add_argument("--favorites", action="store_true")
    lst.add_argument("--recent", type=int, default=0)

    search = sub.add_parser("search", help="Search quotes")
    search.add_argument("query", nargs="?", default="")
    search.add_argument("--category", choices=[c.value for c in SourceCategory])

    fav = sub.add_parser("favorite", help="Toggle favorite")
    fav.add_argument("id")

    delete = sub.add_parser("delete", help="Delete a quote")
    delete.add_argument("id")

    sub.add_parser("resurface", help="Bring back a past quote")
    sub.add_parser("today", help="Show the quote of the day")
    sub.add_parser("status", help="Collection and Memmi status")

    snack = sub.add_parser("snack", help="Browse the snack library")
    snack.add_argument("--source", choices=[s.value for s in SnackSource])
    snack.add_argument("--add", type=int, default=0, help="Add the first N snacks")

    widget = sub.add_parser("widget", help="Preview the widget")
    toggle = widget.add_mutually_exclusive_group()
    toggle.add_argument("--enable", action="store_true")
    toggle.add_argument("--disable", action="store_true")

    nudge = sub.add_parser("nudge", help="Show the hungry nudge, or schedule a test one")
    nudge.add_argument("--test", action="store_true", help="Schedule a test nudge")
    nudge.add_argument("--seconds", type=float, default=10, help="Delay for --test")

    sub.add_parser("deliver", help="Show notifications that are due")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = QuotieConfig.from_env(env_file=args.env_file)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 2

    setup_logging(config.log_path, verbose=args.verbose)

    app = QuotieApp.from_config(
        config,
        permission_prompt=lambda: Confirm.ask("Allow Memmi to send you reminders?", default=True),
    )
    app.on_launch()
    return COMMANDS[args.command](app, args)


if __name__ == "__main__":
    sys.exit(main())
