from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from activity_store.domain.models import Activity, Booking, Payout
from activity_store.queries import Page, featured, top_categories, total_payout, total_revenue, trending

STATUS_STYLES = {"paid": "green", "pending": "yellow", "scheduled": "cyan"}


def format_money(amount: float) -> str:
    return f"₹{amount:,.0f}" if float(amount).is_integer() else f"₹{amount:,.2f}"


def format_date(value: datetime) -> str:
    return value.strftime("%d %b %Y")


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def activities_table(activities: Sequence[Activity], title: str = "Activities") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="bold green")
    table.add_column("Rating", justify="right", style="yellow")
    for a in activities:
        table.add_row(a.id, a.name, a.category or "Uncategorized", format_money(a.price), f"{a.rating:.1f}")
    return table


def print_activities(page: Page[Activity], console: Optional[Console] = None) -> None:
    """
    Render one page of activities, with the page position as caption.
    """
    out = _console(console)
    if not page.items:
        out.print("[yellow]No activities match.[/yellow]")
        return
    table = activities_table(page.items)
    table.caption = f"Page {page.page}/{page.total_pages} · {page.total_items} result(s)"
    out.print(table)


def print_activity(activity: Activity, console: Optional[Console] = None) -> None:
    out = _console(console)
    out.print(f"[bold]{activity.name or '(untitled)'}[/bold]  [dim]{activity.id}[/dim]")
    out.print(f"{activity.category or 'Uncategorized'} · {format_money(activity.price)} · ★ {activity.rating:.1f}")
    if activity.description:
        out.print(activity.description)
    out.print(f"[dim]{activity.image_url}[/dim]")


def print_bookings(
    bookings: Sequence[Booking], title: str = "Bookings", console: Optional[Console] = None
) -> None:
    out = _console(console)
    if not bookings:
        out.print("[yellow]No bookings.[/yellow]")
        return
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Activity")
    table.add_column("Customer", style="magenta")
    table.add_column("Pax", justify="right")
    table.add_column("Amount", justify="right", style="bold green")
    for b in bookings:
        table.add_row(format_date(b.date), b.activity_name, b.customer_name, str(b.quantity), format_money(b.amount))
    out.print(table)


def print_payouts(payouts: Sequence[Payout], console: Optional[Console] = None) -> None:
    out = _console(console)
    if not payouts:
        out.print("[yellow]No payouts yet.[/yellow]")
        return
    table = Table(title="Payouts", box=box.ROUNDED, caption=f"Total: {format_money(total_payout(payouts))}")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Amount", justify="right", style="bold green")
    for p in payouts:
        style = STATUS_STYLES.get(p.status, "white")
        table.add_row(format_date(p.date), f"[{style}]{p.status}[/{style}]", format_money(p.amount))
    out.print(table)


def print_dashboard(
    activities: List[Activity],
    bookings: List[Booking],
    payouts: List[Payout],
    now: Optional[datetime] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Supplier overview: headline totals, top categories, featured and trending.
    """
    out = _console(console)

    summary = Table(title="Supplier Dashboard", box=box.ROUNDED, show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right", style="bold")
    summary.add_row("Activities", str(len(activities)))
    summary.add_row("Bookings", str(len(bookings)))
    summary.add_row("Seats booked", str(sum(b.quantity for b in bookings)))
    summary.add_row("Booking revenue", format_money(total_revenue(bookings)))
    summary.add_row("Payouts", format_money(total_payout(payouts)))
    out.print(summary)

    cats = top_categories(activities)
    if cats:
        out.print("Top categories: " + ", ".join(f"{name} ({count})" for name, count in cats))

    out.print(activities_table(featured(activities), title="Featured"))
    out.print(activities_table(trending(activities, bookings, now=now), title="Trending (30 days)"))


__all__ = [
    "activities_table",
    "format_date",
    "format_money",
    "print_activities",
    "print_activity",
    "print_bookings",
    "print_dashboard",
    "print_payouts",
]
