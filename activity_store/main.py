from __future__ import annotations

import sys
from datetime import date
from enum import Enum
from typing import List, Optional

import typer

from activity_store.config import get_settings
from activity_store.forms import validate_activity_form
from activity_store.queries import SORTS, bookings_by_day, paginate, search_activities
from activity_store.reporter import (
    format_money,
    print_activities,
    print_activity,
    print_bookings,
    print_dashboard,
    print_payouts,
)
from activity_store.service import ActivityService
from activity_store.utils.logging import configure_logging

app = typer.Typer(help="Activity Store CLI: browse, book and manage supplier data.")


class ClearTarget(str, Enum):
    bookings = "bookings"
    payouts = "payouts"


class StatusChoice(str, Enum):
    paid = "paid"
    pending = "pending"
    scheduled = "scheduled"


def _service() -> ActivityService:
    return ActivityService.from_settings(get_settings())


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"storage={settings.storage_dir} | env={settings.app_env} | "
        f"sample bookings={settings.sample_bookings} payouts={settings.sample_payouts} | "
        f"write attempts={settings.write_attempts}"
    )


@app.command()
def activities(
    query: str = typer.Option("", "--query", "-q", help="Text to look for in name, description or category."),
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Restrict to category (repeatable)."),
    min_price: Optional[float] = typer.Option(None, "--min-price", help="Inclusive lower price bound."),
    max_price: Optional[float] = typer.Option(None, "--max-price", help="Inclusive upper price bound."),
    sort: str = typer.Option("relevance", "--sort", "-s", help=f"One of: {', '.join(SORTS)}."),
    page: int = typer.Option(1, "--page", "-p", min=1),
    page_size: int = typer.Option(9, "--page-size", min=1),
) -> None:
    """
    Search the catalogue.
    """
    if sort not in SORTS:
        raise typer.BadParameter(f"Unknown sort '{sort}'. Available: {', '.join(SORTS)}", param_hint="--sort")
    results = search_activities(
        _service().get_activities(),
        query=query,
        categories=category or (),
        price_min=min_price,
        price_max=max_price,
        sort=sort,
    )
    print_activities(paginate(results, page=page, page_size=page_size))


@app.command()
def show(activity_id: str = typer.Argument(..., help="Activity id.")) -> None:
    """
    Show one activity and its bookings.
    """
    service = _service()
    activity = service.get_activity(activity_id)
    if activity is None:
        typer.echo("Activity not found.", err=True)
        raise typer.Exit(code=1)
    print_activity(activity)
    related = [b for b in service.get_bookings() if b.activity_id == activity.id]
    print_bookings(related, title=f"Bookings for {activity.name}")


@app.command("add-activity")
def add_activity(
    name: str = typer.Option(..., "--name", "-n"),
    category: str = typer.Option(..., "--category", "-c"),
    price: str = typer.Option(..., "--price"),
    rating: Optional[str] = typer.Option(None, "--rating", help="0-5, optional."),
    image_url: str = typer.Option("", "--image-url", help="Optional; a placeholder is used if empty."),
    description: str = typer.Option("", "--description", "-d"),
) -> None:
    """
    Validate and save a new activity.
    """
    errors = validate_activity_form(name, category, price, rating)
    if errors:
        for field_name, message in errors.items():
            typer.echo(f"{field_name}: {message}", err=True)
        raise typer.Exit(code=2)

    service = _service()
    record = service.add_activity(
        {
            "name": name,
            "category": category,
            "price": float(price),
            "rating": float(rating) if rating not in (None, "") else 0,
            "imageUrl": image_url,
            "description": description,
        }
    )
    if service.get_activity(record.id) is None:
        typer.echo(f"An activity named '{record.name}' at {format_money(record.price)} already exists.")
        return
    typer.echo(f"Activity saved: {record.id}")


@app.command()
def book(
    activity_id: str = typer.Argument(..., help="Activity id to book."),
    customer: str = typer.Option("Customer", "--customer", "-u"),
    quantity: int = typer.Option(1, "--quantity", "-n", min=1),
    when: Optional[str] = typer.Option(None, "--date", help="ISO date or timestamp; defaults to now."),
) -> None:
    """
    Create a booking for an activity.
    """
    service = _service()
    activity = service.get_activity(activity_id)
    if activity is None:
        typer.echo(f"Warning: no activity with id '{activity_id}'; booking kept unlinked.", err=True)
    booking = service.add_booking(
        {
            "activityId": activity_id,
            "activityName": activity.name if activity else None,
            "customerName": customer,
            "quantity": quantity,
            "amount": quantity * activity.price if activity else 0,
            "date": when,
        }
    )
    typer.echo(f"Booking created: {booking.id} ({booking.quantity} pax, {format_money(booking.amount)})")


@app.command()
def bookings(
    day: Optional[str] = typer.Option(None, "--day", help="Only bookings on this date (YYYY-MM-DD)."),
) -> None:
    """
    List bookings, newest first.
    """
    items = _service().get_bookings()
    title = "Bookings"
    if day is not None:
        try:
            wanted = date.fromisoformat(day)
        except ValueError:
            raise typer.BadParameter("Expected YYYY-MM-DD", param_hint="--day") from None
        items = bookings_by_day(items).get(wanted, [])
        title = f"Bookings on {wanted.isoformat()}"
    print_bookings(items, title=title)


@app.command()
def payouts() -> None:
    """
    List payouts with their total.
    """
    print_payouts(_service().get_payouts())


@app.command("add-payout")
def add_payout(
    amount: float = typer.Option(..., "--amount", min=0),
    status: StatusChoice = typer.Option(StatusChoice.scheduled, "--status"),
    when: Optional[str] = typer.Option(None, "--date"),
) -> None:
    """
    Record a payout.
    """
    payout = _service().add_payout({"amount": amount, "status": status.value, "date": when})
    typer.echo(f"Payout recorded: {payout.id} ({payout.status}, {format_money(payout.amount)})")


@app.command()
def seed(
    bookings_count: Optional[int] = typer.Option(None, "--bookings", "-b", min=0, help="Defaults to settings."),
    payouts_count: Optional[int] = typer.Option(None, "--payouts", "-p", min=0, help="Defaults to settings."),
    replace: bool = typer.Option(False, "--replace", help="Discard existing bookings/payouts first."),
) -> None:
    """
    Generate sample bookings and payouts.
    """
    settings = get_settings()
    n_bookings = settings.sample_bookings if bookings_count is None else bookings_count
    n_payouts = settings.sample_payouts if payouts_count is None else payouts_count
    service = _service()
    service.seed_sample_bookings_and_payouts(bookings=n_bookings, payouts=n_payouts, replace=replace)
    typer.echo(
        f"Seeded {n_bookings} booking(s) and {n_payouts} payout(s)"
        f"{' (replaced)' if replace else ''}. "
        f"Now {len(service.get_bookings())} booking(s), {len(service.get_payouts())} payout(s)."
    )


@app.command()
def clear(target: ClearTarget = typer.Argument(..., help="Which store to empty.")) -> None:
    """
    Empty the bookings or payouts store.
    """
    service = _service()
    if target is ClearTarget.bookings:
        service.clear_bookings()
    else:
        service.clear_payouts()
    typer.echo(f"Cleared {target.value}.")


@app.command()
def dashboard() -> None:
    """
    Supplier overview.
    """
    service = _service()
    print_dashboard(service.get_activities(), service.get_bookings(), service.get_payouts())


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation.")) -> None:
    """
    Delete all stored data; activities are re-seeded on next read.
    """
    if not yes:
        typer.confirm("Delete all stored activities, bookings and payouts?", abort=True)
    _service().reset()
    typer.echo("Storage reset.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
