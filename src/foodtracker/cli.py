"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from foodtracker.config import Settings, get_settings
from foodtracker.config.settings import _default_config_dir
from foodtracker.meals import (
    MAX_RATING,
    Meal,
    MealListDisplay,
    MealListManager,
    NullDisplay,
)
from foodtracker.storage import MealStore, get_store, set_store

app = typer.Typer(
    help="Keep a list of meals you have rated, with search and editing",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Manage configuration")
app.add_typer(config_app, name="config")


# ============================================================================
# Display and helpers
# ============================================================================


class ConsoleDisplay(MealListDisplay):
    """Reports row changes on the terminal. Rows are shown 1-based."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def reload_data(self) -> None:
        pass

    def rows_inserted(self, rows: list[int]) -> None:
        self.console.print(f"[dim]Inserted row {_row_labels(rows)}[/dim]")

    def rows_deleted(self, rows: list[int]) -> None:
        self.console.print(f"[dim]Removed row {_row_labels(rows)}[/dim]")

    def rows_reloaded(self, rows: list[int]) -> None:
        self.console.print(f"[dim]Updated row {_row_labels(rows)}[/dim]")


def _row_labels(rows: list[int]) -> str:
    return ", ".join(str(row + 1) for row in rows)


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def format_rating(rating: int) -> str:
    """Render a rating as filled and empty stars."""
    return "★" * rating + "☆" * (MAX_RATING - rating)


def meal_to_dict(meal: Meal, row: Optional[int] = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": meal.name,
        "rating": meal.rating,
        "has_photo": meal.has_photo,
    }
    if row is not None:
        data["row"] = row + 1
    return data


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings (first call wins)."""
    logging.basicConfig(
        level=getattr(logging, settings.logging.level.upper(), logging.WARNING),
        format=settings.logging.format,
    )


def open_manager(
    search: Optional[str] = None,
    scope: Optional[str] = None,
    display: Optional[MealListDisplay] = None,
) -> MealListManager:
    """Load the meal list and apply a search, if one was given.

    Raises typer.Exit(1) with a friendly message for an unknown scope.
    """
    settings = get_settings()
    try:
        manager = MealListManager(
            get_store(),
            display=display,
            rating_match=settings.search.rating_match,
            default_scope=settings.search.default_scope,
        )
        manager.load()
        if search is not None or scope is not None:
            manager.update_search(text=search or "", scope=scope, active=True)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return manager


def resolve_row(manager: MealListManager, row: int) -> int:
    """Convert a 1-based row from the command line to a visible index.

    Raises typer.Exit(1) if the row is not displayed.
    """
    count = manager.row_count()
    if row < 1 or row > count:
        if count == 0:
            console.print("[red]No meals are displayed[/red]")
        else:
            console.print(f"[red]Row {row} is out of range (1-{count})[/red]")
        raise typer.Exit(1)
    return row - 1


def read_photo(photo: Optional[Path]) -> Optional[bytes]:
    """Read photo bytes from a file, exiting on a missing file."""
    if photo is None:
        return None
    if not photo.is_file():
        console.print(f"[red]Photo file not found: {photo}[/red]")
        raise typer.Exit(1)
    return photo.read_bytes()


def build_meal(**fields: Any) -> Meal:
    """Construct a meal from user input, exiting on invalid fields."""
    try:
        return Meal(**fields)
    except ValueError as e:
        console.print(f"[red]Invalid meal: {e}[/red]")
        raise typer.Exit(1)


def _display_for(json_output: bool) -> MealListDisplay:
    return NullDisplay() if json_output else ConsoleDisplay(console)


SEARCH_HELP = "Search text; rows then refer to the filtered list"
SCOPE_HELP = "Search scope: name or rating"


@app.callback()
def main(
    data: Optional[Path] = typer.Option(
        None, "--data", help="Custom meal archive path"
    ),
) -> None:
    """Configure logging and the meal archive before any command."""
    configure_logging(get_settings())
    if data is not None:
        set_store(MealStore(data.expanduser()))


# ============================================================================
# Main Commands
# ============================================================================


@app.command("list")
def list_meals(
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    scope: Optional[str] = typer.Option(None, "--scope", help=SCOPE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List meals, optionally filtered by a search."""
    manager = open_manager(search, scope)
    meals = manager.visible_meals()

    if json_output:
        output_json({
            "success": True,
            "command": "list",
            "data": {
                "search": manager.search.text if manager.is_filtering() else None,
                "scope": manager.search.scope.value,
                "meals": [meal_to_dict(meal, row) for row, meal in enumerate(meals)],
                "total": len(manager.meals),
            },
            "human_summary": f"Showing {len(meals)} of {len(manager.meals)} meals",
        })
        return

    if not meals:
        if manager.is_filtering():
            console.print(f"[yellow]No meals matching '{manager.search.text}'[/yellow]")
        else:
            console.print("[yellow]No meals yet[/yellow]")
        return

    title = "Meals"
    if manager.is_filtering():
        title = f"Meals matching '{manager.search.text}' ({manager.search.scope.value})"

    table = Table(title=title)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Rating", style="yellow")
    table.add_column("Photo", style="dim", justify="center")

    for row, meal in enumerate(meals):
        table.add_row(
            str(row + 1),
            meal.name,
            format_rating(meal.rating),
            "yes" if meal.has_photo else "-",
        )

    console.print(table)
    console.print(f"[dim]Showing {len(meals)} of {len(manager.meals)} meals[/dim]")


@app.command()
def show(
    row: int = typer.Argument(..., help="Row number as shown by 'list'"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    scope: Optional[str] = typer.Option(None, "--scope", help=SCOPE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show one meal."""
    manager = open_manager(search, scope)
    index = resolve_row(manager, row)
    meal = manager.row_at(index)

    if json_output:
        data = meal_to_dict(meal, index)
        if meal.photo is not None:
            data["photo_bytes"] = len(meal.photo)
        output_json({
            "success": True,
            "command": "show",
            "data": data,
            "human_summary": f"{meal.name} ({meal.rating}/{MAX_RATING})",
        })
        return

    lines = [
        f"[bold]{meal.name}[/bold]",
        f"Rating: [yellow]{format_rating(meal.rating)}[/yellow] ({meal.rating}/{MAX_RATING})",
    ]
    if meal.photo is not None:
        lines.append(f"Photo: {len(meal.photo)} bytes")
    else:
        lines.append("Photo: [dim]none[/dim]")
    console.print(Panel("\n".join(lines), title=f"Meal #{row}"))


@app.command()
def add(
    name: str = typer.Argument(..., help="Meal name"),
    rating: int = typer.Option(0, "--rating", "-r", help=f"Rating from 0 to {MAX_RATING}"),
    photo: Optional[Path] = typer.Option(None, "--photo", "-p", help="Image file"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    scope: Optional[str] = typer.Option(None, "--scope", help=SCOPE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a new meal."""
    meal = build_meal(name=name, rating=rating, photo=read_photo(photo))
    manager = open_manager(search, scope, _display_for(json_output))
    new_row = manager.upsert(meal)

    if json_output:
        output_json({
            "success": True,
            "command": "add",
            "data": {
                "meal": meal_to_dict(meal, new_row),
                "visible": new_row is not None,
                "total": len(manager.meals),
            },
            "human_summary": f"Added '{meal.name}'",
        })
        return

    console.print(f"[green]Added '{meal.name}' ({format_rating(meal.rating)})[/green]")
    if new_row is None:
        console.print("[dim]It does not match the current search[/dim]")


@app.command()
def edit(
    row: int = typer.Argument(..., help="Row number as shown by 'list'"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    rating: Optional[int] = typer.Option(None, "--rating", "-r", help="New rating"),
    photo: Optional[Path] = typer.Option(None, "--photo", "-p", help="New image file"),
    clear_photo: bool = typer.Option(False, "--clear-photo", help="Remove the photo"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    scope: Optional[str] = typer.Option(None, "--scope", help=SCOPE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Edit the meal at a row."""
    if photo is not None and clear_photo:
        console.print("[red]Use either --photo or --clear-photo, not both[/red]")
        raise typer.Exit(1)

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if rating is not None:
        changes["rating"] = rating
    if photo is not None:
        changes["photo"] = read_photo(photo)
    if clear_photo:
        changes["photo"] = None

    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    manager = open_manager(search, scope, _display_for(json_output))
    index = resolve_row(manager, row)
    original = manager.row_at(index)
    try:
        meal = original.with_changes(**changes)
    except ValueError as e:
        console.print(f"[red]Invalid meal: {e}[/red]")
        raise typer.Exit(1)

    new_row = manager.upsert(meal, index)

    if json_output:
        output_json({
            "success": True,
            "command": "edit",
            "data": {
                "before": meal_to_dict(original, index),
                "after": meal_to_dict(meal, new_row),
                "visible": new_row is not None,
            },
            "human_summary": f"Updated '{meal.name}'",
        })
        return

    console.print(f"[green]Updated '{meal.name}' ({format_rating(meal.rating)})[/green]")
    if new_row is None:
        console.print("[dim]It no longer matches the current search[/dim]")


@app.command()
def delete(
    row: int = typer.Argument(..., help="Row number as shown by 'list'"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    scope: Optional[str] = typer.Option(None, "--scope", help=SCOPE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete the meal at a row."""
    manager = open_manager(search, scope, _display_for(json_output))
    index = resolve_row(manager, row)
    meal = manager.delete(index)

    if json_output:
        output_json({
            "success": True,
            "command": "delete",
            "data": {
                "meal": meal_to_dict(meal),
                "total": len(manager.meals),
            },
            "human_summary": f"Deleted '{meal.name}'",
        })
        return

    console.print(f"[green]Deleted '{meal.name}'[/green]")


# ============================================================================
# Config Subcommands
# ============================================================================


@config_app.command("show")
def config_show() -> None:
    """Show the active configuration."""
    settings = get_settings()

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("storage.path", str(settings.storage.path))
    table.add_row("search.rating_match", settings.search.rating_match)
    table.add_row("search.default_scope", settings.search.default_scope)
    table.add_row("logging.level", settings.logging.level)

    console.print(table)
    console.print(f"[dim]Meal archive in use: {get_store().path}[/dim]")


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(
        None, "--path", help="Where to write config.yaml"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing file"),
) -> None:
    """Write a config.yaml with default values."""
    target = path or (_default_config_dir() / "config.yaml")
    if target.exists() and not force:
        console.print(f"[yellow]Config already exists: {target}[/yellow]")
        console.print("Use [cyan]--force[/cyan] to overwrite")
        raise typer.Exit(1)

    Settings().save(target)
    console.print(f"[green]Wrote default config to {target}[/green]")


if __name__ == "__main__":
    app()
