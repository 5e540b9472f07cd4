"""Command-line interface for Mise."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import TypeAdapter, ValidationError

from mise.config import get_settings
from mise.errors import KitchenError
from mise.models.inventory import InventoryItem
from mise.models.prep import PrepSheet
from mise.reconcile.deriver import build_prep_sheet
from mise.reconcile.ledger import ingredient_shortages, low_stock_items, search_inventory
from mise.reconcile.updater import apply_completed_tasks
from mise.store.fixtures import load_snapshot

app = typer.Typer(help="Mise kitchen inventory and prep-sheet commands.")

_INVENTORY_LIST = TypeAdapter(List[InventoryItem])


def _echo_json(payload: Any, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _parse_batches(values: List[str]) -> Dict[str, float]:
    batches: Dict[str, float] = {}
    for raw in values:
        recipe_id, sep, multiplier = raw.partition("=")
        if not sep or not recipe_id:
            raise typer.BadParameter(f"Expected RECIPE_ID=MULTIPLIER, got '{raw}'", param_hint="--batch")
        try:
            batches[recipe_id] = float(multiplier)
        except ValueError as exc:
            raise typer.BadParameter(f"Invalid multiplier '{multiplier}'", param_hint="--batch") from exc
    return batches


@app.command()
def inventory(
    low_stock: bool = typer.Option(False, "--low-stock", help="Only show items at or below their alert level."),
    search: Optional[str] = typer.Option(None, "--search", help="Case-insensitive name filter."),
    fixtures: Optional[Path] = typer.Option(None, "--fixtures", help="Kitchen fixtures JSON file."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """List inventory from the kitchen fixtures."""

    snapshot = load_snapshot(fixtures or get_settings().fixtures_path)
    items = search_inventory(snapshot.inventory, search)
    if low_stock:
        items = low_stock_items(items)
    _echo_json([item.model_dump(mode="json", by_alias=True) for item in items], pretty)


@app.command("prep-sheet")
def prep_sheet(
    batch: List[str] = typer.Option([], "--batch", help="Recipe batch as RECIPE_ID=MULTIPLIER; repeatable."),
    sheet_date: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"], help="Sheet date."),
    fixtures: Optional[Path] = typer.Option(None, "--fixtures", help="Kitchen fixtures JSON file."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Derive a prep sheet from the fixture recipes for the requested batches.
    """

    settings = get_settings()
    snapshot = load_snapshot(fixtures or settings.fixtures_path)
    batches = _parse_batches(batch)
    try:
        sheet = build_prep_sheet(
            snapshot.recipes,
            batches,
            sheet_date=sheet_date.date() if sheet_date else date.today(),
            default_minutes=settings.default_task_minutes,
        )
    except KitchenError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    _echo_json(sheet.model_dump(mode="json", by_alias=True), pretty)


@app.command()
def shortages(
    batch: List[str] = typer.Option([], "--batch", help="Recipe batch as RECIPE_ID=MULTIPLIER; repeatable."),
    fixtures: Optional[Path] = typer.Option(None, "--fixtures", help="Kitchen fixtures JSON file."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Report ingredients the requested batches need beyond the fixture inventory."""

    snapshot = load_snapshot(fixtures or get_settings().fixtures_path)
    batches = _parse_batches(batch)
    try:
        missing = ingredient_shortages(snapshot.recipes, batches, snapshot.inventory)
    except KitchenError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    _echo_json([entry.model_dump(mode="json", by_alias=True) for entry in missing], pretty)


@app.command()
def reconcile(
    inventory_path: Path = typer.Argument(..., help="Inventory JSON array."),
    sheet_path: Path = typer.Argument(..., help="Prep sheet JSON document."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Deduct the sheet's completed tasks from an inventory file and print the result."""

    try:
        items = _INVENTORY_LIST.validate_python(_read_json(inventory_path))
        sheet = PrepSheet.model_validate(_read_json(sheet_path))
    except (OSError, ValueError, ValidationError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    updated = apply_completed_tasks(items, sheet.tasks)
    _echo_json([item.model_dump(mode="json", by_alias=True) for item in updated], pretty)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `mise` console script."""
    app(prog_name="mise", args=argv)


if __name__ == "__main__":
    main()
