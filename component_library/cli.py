"""Command-line interface for managing uploaded components."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import create_store
from .core.config import Settings, get_settings
from .core.logging_config import configure_from_settings
from .library.catalog import category_display_name, format_size_kb, group_by_category
from .storage.store import ComponentStore
from .upload import ComponentUploader, UploadedFile
from .validation.validator import validate_and_parse_json, validate_file

app = typer.Typer(help="Upload, list and remove custom library components")
console = Console()

_state: dict[str, Settings] = {}


def _settings() -> Settings:
    return _state.get("settings") or get_settings()


def _store() -> ComponentStore:
    return create_store(_settings())


@app.callback()
def main(
    storage_dir: Optional[Path] = typer.Option(
        None, "--storage-dir", help="Directory holding the component ledger"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
):
    """Configure settings and logging for all commands."""
    settings = get_settings()
    updates = {}
    if storage_dir is not None:
        updates["storage_dir"] = storage_dir
    if log_level is not None:
        updates["log_level"] = log_level
    settings = settings.model_copy(update=updates)
    _state["settings"] = settings
    configure_from_settings(settings)


def _print_warnings(warnings) -> None:
    for warning in warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")


@app.command()
def validate(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Component file")):
    """Validate a component file without storing it."""
    file = UploadedFile.from_path(path)
    file_check = validate_file(file.descriptor, max_size_bytes=_settings().max_item_bytes)
    result = file_check
    warnings = list(file_check.warnings)
    if file_check.is_valid:
        result = validate_and_parse_json(path.read_bytes(), max_depth=_settings().max_json_depth)
        warnings.extend(result.warnings)

    _print_warnings(warnings)
    if not result.is_valid:
        for issue in result.errors:
            console.print(f"[red]{issue.kind.value}:[/red] {issue.message}")
        raise typer.Exit(code=1)

    component = result.normalized_component
    console.print(f"[green]valid[/green] {component.metadata.type} ({component.metadata.name})")


@app.command()
def upload(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Component file")):
    """Validate and store a component file."""
    uploader = ComponentUploader(_store())
    outcome = asyncio.run(uploader.upload(UploadedFile.from_path(path)))

    _print_warnings(outcome.warnings)
    if not outcome.success:
        for error in outcome.errors:
            console.print(f"[red]error:[/red] {error}")
        raise typer.Exit(code=1)

    console.print(f"[green]{outcome.message}[/green] id={outcome.component.id}")


@app.command("list")
def list_components():
    """List stored components grouped by category."""
    store = _store()
    entries = store.load_all()
    usage = store.get_usage()

    table = Table(title=f"Uploaded Components ({usage.component_count})")
    table.add_column("Category")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("File")
    table.add_column("Size")
    table.add_column("Uploaded")
    for category, items in group_by_category(entries).items():
        for entry in items:
            table.add_row(
                category_display_name(category),
                entry.id,
                entry.component.metadata.name,
                entry.component.metadata.type,
                entry.original_filename or "-",
                format_size_kb(entry.size_bytes),
                entry.uploaded_at.strftime("%Y-%m-%d %H:%M"),
            )
    console.print(table)
    console.print(f"{usage.current_size_mb}MB / {usage.max_size_mb}MB used")


@app.command()
def remove(component_id: str = typer.Argument(..., help="Id of the component to remove")):
    """Remove a stored component."""
    if not _store().remove(component_id):
        console.print(f"[red]error:[/red] No component removed for id '{component_id}'")
        raise typer.Exit(code=1)
    console.print(f"[green]removed[/green] {component_id}")


@app.command()
def usage():
    """Show storage usage."""
    info = _store().get_usage()
    console.print(
        f"{info.current_size_mb}MB / {info.max_size_mb}MB used, "
        f"{info.available_mb}MB available, {info.component_count} components"
    )
    if info.near_capacity:
        console.print(f"[yellow]Storage is {info.percent_used:.0f}% full[/yellow]")


if __name__ == "__main__":
    app()
