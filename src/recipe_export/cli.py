"""CLI for managing, exporting and importing saved recipes."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from .config import AppSettings, settings
from .exceptions import RecipeExportError
from .exporter import Exporter
from .importer import Importer, ImportMode
from .observability import setup_structured_logging
from .platform import DirectoryFileSaver, EchoNotifier
from .storage import FileStorage, MemoryStorage
from .store import RecipeStore

app = typer.Typer(help="Save, export and import data-transformation recipes")


def build_store(app_settings: AppSettings, storage_dir: Optional[Path] = None) -> RecipeStore:
    """Create a RecipeStore on the configured storage backend."""
    if storage_dir is not None:
        return RecipeStore(FileStorage(storage_dir))
    if app_settings.storage.backend == "memory":
        return RecipeStore(MemoryStorage())
    return RecipeStore(FileStorage(app_settings.get_storage_dir()))


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="Directory holding saved recipes"),
) -> None:
    """Recipe persistence and export."""
    setup_structured_logging(settings.log.level, json=settings.log.json_output)
    ctx.obj = build_store(settings, storage_dir)


@app.command()
def save(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name for the recipe"),
    recipe: str = typer.Argument(..., help="Serialized recipe steps"),
) -> None:
    """Save a new recipe."""
    store: RecipeStore = ctx.obj
    try:
        saved = store.save(name, recipe)
    except ValidationError as e:
        _fail(f"Invalid recipe: {e.errors()[0]['msg']}")
    except RecipeExportError as e:
        _fail(str(e))
    else:
        typer.echo(f"Saved recipe {saved.id}: {saved.name}")


@app.command("list")
def list_recipes(ctx: typer.Context) -> None:
    """List saved recipes."""
    store: RecipeStore = ctx.obj
    try:
        collection = store.load_all()
    except RecipeExportError as e:
        _fail(str(e))

    if not collection:
        typer.echo("No saved recipes.")
        return
    for recipe in collection:
        typer.echo(f"{recipe.id}\t{recipe.name}\t{recipe.recipe}")


@app.command()
def delete(
    ctx: typer.Context,
    recipe_id: int = typer.Argument(..., help="Id of the recipe to delete"),
) -> None:
    """Delete a saved recipe."""
    store: RecipeStore = ctx.obj
    try:
        deleted = store.delete(recipe_id)
    except RecipeExportError as e:
        _fail(str(e))

    if not deleted:
        _fail(f"No recipe with id {recipe_id}")
    typer.echo(f"Deleted recipe {recipe_id}")


@app.command()
def export(
    ctx: typer.Context,
    to: Optional[Path] = typer.Option(None, "--to", "-o", help="Directory to save the export into"),
) -> None:
    """Export all saved recipes to CyberChefExport.json."""
    store: RecipeStore = ctx.obj
    directory = to.expanduser() if to is not None else settings.get_download_dir()
    exporter = Exporter(store, DirectoryFileSaver(directory), EchoNotifier())
    try:
        exporter.export_click()
    except RecipeExportError as e:
        _fail(str(e))


@app.command("import")
def import_(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Previously exported file"),
    merge: bool = typer.Option(False, "--merge", help="Append to saved recipes instead of replacing them"),
) -> None:
    """Import recipes from an exported file."""
    store: RecipeStore = ctx.obj
    mode = ImportMode.MERGE if merge else ImportMode.REPLACE
    try:
        result = Importer(store).import_file(path, mode)
    except RecipeExportError as e:
        _fail(str(e))
    typer.echo(f"Imported recipes ({mode.value}), {len(result)} saved.")


@app.command()
def config() -> None:
    """Show current configuration."""
    print(f"Storage backend: {settings.storage.backend}")
    print(f"Storage directory: {settings.get_storage_dir()}")
    print(f"Export directory: {settings.export.directory or '(~/Downloads)'}")
    print(f"Log level: {settings.log.level}")


if __name__ == "__main__":
    app()
