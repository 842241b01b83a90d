"""tome command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import anyio
import typer

from tome import __version__
from tome.cli.cli_types import DataDirOption, LibraryArgument
from tome.config.settings import get_settings
from tome.errors import CatalogValidationError, StorageError
from tome.library.libraries import CONTENT_KINDS, Libraries, LibraryType
from tome.library.library import Library
from tome.library.reference import ReferenceLibrary
from tome.util.logging import configure_logging

app = typer.Typer(help="tome - stat block, character, encounter and spell libraries")


def _build_libraries(data_dir: Path | None) -> Libraries:
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    configure_logging(settings.log_level, settings.log_file)
    return Libraries.from_settings(settings)


def _library(libraries: Libraries, library_type: LibraryType) -> Library[Any]:
    library = libraries.get_library(library_type)
    if library is None:
        typer.secho(f"Unknown library: {library_type}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    return library


@app.command()
def version() -> None:
    """Show CLI version."""
    typer.echo(f"tome v{__version__}")


@app.command("list")
def list_listings(library_type: LibraryArgument, data_dir: DataDirOption = None) -> None:
    """List the items of a library with their origin."""
    libraries = _build_libraries(data_dir)
    library = _library(libraries, library_type)
    try:
        anyio.run(library.load)
    except StorageError as exc:
        typer.secho(f"Could not load {library.store_name}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    for listing in library.get_all_listings():
        meta = listing.meta()
        location = f"{meta.path}/{meta.name}" if meta.path else meta.name
        typer.echo(f"{meta.id}\t{listing.origin.value}\t{location}")


@app.command()
def delete(
    library_type: LibraryArgument,
    item_id: Annotated[str, typer.Argument(help="Id of the item to delete.")],
    data_dir: DataDirOption = None,
) -> None:
    """Delete an item locally and, when signed in, from the account."""
    libraries = _build_libraries(data_dir)
    library = _library(libraries, library_type)

    async def _delete() -> bool:
        await library.load()
        if library.get_listing(item_id) is None:
            return False
        await library.delete_listing(item_id)
        return True

    try:
        deleted = anyio.run(_delete)
    except StorageError as exc:
        typer.secho(f"Could not delete {item_id}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    if not deleted:
        typer.secho(f"No item {item_id} in {library.store_name}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {item_id}")


@app.command("check-catalog")
def check_catalog(
    catalog: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="JSON array of published items.")],
    library_type: Annotated[
        LibraryType, typer.Option("--library", "-l", case_sensitive=False, help="Content type of the catalog.")
    ] = LibraryType.STAT_BLOCKS,
    route: Annotated[str, typer.Option(help="Route prefix for item links.")] = "/statblocks/",
) -> None:
    """Validate a reference catalog file and report its size."""
    kind = CONTENT_KINDS[library_type]
    try:
        reference = anyio.run(ReferenceLibrary.from_file, catalog, route, kind)
    except CatalogValidationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"{len(reference.get_listings())} items OK")


def main() -> None:
    """Entrypoint invoked by ``python -m tome`` or console scripts."""
    app()


if __name__ == "__main__":
    main()
