"""Shared CLI typer argument definitions."""

from pathlib import Path
from typing import Annotated

import typer

from tome.library.libraries import LibraryType

LibraryArgument = Annotated[
    LibraryType,
    typer.Argument(help="Library to operate on.", case_sensitive=False),
]

DataDirOption = Annotated[
    Path | None,
    typer.Option(
        "--data-dir",
        "-d",
        file_okay=False,
        dir_okay=True,
        help="Directory holding the local stores (default: TOME_DATA_DIR).",
    ),
]
