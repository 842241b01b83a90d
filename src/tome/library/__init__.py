"""Listing reconciliation across local and account stores."""

from tome.library.libraries import Libraries, LibraryType
from tome.library.library import Library
from tome.library.listing import Listing
from tome.library.reference import ReferenceLibrary, create_id

__all__ = [
    "Libraries",
    "Library",
    "LibraryType",
    "Listing",
    "ReferenceLibrary",
    "create_id",
]
