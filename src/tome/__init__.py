"""tome: content libraries reconciled across local and account stores."""

from tome.errors import CatalogValidationError, FetchError, RemoteError, StorageError, TomeError
from tome.library import Libraries, Library, LibraryType, Listing, ReferenceLibrary
from tome.model import Origin

__version__ = "0.1.0"

__all__ = [
    "CatalogValidationError",
    "FetchError",
    "Libraries",
    "Library",
    "LibraryType",
    "Listing",
    "Origin",
    "ReferenceLibrary",
    "RemoteError",
    "StorageError",
    "TomeError",
]
