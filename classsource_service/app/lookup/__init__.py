from classsource_service.app.lookup.base import (
    FatalLookupError,
    SourceAmbiguous,
    SourceLookupProvider,
    SourceLookupResult,
    SourceNotFound,
    SourceResolved,
)
from classsource_service.app.lookup.filesystem import FileSystemSourceLookup
from classsource_service.app.lookup.workers import DEFAULT_LOOKUP_WORKERS, LookupWorkerPool

__all__ = [
    "DEFAULT_LOOKUP_WORKERS",
    "FatalLookupError",
    "FileSystemSourceLookup",
    "LookupWorkerPool",
    "SourceAmbiguous",
    "SourceLookupProvider",
    "SourceLookupResult",
    "SourceNotFound",
    "SourceResolved",
]
