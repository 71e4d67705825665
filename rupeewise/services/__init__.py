"""
Services Package

Storage backends and the persistence adapter that mirrors the
record store into them.
"""

from rupeewise.services.persistence import (
    IMPORT_FAILURE_MESSAGE,
    IMPORT_SUCCESS_MESSAGE,
    ImportResult,
    PersistenceAdapter,
    backup_filename,
)

__all__ = [
    "IMPORT_FAILURE_MESSAGE",
    "IMPORT_SUCCESS_MESSAGE",
    "ImportResult",
    "PersistenceAdapter",
    "backup_filename",
]
