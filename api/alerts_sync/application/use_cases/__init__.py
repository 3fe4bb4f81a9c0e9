"""
Casos de uso de la aplicacion.
"""
from .sync_use_cases import (
    SyncOutcome,
    SyncState,
    SyncUseCases,
    build_commit_message,
    build_sync_use_cases,
)

__all__ = [
    "SyncOutcome",
    "SyncState",
    "SyncUseCases",
    "build_commit_message",
    "build_sync_use_cases",
]
