"""
Configuración de fixtures para pytest.
"""
import os

# Antes de importar la app: sin corrida de arranque ni archivo de log en tests
os.environ.setdefault("SYNC_ON_STARTUP", "false")
os.environ.setdefault("LOG_FILE", os.devnull)

import pytest

from alerts_sync.core.config import GitAuthor, SyncConfig
from alerts_sync.infrastructure.locks.sync_lock import SyncLockManager


@pytest.fixture(autouse=True)
def cleanup_locks():
    """Limpia los locks de sync antes y despues de cada test."""
    SyncLockManager._locks.clear()
    yield
    SyncLockManager._locks.clear()


@pytest.fixture
def sync_config(tmp_path) -> SyncConfig:
    """SyncConfig apuntando a directorios temporales."""
    return SyncConfig(
        repo_url=(tmp_path / "remote.git").as_uri(),
        working_dir=str(tmp_path / "working-copy"),
        dataset_filename="israel-alerts.csv",
        author=GitAuthor(name="Test Bot", email="bot@example.com"),
        lock_timeout_s=0.1,
    )
