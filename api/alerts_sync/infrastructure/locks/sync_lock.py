"""
Lock de sincronizacion por ubicacion del dataset.

Motivacion:
- El trigger HTTP puede lanzar corridas superpuestas.
- Dos corridas sobre la misma copia de trabajo compiten en clone/pull/push.
- Serializamos el tramo ENSURE_STORE..PUBLISH por ubicacion (single-flight).

Alcance: solo dentro del proceso. No excluye corridas en otros hosts.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from loguru import logger

from alerts_sync.shared.exceptions.sync import SyncInProgress


# Timeout por defecto para adquirir un lock (en segundos)
DEFAULT_LOCK_TIMEOUT = 300.0


class SyncLockManager:
    """
    Gestor de locks por ubicacion del dataset.

    Las corridas son sincronas (se ejecutan en un thread via
    `asyncio.to_thread`), por eso se usa `threading.Lock`.
    """

    _locks: Dict[str, threading.Lock] = {}
    _meta_lock = threading.Lock()

    @classmethod
    def _get_or_create_lock(cls, location: str) -> threading.Lock:
        """Obtiene o crea un lock para la ubicacion especificada."""
        with cls._meta_lock:
            lock = cls._locks.get(location)
            if lock is None:
                lock = threading.Lock()
                cls._locks[location] = lock
            return lock

    @classmethod
    @contextmanager
    def hold(cls, location: str, timeout: float = DEFAULT_LOCK_TIMEOUT) -> Iterator[None]:
        """
        Context manager para ejecutar una corrida con el lock de `location`.

        Args:
            location: Ubicacion de la copia de trabajo
            timeout: Espera maxima en segundos; <= 0 espera indefinidamente

        Raises:
            SyncInProgress: si no se adquiere el lock dentro del timeout.
        """
        lock = cls._get_or_create_lock(location)

        if timeout and timeout > 0:
            if not lock.acquire(timeout=timeout):
                logger.warning(f"Timeout adquiriendo lock de sync para {location} (timeout: {timeout}s)")
                raise SyncInProgress(location, timeout)
        else:
            lock.acquire()

        try:
            yield
        finally:
            lock.release()

    @classmethod
    def is_locked(cls, location: str) -> bool:
        with cls._meta_lock:
            lock = cls._locks.get(location)
            return lock is not None and lock.locked()

    @classmethod
    def remove_lock(cls, location: str) -> bool:
        """
        Elimina el lock de una ubicacion si no esta adquirido.

        Returns:
            True si se elimino el lock, False si no existia o esta en uso
        """
        with cls._meta_lock:
            lock = cls._locks.get(location)
            if lock is None:
                return False

            if lock.acquire(blocking=False):
                lock.release()
                del cls._locks[location]
                logger.debug(f"Lock eliminado para: {location}")
                return True
            logger.warning(f"No se puede eliminar lock de {location}: en uso")
            return False
