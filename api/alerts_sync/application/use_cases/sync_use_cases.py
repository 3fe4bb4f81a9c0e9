"""
Orquestador de la sincronizacion feed -> dataset versionado.

Maquina de estados lineal:
    START -> ENSURE_STORE -> LOAD -> RESOLVE_WATERMARK -> FETCH -> RECONCILE
          -> (DONE | PUBLISH -> DONE)

Cada etapa retorna un StageResult explicito; ante el primer error la corrida
termina en FAILED con el error de origen. No hay reintentos ni acciones
compensatorias: la siguiente corrida arranca de cero desde el estado
persistido, por lo que re-ejecutar siempre es seguro.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from loguru import logger

from alerts_sync.application.services.reconciler import reconcile
from alerts_sync.application.services.watermark import resolve_watermark
from alerts_sync.core.config import SyncConfig
from alerts_sync.domain.repositories.alert_feed import IFeedClient
from alerts_sync.domain.repositories.dataset_store import IDatasetStore
from alerts_sync.infrastructure.locks.sync_lock import SyncLockManager
from alerts_sync.shared.exceptions.sync import SyncError

T = TypeVar("T")


class SyncState(str, Enum):
    START = "start"
    ENSURE_STORE = "ensure_store"
    LOAD = "load"
    RESOLVE_WATERMARK = "resolve_watermark"
    FETCH = "fetch"
    RECONCILE = "reconcile"
    PUBLISH = "publish"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Resultado de una etapa: valor o error, nunca ambos."""

    value: Optional[T] = None
    error: Optional[SyncError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncOutcome:
    """Resultado final de una corrida."""

    state: SyncState = SyncState.START
    failed_state: Optional[SyncState] = None
    known_count: int = 0
    fetched_count: int = 0
    merged_count: int = 0
    added_count: int = 0
    watermark: Optional[datetime] = None
    commit_message: Optional[str] = None
    published: bool = False
    error: Optional[SyncError] = None

    @property
    def succeeded(self) -> bool:
        return self.state == SyncState.DONE


def build_commit_message(added_count: int) -> str:
    """'Added 1 alert' para exactamente 1; 'Added N alerts' en otro caso."""
    if added_count == 1:
        return "Added 1 alert"
    return f"Added {added_count} alerts"


class SyncUseCases:
    """
    Orquestador del pipeline para un dataset.
    """

    def __init__(
        self,
        *,
        store: IDatasetStore,
        feed: IFeedClient,
        config: SyncConfig,
    ) -> None:
        self._store = store
        self._feed = feed
        self._config = config

    def _attempt(
        self,
        outcome: SyncOutcome,
        state: SyncState,
        action: Callable[..., T],
        *args: Any,
    ) -> StageResult[T]:
        outcome.state = state
        try:
            return StageResult(value=action(*args))
        except SyncError as e:
            return StageResult(error=e)

    def _fail(self, outcome: SyncOutcome, error: SyncError) -> SyncOutcome:
        outcome.failed_state = outcome.state
        outcome.state = SyncState.FAILED
        outcome.error = error
        logger.error(
            f"Sync abortado en {outcome.failed_state.value}: [{error.error_code}] {error.message}"
        )
        return outcome

    def run(self) -> SyncOutcome:
        """
        Ejecuta una corrida completa bajo el lock de la copia de trabajo.

        Errores que no son SyncError (defectos de programacion) se propagan.
        """
        outcome = SyncOutcome()
        location = self._config.working_dir
        try:
            with SyncLockManager.hold(location, timeout=self._config.lock_timeout_s):
                return self._execute(outcome)
        except SyncError as e:
            return self._fail(outcome, e)

    def _execute(self, outcome: SyncOutcome) -> SyncOutcome:
        logger.info("Obteniendo alertas conocidas")
        ensured = self._attempt(outcome, SyncState.ENSURE_STORE, self._store.ensure)
        if not ensured.ok:
            return self._fail(outcome, ensured.error)
        working_copy = ensured.value

        loaded = self._attempt(outcome, SyncState.LOAD, self._store.load, working_copy)
        if not loaded.ok:
            return self._fail(outcome, loaded.error)
        known = loaded.value
        outcome.known_count = len(known)

        resolved = self._attempt(
            outcome, SyncState.RESOLVE_WATERMARK, resolve_watermark, known, self._config.feed_timezone
        )
        if not resolved.ok:
            return self._fail(outcome, resolved.error)
        outcome.watermark = resolved.value
        if outcome.watermark is not None:
            logger.info(f"Watermark: {outcome.watermark.isoformat()}")

        fetched = self._attempt(outcome, SyncState.FETCH, self._feed.fetch, outcome.watermark)
        if not fetched.ok:
            return self._fail(outcome, fetched.error)
        latest = fetched.value
        outcome.fetched_count = len(latest)
        logger.info(f"Alertas nuevas del feed: {outcome.fetched_count}")

        reconciled = self._attempt(outcome, SyncState.RECONCILE, reconcile, known, latest)
        if not reconciled.ok:
            return self._fail(outcome, reconciled.error)
        merged = reconciled.value.merged
        outcome.merged_count = len(merged)
        outcome.added_count = reconciled.value.added_count
        logger.info(f"Alertas unificadas: {outcome.merged_count}, nuevas: {outcome.added_count}")

        if outcome.added_count <= 0:
            outcome.state = SyncState.DONE
            logger.info("Sin alertas nuevas: no se publica")
            return outcome

        message = build_commit_message(outcome.added_count)
        outcome.commit_message = message
        published = self._attempt(
            outcome, SyncState.PUBLISH, self._store.publish, working_copy, merged, message
        )
        if not published.ok:
            return self._fail(outcome, published.error)
        outcome.published = True
        outcome.state = SyncState.DONE
        logger.success(f"Dataset publicado: {message}")
        return outcome


def build_sync_use_cases(config: SyncConfig) -> SyncUseCases:
    """
    Constructor "oficial" del pipeline con las implementaciones por defecto
    (GitPython + requests).
    """
    from alerts_sync.infrastructure.dataset_store.git_store import GitDatasetStore
    from alerts_sync.infrastructure.external.alert_feed.feed_client import AlertFeedClient

    return SyncUseCases(
        store=GitDatasetStore(config),
        feed=AlertFeedClient(config),
        config=config,
    )
