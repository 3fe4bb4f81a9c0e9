"""
Excepciones del pipeline de sincronizacion de alertas.

Todas heredan de SyncError. Cualquiera de ellas aborta la corrida completa:
no hay reintentos parciales ni escrituras intermedias.
"""
from typing import Any, Optional

from alerts_sync.shared.exceptions.base import AppException


class SyncError(AppException):
    """Excepción base para errores del pipeline de sincronizacion."""
    
    def __init__(
        self,
        message: str,
        error_code: str = "SYNC_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class SyncConflict(SyncError):
    """
    La copia local no puede avanzar (fast-forward) al estado remoto.
    
    El store descarta la copia local antes de lanzar esta excepcion;
    la siguiente corrida clona desde cero.
    """
    
    def __init__(self, location: str, reason: str):
        super().__init__(
            message=f"La copia local en '{location}' diverge del remoto: {reason}",
            error_code="SYNC_CONFLICT",
            status_code=409,
            details={"location": location, "reason": reason}
        )


class StoreUnavailable(SyncError):
    """No se pudo materializar la copia local (clone fallido)."""
    
    def __init__(self, location: str, reason: str):
        super().__init__(
            message=f"No se pudo clonar el dataset en '{location}': {reason}",
            error_code="STORE_UNAVAILABLE",
            status_code=503,
            details={"location": location, "reason": reason}
        )


class MalformedDataset(SyncError):
    """El archivo tabular no se puede parsear (header/esquema/filas)."""
    
    def __init__(self, path: str, reason: str, line: Optional[int] = None):
        details: dict[str, Any] = {"path": path, "reason": reason}
        if line is not None:
            details["line"] = line
        where = f"{path}:{line}" if line is not None else path
        super().__init__(
            message=f"Dataset mal formado ({where}): {reason}",
            error_code="MALFORMED_DATASET",
            details=details
        )


class UnparseableTimestamp(SyncError):
    """Los campos date/time de un registro conocido no tienen el formato esperado."""
    
    def __init__(self, rid: str, date: str, time: str):
        self.rid = rid
        super().__init__(
            message=f"No se pudo parsear la fecha del registro {rid}: date='{date}' time='{time}'",
            error_code="UNPARSEABLE_TIMESTAMP",
            details={"rid": rid, "date": date, "time": time}
        )


class DuplicateIdConflict(SyncError):
    """Dos registros distintos comparten el mismo id numerico."""
    
    def __init__(self, rid: str, other_rid: Optional[str] = None):
        self.rid = rid
        details = {"rid": rid}
        if other_rid is not None and other_rid != rid:
            details["other_rid"] = other_rid
        super().__init__(
            message=f"Id de alerta duplicado en el dataset: {rid}",
            error_code="DUPLICATE_ID_CONFLICT",
            details=details
        )


class FetchFailed(SyncError):
    """Fallo de red/HTTP o respuesta invalida del feed de alertas."""
    
    def __init__(self, reason: str, status: Optional[int] = None):
        details: dict[str, Any] = {"reason": reason}
        if status is not None:
            details["status"] = status
        super().__init__(
            message=f"Error consultando el feed de alertas: {reason}",
            error_code="FETCH_FAILED",
            status_code=502,
            details=details
        )


class PublishRejected(SyncError):
    """El remoto rechazo el push (por ejemplo, avanzo durante la corrida)."""
    
    def __init__(self, remote: str, reason: str):
        super().__init__(
            message=f"Push rechazado por '{remote}': {reason}",
            error_code="PUBLISH_REJECTED",
            status_code=409,
            details={"remote": remote, "reason": reason}
        )


class StoreWriteFailed(SyncError):
    """
    No se pudo escribir o commitear el dataset en la copia local.
    
    El store descarta la copia local antes de lanzar esta excepcion.
    """
    
    def __init__(self, location: str, reason: str):
        self.location = location
        super().__init__(
            message=f"No se pudo escribir el dataset en '{location}': {reason}",
            error_code="STORE_WRITE_FAILED",
            status_code=500,
            details={"location": location, "reason": reason}
        )


class SyncInProgress(SyncError):
    """Otra corrida mantiene el lock del dataset."""
    
    def __init__(self, location: str, timeout: float):
        self.location = location
        self.timeout = timeout
        super().__init__(
            message=f"Timeout ({timeout}s) esperando el lock de sincronizacion para: {location}",
            error_code="SYNC_IN_PROGRESS",
            status_code=409,
            details={"location": location, "timeout": timeout}
        )
