"""
Servicios de aplicacion.

Logica pura del pipeline (sin I/O): watermark y reconciliacion.
"""
from alerts_sync.application.services.watermark import (
    parse_record_timestamp,
    resolve_watermark,
)
from alerts_sync.application.services.reconciler import ReconcileResult, reconcile

__all__ = [
    "parse_record_timestamp",
    "resolve_watermark",
    "ReconcileResult",
    "reconcile",
]
