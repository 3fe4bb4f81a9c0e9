"""
Reconciliacion (dedup-merge) de alertas conocidas con alertas del feed.

Funcion pura: no hace I/O ni modifica sus entradas.
Reglas:
- Mismo rid = misma entidad.
- Ante colision, el registro del feed reemplaza al conocido.
- Salida ordenada por rid numerico ascendente.
- added_count mide ids netos nuevos, no registros recibidos.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from alerts_sync.domain.entities.alert import AlertRecord, Dataset
from alerts_sync.shared.exceptions.sync import DuplicateIdConflict


@dataclass(frozen=True)
class ReconcileResult:
    merged: Dataset
    added_count: int


def _index_known(records: Iterable[AlertRecord]) -> dict[str, AlertRecord]:
    by_id: dict[str, AlertRecord] = {}
    for record in records:
        if record.rid in by_id:
            # Un dataset persistido con ids repetidos esta corrupto
            raise DuplicateIdConflict(record.rid)
        by_id[record.rid] = record
    return by_id


def _index_fetched(records: Iterable[AlertRecord]) -> dict[str, AlertRecord]:
    # El feed puede repetir un rid dentro de la misma respuesta; gana el ultimo
    return {record.rid: record for record in records}


def reconcile(known: Dataset, fetched: Iterable[AlertRecord]) -> ReconcileResult:
    """
    Une `known` y `fetched` por rid.
    
    Args:
        known: Dataset cargado del store
        fetched: Alertas recibidas del feed
        
    Returns:
        ReconcileResult: dataset unificado y cantidad de ids nuevos
        
    Raises:
        DuplicateIdConflict: si dos registros distintos resuelven al mismo
            id numerico (por ejemplo "7" y "007").
    """
    merged_by_id = _index_known(known.records)
    merged_by_id.update(_index_fetched(fetched))
    
    ordered = sorted(merged_by_id.values(), key=lambda record: record.numeric_id)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.numeric_id == current.numeric_id:
            raise DuplicateIdConflict(current.rid, previous.rid)
    
    fieldnames = list(known.fieldnames)
    if not fieldnames and ordered:
        # Bootstrap: el esquema sale del primer registro en orden canonico
        fieldnames = list(ordered[0].field_names)
    
    return ReconcileResult(
        merged=Dataset(fieldnames=fieldnames, records=ordered),
        added_count=len(ordered) - len(known),
    )
