"""
DTOs del endpoint de sincronizacion.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from alerts_sync.application.use_cases.sync_use_cases import SyncOutcome


class SyncResultDTO(BaseModel):
    """Resultado de una corrida de sincronizacion."""

    success: bool
    state: str
    added: int = Field(0, description="Ids nuevos agregados al dataset")
    known: int = Field(0, description="Alertas conocidas antes de la corrida")
    fetched: int = Field(0, description="Alertas recibidas del feed")
    merged: int = Field(0, description="Alertas en el dataset unificado")
    watermark: Optional[datetime] = None
    commit_message: Optional[str] = None
    published: bool = False
    message: str

    @classmethod
    def from_outcome(cls, outcome: SyncOutcome) -> "SyncResultDTO":
        if outcome.error is not None:
            message = outcome.error.message
        elif outcome.published:
            message = f"Dataset actualizado: {outcome.commit_message}"
        else:
            message = "Sin alertas nuevas"
        return cls(
            success=outcome.succeeded,
            state=outcome.state.value,
            added=outcome.added_count,
            known=outcome.known_count,
            fetched=outcome.fetched_count,
            merged=outcome.merged_count,
            watermark=outcome.watermark,
            commit_message=outcome.commit_message,
            published=outcome.published,
            message=message,
        )
