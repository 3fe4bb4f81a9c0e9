"""
Endpoints para disparar la sincronizacion del dataset de alertas.

- POST /api/v1/sync: resultado detallado en JSON.
- GET|POST /: trigger de texto plano (saludo si la corrida termina bien).

La corrida es bloqueante y se ejecuta en un thread para no bloquear el
event loop. No hay timeout interno: lo impone quien llama.
"""
import asyncio
import json
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse
from loguru import logger

from alerts_sync.api.v1.dependencies.sync_deps import get_sync_use_cases
from alerts_sync.application.dto.sync_dto import SyncResultDTO
from alerts_sync.application.use_cases.sync_use_cases import SyncOutcome, SyncUseCases


router = APIRouter(prefix="/sync", tags=["Sync"])
trigger_router = APIRouter(tags=["Trigger"])


async def _run(use_cases: SyncUseCases) -> SyncOutcome:
    return await asyncio.to_thread(use_cases.run)


@router.post(
    "",
    response_model=SyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar el feed de alertas con el dataset"
)
async def sync_alerts(
    use_cases: SyncUseCases = Depends(get_sync_use_cases)
) -> SyncResultDTO:
    """
    Ejecuta una corrida completa y retorna el detalle.
    
    Si la corrida falla, el SyncError de origen se propaga y el manejador
    global lo renderiza con su status HTTP.
    """
    logger.info("Iniciando sincronizacion desde API")
    outcome = await _run(use_cases)
    if not outcome.succeeded:
        raise outcome.error
    return SyncResultDTO.from_outcome(outcome)


async def _greeting_name(request: Request, name: Optional[str]) -> str:
    if name:
        return name
    body = await request.body()
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("name"):
            return str(payload["name"])
    return "World"


@trigger_router.api_route("/", methods=["GET", "POST"], response_class=PlainTextResponse)
async def trigger_sync(
    request: Request,
    name: Optional[str] = Query(default=None),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
) -> PlainTextResponse:
    """
    Trigger del scheduler: ejecuta una corrida y responde texto plano.
    
    A diferencia de un saludo incondicional, una corrida fallida responde
    con el status del error y su codigo.
    """
    outcome = await _run(use_cases)
    if not outcome.succeeded:
        error = outcome.error
        return PlainTextResponse(
            f"Sync failed: {error.summary()}",
            status_code=error.status_code,
        )
    return PlainTextResponse(f"Hello {await _greeting_name(request, name)}!")
