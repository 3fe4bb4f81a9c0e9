"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
import asyncio
from typing import Callable

from fastapi import FastAPI
from loguru import logger

from alerts_sync.application.use_cases.sync_use_cases import build_sync_use_cases
from alerts_sync.core.config import build_sync_config, settings
from alerts_sync.infrastructure.locks.sync_lock import SyncLockManager


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Configura logging y ejecuta la corrida de arranque."""
        logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Entorno: {settings.ENVIRONMENT}")
        
        logger.add(
            settings.LOG_FILE,
            rotation="10 MB",
            retention="10 days",
            level=settings.LOG_LEVEL
        )
        
        _validate_config()
        
        if settings.SYNC_ON_STARTUP:
            await run_startup_sync()
        
        logger.success("Aplicacion iniciada correctamente")
    
    return startup


async def run_startup_sync() -> None:
    """
    Corrida unica al arrancar el proceso.
    
    Un fallo se registra pero no impide que el servicio quede escuchando:
    la siguiente corrida disparada por HTTP vuelve a intentar desde cero.
    """
    logger.info("Ejecutando sincronizacion de arranque")
    use_cases = build_sync_use_cases(build_sync_config(settings))
    outcome = await asyncio.to_thread(use_cases.run)
    if outcome.succeeded:
        logger.info(f"Sincronizacion de arranque OK: nuevas={outcome.added_count}")
    else:
        logger.error(
            f"Sincronizacion de arranque fallida en {outcome.failed_state.value}: "
            f"{outcome.error.summary()}"
        )


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []
    
    if not settings.GITHUB_ACCESS_TOKEN:
        warnings.append("GITHUB_ACCESS_TOKEN no configurado - el push al remoto puede ser rechazado")
    if not settings.PROXY_URL:
        warnings.append("PROXY_URL no configurado - el feed se consulta sin proxy")
    
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")
        
        removed = SyncLockManager.remove_lock(settings.DATASET_DIR)
        logger.info(f"Lock de sync liberado: {removed}")
        
        logger.success("Aplicacion cerrada correctamente")
    
    return shutdown
