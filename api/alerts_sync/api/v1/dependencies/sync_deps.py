"""
Dependencias para inyeccion del orquestador de sincronizacion.
"""
from alerts_sync.application.use_cases.sync_use_cases import SyncUseCases, build_sync_use_cases
from alerts_sync.core.config import build_sync_config, settings


def get_sync_use_cases() -> SyncUseCases:
    """
    Dependencia para obtener el orquestador de sincronizacion.
    
    Se construye por request a partir de la configuracion; no comparte
    estado mutable entre corridas.
    
    Returns:
        SyncUseCases: Orquestador listo para ejecutar una corrida
    """
    return build_sync_use_cases(build_sync_config(settings))
