"""
Excepción base del servicio de sincronización de alertas.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base de la aplicación.
    Los errores de sync heredan de aquí para compartir codigo y status HTTP.
    """
    
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Mensaje de error descriptivo
            status_code: Código de estado HTTP con el que se expone el error
            error_code: Código estable del error (ej. SYNC_CONFLICT)
            details: Contexto adicional (rid, ubicacion, linea...)
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def summary(self) -> str:
        """Forma corta `CODIGO: mensaje` para logs y respuestas de texto."""
        return f"{self.error_code}: {self.message}"

    def to_payload(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
