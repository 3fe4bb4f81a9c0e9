"""
Interfaz del cliente del feed de alertas.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from alerts_sync.domain.entities.alert import AlertRecord


class IFeedClient(ABC):
    """Fuente externa de alertas candidatas."""
    
    @abstractmethod
    def fetch(
        self,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> List[AlertRecord]:
        """
        Obtiene las alertas publicadas en el rango dado.
        
        Args:
            from_time: Cota inferior inclusiva (None = sin cota)
            to_time: Cota superior inclusiva (None = hasta ahora)
            
        Returns:
            List[AlertRecord]: Alertas candidatas; lista vacia si no hay nuevas
            
        Raises:
            FetchFailed: ante errores de red/HTTP o respuestas invalidas.
        """
        pass
