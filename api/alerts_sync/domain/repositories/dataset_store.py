"""
Interfaz del store del dataset.
Define el contrato que debe cumplir cualquier implementación.
"""
from abc import ABC, abstractmethod

from alerts_sync.domain.entities.alert import Dataset
from alerts_sync.domain.entities.working_copy import WorkingCopy


class IDatasetStore(ABC):
    """
    Store durable y versionado del dataset de alertas.
    Pull antes de leer, commit + push despues de escribir.
    """
    
    @abstractmethod
    def ensure(self) -> WorkingCopy:
        """
        Sincroniza la copia local con el remoto o la crea si no existe.
        
        Returns:
            WorkingCopy: Copia local actualizada
            
        Raises:
            SyncConflict: si la copia existente no puede hacer fast-forward
                (la copia local queda descartada).
            StoreUnavailable: si no se pudo clonar el remoto.
        """
        pass
    
    @abstractmethod
    def load(self, working_copy: WorkingCopy) -> Dataset:
        """
        Parsea el archivo tabular. Un archivo ausente es un dataset vacio.
        
        Raises:
            MalformedDataset: si el header o las filas no se pueden parsear.
        """
        pass
    
    @abstractmethod
    def publish(self, working_copy: WorkingCopy, dataset: Dataset, message: str) -> None:
        """
        Serializa el dataset, hace commit con `message` y push al remoto.
        
        Raises:
            PublishRejected: si el remoto rechaza el push.
        """
        pass
