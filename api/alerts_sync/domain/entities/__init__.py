"""
Entidades del dominio.
"""
from alerts_sync.domain.entities.alert import (
    AlertRecord,
    Dataset,
    ID_FIELD,
    DATE_FIELD,
    TIME_FIELD,
    REQUIRED_FIELDS,
)
from alerts_sync.domain.entities.working_copy import WorkingCopy

__all__ = [
    "AlertRecord",
    "Dataset",
    "WorkingCopy",
    "ID_FIELD",
    "DATE_FIELD",
    "TIME_FIELD",
    "REQUIRED_FIELDS",
]
