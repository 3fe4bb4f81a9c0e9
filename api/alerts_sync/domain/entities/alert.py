"""
Entidades del dataset de alertas.

Un AlertRecord tiene tres campos obligatorios (rid, date, time) y una bolsa
ordenada de campos extra que se preservan tal cual entre carga y publicacion.
El sistema no interpreta los campos extra.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional


ID_FIELD = "rid"
DATE_FIELD = "date"
TIME_FIELD = "time"
REQUIRED_FIELDS = (ID_FIELD, DATE_FIELD, TIME_FIELD)


@dataclass(frozen=True)
class AlertRecord:
    """
    Una alerta publicada por el feed.
    
    Dos registros son la misma entidad si y solo si su rid es igual.
    """
    
    rid: str
    date: str
    time: str
    extra: dict[str, str] = field(default_factory=dict)
    # Orden original de los campos (feed o header del CSV)
    field_names: tuple[str, ...] = REQUIRED_FIELDS
    
    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "AlertRecord":
        """
        Construye un registro desde un mapping campo -> texto.
        
        Raises:
            ValueError: si falta un campo obligatorio o rid no es entero.
        """
        missing = [name for name in REQUIRED_FIELDS if name not in values]
        if missing:
            raise ValueError(f"faltan campos obligatorios: {', '.join(missing)}")
        
        rid = str(values[ID_FIELD]).strip()
        try:
            int(rid)
        except ValueError:
            raise ValueError(f"rid no numerico: '{rid}'") from None
        
        extra = {
            name: value
            for name, value in values.items()
            if name not in REQUIRED_FIELDS
        }
        return cls(
            rid=rid,
            date=values[DATE_FIELD],
            time=values[TIME_FIELD],
            extra=extra,
            field_names=tuple(values.keys()),
        )
    
    @property
    def numeric_id(self) -> int:
        """Id como entero; define el orden canonico del dataset."""
        return int(self.rid)
    
    def get(self, name: str, default: str = "") -> str:
        if name == ID_FIELD:
            return self.rid
        if name == DATE_FIELD:
            return self.date
        if name == TIME_FIELD:
            return self.time
        return self.extra.get(name, default)
    
    def as_row(self, fieldnames: Iterable[str]) -> dict[str, str]:
        """Proyecta el registro sobre un header; campos ausentes quedan vacios."""
        return {name: self.get(name) for name in fieldnames}


@dataclass
class Dataset:
    """
    Coleccion ordenada de alertas conocidas.
    
    Invariante: rid unico por entrada y orden ascendente por rid numerico.
    `fieldnames` es el header del archivo; vacio solo en el bootstrap.
    """
    
    fieldnames: list[str] = field(default_factory=list)
    records: list[AlertRecord] = field(default_factory=list)
    
    def __len__(self) -> int:
        return len(self.records)
    
    def is_empty(self) -> bool:
        return not self.records
    
    def last(self) -> Optional[AlertRecord]:
        """
        Registro con el mayor rid numerico (None si esta vacio).
        
        Se usa max y no records[-1] para tolerar un archivo editado a mano
        fuera de orden; la siguiente publicacion lo vuelve a ordenar.
        """
        if not self.records:
            return None
        return max(self.records, key=lambda record: record.numeric_id)
    
    def ids(self) -> list[str]:
        return [record.rid for record in self.records]
