"""
Resolucion del watermark de la proxima consulta al feed.

El watermark nunca se persiste: siempre es una proyeccion del ultimo
registro del dataset. El feed solo acepta cotas inclusivas con precision de
segundos, por eso se avanza exactamente un segundo.
"""
from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from loguru import logger

from alerts_sync.domain.entities.alert import AlertRecord, Dataset
from alerts_sync.shared.exceptions.sync import UnparseableTimestamp


# date: dia.mes.anio, time: HH:MM:SS
SOURCE_TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"
WATERMARK_STEP = timedelta(seconds=1)


def _as_tz(zone: Union[str, tzinfo]) -> tzinfo:
    return ZoneInfo(zone) if isinstance(zone, str) else zone


def parse_record_timestamp(record: AlertRecord, zone: Union[str, tzinfo] = "UTC") -> datetime:
    """
    Parsea date + time de un registro como instante en la zona del feed.
    
    Raises:
        UnparseableTimestamp: si los campos no coinciden con el formato.
    """
    raw = f"{record.date.strip()} {record.time.strip()}"
    try:
        naive = datetime.strptime(raw, SOURCE_TIMESTAMP_FORMAT)
    except ValueError as e:
        raise UnparseableTimestamp(record.rid, record.date, record.time) from e
    return naive.replace(tzinfo=_as_tz(zone))


def resolve_watermark(dataset: Dataset, zone: Union[str, tzinfo] = "UTC") -> Optional[datetime]:
    """
    Deriva la cota inferior exclusiva para el proximo fetch.
    
    Args:
        dataset: Dataset conocido
        zone: Zona de publicacion del feed (no la zona del sistema)
        
    Returns:
        Optional[datetime]: None si el dataset esta vacio (traer todo);
            si no, el instante del ultimo registro + 1 segundo.
    """
    last = dataset.last()
    if last is None:
        logger.info("Dataset vacio: sin watermark, se consulta el feed completo")
        return None
    
    last_timestamp = parse_record_timestamp(last, zone)
    logger.info(f"Ultima alerta conocida: rid={last.rid} timestamp={last_timestamp.isoformat()}")
    return last_timestamp + WATERMARK_STEP
