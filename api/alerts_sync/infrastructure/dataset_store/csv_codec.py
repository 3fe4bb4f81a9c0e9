"""
Codec CSV del dataset de alertas.

Formato: separado por comas, fila de header, quoting minimo, fin de linea
'\n', UTF-8, una fila por alerta ordenada por rid ascendente.
"""
from __future__ import annotations

import csv
import os
from pathlib import Path

from loguru import logger

from alerts_sync.domain.entities.alert import AlertRecord, Dataset, REQUIRED_FIELDS
from alerts_sync.shared.exceptions.sync import MalformedDataset


LINE_TERMINATOR = "\n"


def _validate_header(path: Path, header: list[str]) -> None:
    if any(not name for name in header):
        raise MalformedDataset(str(path), "header con columnas sin nombre", line=1)
    if len(set(header)) != len(header):
        raise MalformedDataset(str(path), "header con columnas repetidas", line=1)
    missing = [name for name in REQUIRED_FIELDS if name not in header]
    if missing:
        raise MalformedDataset(
            str(path), f"faltan columnas obligatorias: {', '.join(missing)}", line=1
        )


def read_dataset(path: Path) -> Dataset:
    """
    Lee el CSV del dataset.
    
    Un archivo inexistente (bootstrap) o vacio es un dataset vacio.
    
    Raises:
        MalformedDataset: header invalido, filas con cantidad de columnas
            distinta al header o rid no numerico.
    """
    if not path.exists():
        logger.info(f"No existe {path}: dataset vacio (bootstrap)")
        return Dataset()
    
    records: list[AlertRecord] = []
    out_of_order = 0
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            if header is None:
                logger.warning(f"{path} esta vacio: se trata como dataset vacio")
                return Dataset()
            _validate_header(path, header)
            
            for row in reader:
                if not row:
                    continue
                if len(row) != len(header):
                    raise MalformedDataset(
                        str(path),
                        f"se esperaban {len(header)} columnas y hay {len(row)}",
                        line=reader.line_num,
                    )
                try:
                    record = AlertRecord.from_mapping(dict(zip(header, row)))
                except ValueError as e:
                    raise MalformedDataset(str(path), str(e), line=reader.line_num) from e
                if records and record.numeric_id < records[-1].numeric_id:
                    out_of_order += 1
                records.append(record)
        except csv.Error as e:
            raise MalformedDataset(str(path), str(e), line=reader.line_num) from e
    
    if out_of_order:
        logger.warning(f"{path}: {out_of_order} fila(s) fuera de orden por rid")
    
    return Dataset(fieldnames=header, records=records)


def write_dataset(path: Path, dataset: Dataset) -> None:
    """
    Escribe el dataset completo (header incluido) reemplazando el archivo.
    
    El header es fijo: campos extra que no esten en el header no se escriben.
    """
    fieldnames = list(dataset.fieldnames)
    if not fieldnames:
        raise ValueError("write_dataset: el dataset no tiene header")
    
    known = set(fieldnames)
    dropped: set[str] = set()
    for record in dataset.records:
        dropped.update(name for name in record.extra if name not in known)
    if dropped:
        logger.warning(
            f"Campos fuera del header que no se persisten: {', '.join(sorted(dropped))}"
        )
    
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, lineterminator=LINE_TERMINATOR)
        writer.writeheader()
        for record in dataset.records:
            writer.writerow(record.as_row(fieldnames))
    os.replace(tmp_path, path)
