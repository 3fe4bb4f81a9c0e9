"""
Copia de trabajo local del dataset versionado.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class WorkingCopy:
    """
    Materializacion local y descartable del repositorio remoto.
    
    Pertenece a una sola corrida mientras dura; `handle` es el objeto del
    transporte de versionado (git.Repo en la implementacion por defecto).
    """
    
    path: Path
    dataset_path: Path
    handle: Any = None
