"""
CLI: una corrida de sincronizacion feed -> dataset versionado.

Uso recomendado:
  - Ejecutar como job (cron/systemd timer/scheduler).
  - Misma corrida que dispara el endpoint HTTP, sin levantar el servidor.

Variables de entorno relevantes:
  - GITHUB_ACCESS_TOKEN (push al remoto)
  - PROXY_URL (opcional, acceso al feed)
  - DATASET_REPO_URL, DATASET_DIR, DATASET_FILENAME (opcionales)

Ejecución:
  python scripts/run_sync.py
  python scripts/run_sync.py --dry-config
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `alerts_sync/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env antes de construir Settings
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from alerts_sync.application.use_cases.sync_use_cases import build_sync_use_cases
from alerts_sync.core.config import Settings, build_sync_config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--dry-config",
        action="store_true",
        help="Solo muestra la configuracion efectiva (sin token) y sale.",
    )
    args = parser.parse_args(argv)

    config = build_sync_config(Settings())

    if args.dry_config:
        print(f"repo_url={config.repo_url}")
        print(f"branch={config.branch}")
        print(f"working_dir={config.working_dir}")
        print(f"dataset_filename={config.dataset_filename}")
        print(f"feed_url={config.feed_url}")
        print(f"proxy={'si' if config.proxy_url else 'no'}")
        print(f"token={'si' if config.access_token else 'no'}")
        return 0

    logger.info("Iniciando sincronizacion de alertas...")
    outcome = build_sync_use_cases(config).run()
    if not outcome.succeeded:
        logger.error(f"Sync fallido: {outcome.error.summary()}")
        return 1

    logger.info(
        f"Sync OK: conocidas={outcome.known_count}, recibidas={outcome.fetched_count}, "
        f"nuevas={outcome.added_count}, publicado={outcome.published}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
