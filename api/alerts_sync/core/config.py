"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Settings solo se lee en los bordes (app FastAPI, script CLI). El pipeline
recibe un SyncConfig inmutable construido con build_sync_config().
"""
from dataclasses import dataclass
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.
    """
    
    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Alerts Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")
    
    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    
    # Repositorio remoto del dataset (sistema de registro)
    GITHUB_ACCESS_TOKEN: str = Field(default="")
    DATASET_REPO_URL: str = Field(default="https://github.com/dleshem/israel-alerts-data")
    DATASET_BRANCH: str = Field(default="main")
    DATASET_DIR: str = Field(default="/tmp/israel-alerts-data")
    DATASET_FILENAME: str = Field(default="israel-alerts.csv")
    DATASET_CLONE_DEPTH: int = Field(default=1)
    GIT_AUTHOR_NAME: str = Field(default="Alerts Sync")
    GIT_AUTHOR_EMAIL: str = Field(default="alerts-sync@localhost")
    
    # Feed de alertas
    FEED_URL: str = Field(default="https://alerts-history.oref.org.il/Shared/Ajax/GetAlarmsHistory.aspx")
    FEED_LANG: str = Field(default="he")
    FEED_MODE: str = Field(default="0")
    # Zona en la que se publican date/time; tambien se usa para fromDate/toDate
    FEED_TIMEZONE: str = Field(default="UTC")
    FEED_TIMEOUT_S: float = Field(default=60.0)
    PROXY_URL: str = Field(default="")
    
    # Control de corridas
    SYNC_ON_STARTUP: bool = Field(default=True)
    SYNC_LOCK_TIMEOUT_S: float = Field(default=300.0)
    
    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/alerts_sync.log")
    
    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"
    
    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


@dataclass(frozen=True)
class GitAuthor:
    """Identidad usada como author y committer de los commits del dataset."""

    name: str
    email: str


@dataclass(frozen=True)
class SyncConfig:
    """
    Config de una corrida de sincronizacion feed -> dataset versionado.

    Este objeto no realiza I/O: solo agrupa lo que necesitan el store,
    el cliente del feed y el orquestador.
    """

    repo_url: str
    working_dir: str
    dataset_filename: str
    author: GitAuthor
    branch: str = "main"
    clone_depth: int = 1
    access_token: Optional[str] = None
    feed_url: str = "https://alerts-history.oref.org.il/Shared/Ajax/GetAlarmsHistory.aspx"
    feed_lang: str = "he"
    feed_mode: str = "0"
    feed_timezone: str = "UTC"
    feed_timeout_s: float = 60.0
    proxy_url: Optional[str] = None
    lock_timeout_s: float = 300.0


def build_sync_config(source: Settings) -> SyncConfig:
    """
    Proyecta Settings (env) en un SyncConfig inmutable.

    Strings vacios se normalizan a None para token y proxy.
    """
    return SyncConfig(
        repo_url=source.DATASET_REPO_URL,
        working_dir=source.DATASET_DIR,
        dataset_filename=source.DATASET_FILENAME,
        author=GitAuthor(name=source.GIT_AUTHOR_NAME, email=source.GIT_AUTHOR_EMAIL),
        branch=source.DATASET_BRANCH,
        clone_depth=source.DATASET_CLONE_DEPTH,
        access_token=source.GITHUB_ACCESS_TOKEN or None,
        feed_url=source.FEED_URL,
        feed_lang=source.FEED_LANG,
        feed_mode=source.FEED_MODE,
        feed_timezone=source.FEED_TIMEZONE,
        feed_timeout_s=source.FEED_TIMEOUT_S,
        proxy_url=source.PROXY_URL or None,
        lock_timeout_s=source.SYNC_LOCK_TIMEOUT_S,
    )


# Instancia global de configuracion
settings = Settings()
