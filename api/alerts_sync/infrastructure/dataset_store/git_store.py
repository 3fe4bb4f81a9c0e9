"""
Store del dataset sobre un repositorio git remoto (GitPython).

- ensure: pull fast-forward si la copia local existe; si no, clone con
  profundidad acotada. Si el pull falla, la copia local se descarta.
- load: lee el CSV de la copia local.
- publish: escribe el CSV, add + commit y push al branch configurado.

Una copia local con cambios sin commit o commits sin publicar (corrida
interrumpida) no refleja el remoto: se descarta igual que una divergente.

El token de acceso se usa como usuario en la URL del push y no queda
escrito en la configuracion del repositorio local.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

from git import Actor, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from alerts_sync.core.config import SyncConfig
from alerts_sync.domain.entities.alert import Dataset
from alerts_sync.domain.entities.working_copy import WorkingCopy
from alerts_sync.domain.repositories.dataset_store import IDatasetStore
from alerts_sync.infrastructure.dataset_store.csv_codec import read_dataset, write_dataset
from alerts_sync.shared.exceptions.sync import (
    MalformedDataset,
    PublishRejected,
    StoreUnavailable,
    StoreWriteFailed,
    SyncConflict,
)


REMOTE_NAME = "origin"


def build_push_url(repo_url: str, token: Optional[str]) -> str:
    """
    Inserta el token como usuario en URLs http(s).
    
    Otras URLs (file://, rutas locales, ssh) se retornan tal cual.
    """
    if not token:
        return repo_url
    parts = urlsplit(repo_url)
    if parts.scheme not in ("http", "https"):
        return repo_url
    host = parts.netloc.rsplit("@", 1)[-1]
    netloc = f"{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


class GitDatasetStore(IDatasetStore):
    """
    Implementacion de IDatasetStore con GitPython.
    """

    def __init__(self, config: SyncConfig) -> None:
        self._repo_url = config.repo_url
        self._branch = config.branch
        self._depth = config.clone_depth
        self._token = config.access_token
        self._path = Path(config.working_dir)
        self._filename = config.dataset_filename
        self._actor = Actor(config.author.name, config.author.email)

    @property
    def location(self) -> str:
        return str(self._path)

    def _redact(self, text: str) -> str:
        if self._token:
            return text.replace(self._token, "***").replace(quote(self._token, safe=""), "***")
        return text

    def _reason(self, error: Exception) -> str:
        if isinstance(error, GitCommandError):
            detail = (error.stderr or "").strip() or str(error)
        else:
            detail = str(error)
        return self._redact(detail)

    def _discard(self) -> None:
        logger.warning(f"Descartando copia local {self._path}")
        shutil.rmtree(self._path, ignore_errors=True)

    def _working_copy(self, repo: Repo) -> WorkingCopy:
        return WorkingCopy(
            path=self._path,
            dataset_path=self._path / self._filename,
            handle=repo,
        )

    def _unpublished_changes(self, repo: Repo) -> Optional[str]:
        """Motivo por el que la copia local no refleja el remoto, o None."""
        if repo.is_dirty(untracked_files=True):
            return "la copia local tiene cambios sin commit"
        ahead = list(repo.iter_commits(f"{REMOTE_NAME}/{self._branch}..HEAD"))
        if ahead:
            return f"la copia local tiene {len(ahead)} commit(s) sin publicar"
        return None

    def ensure(self) -> WorkingCopy:
        if self._path.exists():
            logger.info(f"Copia local existente en {self._path}: git pull --ff-only")
            try:
                repo = Repo(self._path)
                repo.remote(REMOTE_NAME).pull(self._branch, ff_only=True)
                pending = self._unpublished_changes(repo)
            except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError, ValueError) as e:
                self._discard()
                raise SyncConflict(self.location, self._reason(e)) from e
            if pending:
                # Restos de una corrida interrumpida antes del push
                self._discard()
                raise SyncConflict(self.location, pending)
            return self._working_copy(repo)

        logger.info(f"No existe copia local: git clone {self._repo_url} (depth={self._depth})")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            repo = Repo.clone_from(
                self._repo_url,
                self._path,
                depth=self._depth,
                branch=self._branch,
            )
        except (GitCommandError, OSError) as e:
            self._discard()
            raise StoreUnavailable(self.location, self._reason(e)) from e
        return self._working_copy(repo)

    def load(self, working_copy: WorkingCopy) -> Dataset:
        try:
            dataset = read_dataset(working_copy.dataset_path)
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedDataset(str(working_copy.dataset_path), f"no se pudo leer: {e}") from e
        logger.info(f"Alertas conocidas: {len(dataset)}")
        return dataset

    def publish(self, working_copy: WorkingCopy, dataset: Dataset, message: str) -> None:
        repo: Repo = working_copy.handle
        try:
            write_dataset(working_copy.dataset_path, dataset)
            repo.index.add([self._filename])
            commit = repo.index.commit(message, author=self._actor, committer=self._actor)
        except (GitCommandError, OSError, ValueError) as e:
            self._discard()
            raise StoreWriteFailed(self.location, self._reason(e)) from e
        logger.info(f"Commit {commit.hexsha[:10]}: {message}")

        try:
            repo.git.push(build_push_url(self._repo_url, self._token), f"HEAD:refs/heads/{self._branch}")
        except GitCommandError as e:
            # El commit local ya no coincide con el remoto: la proxima corrida clona de cero
            self._discard()
            raise PublishRejected(self._redact(self._repo_url), self._reason(e)) from e
        logger.info(f"Push OK a {self._redact(self._repo_url)} ({self._branch})")
