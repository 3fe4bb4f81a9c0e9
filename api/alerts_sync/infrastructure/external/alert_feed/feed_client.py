"""
Cliente HTTP del historial publico de alertas (requests).

Requisitos cubiertos:
- rango opcional fromDate/toDate (strings ISO-8601 a segundos, sin zona)
- proxy opcional (PROXY_URL)
- normalizacion de cada alerta a AlertRecord con campos de texto

No reintenta: cualquier falla de red/HTTP se propaga como FetchFailed y el
orquestador decide.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

import requests
from loguru import logger

from alerts_sync.core.config import SyncConfig
from alerts_sync.domain.entities.alert import AlertRecord
from alerts_sync.domain.repositories.alert_feed import IFeedClient
from alerts_sync.shared.exceptions.sync import FetchFailed


FEED_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_feed_time(instant: Optional[datetime], zone: str = "UTC") -> str:
    """
    Serializa un instante para fromDate/toDate: truncado a segundos, sin sufijo
    de zona, expresado en la zona del feed. None -> "" (sin cota).
    """
    if instant is None:
        return ""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(zone)).strftime(FEED_TIME_FORMAT)


def _to_text(value: Any) -> str:
    """Convierte un valor JSON a texto para el CSV."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


class AlertFeedClient(IFeedClient):
    """
    Cliente del feed. Expone fetch() que retorna AlertRecord en el orden
    en que los publica el feed.
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = config.feed_url
        self._lang = config.feed_lang
        self._mode = config.feed_mode
        self._zone = config.feed_timezone
        self._timeout_s = config.feed_timeout_s
        self._proxies = (
            {"http": config.proxy_url, "https": config.proxy_url}
            if config.proxy_url
            else None
        )
        self._session = session or requests.Session()

    def build_params(
        self,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> dict[str, str]:
        return {
            "lang": self._lang,
            "mode": self._mode,
            "fromDate": format_feed_time(from_time, self._zone),
            "toDate": format_feed_time(to_time, self._zone),
        }

    def fetch(
        self,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> list[AlertRecord]:
        params = self.build_params(from_time, to_time)
        logger.info(f"Consultando feed: fromDate='{params['fromDate']}' toDate='{params['toDate']}'")

        try:
            resp = self._session.get(
                self._url,
                params=params,
                proxies=self._proxies,
                timeout=self._timeout_s,
            )
        except requests.RequestException as e:
            raise FetchFailed(str(e)) from e

        if not 200 <= resp.status_code < 300:
            raise FetchFailed(f"HTTP {resp.status_code}: {resp.text[:200]}", status=resp.status_code)

        # El feed responde cuerpo vacio cuando no hay alertas en el rango
        if not resp.text.strip():
            return []

        try:
            payload = resp.json()
        except ValueError as e:
            raise FetchFailed(f"respuesta no es JSON: {resp.text[:200]}", status=resp.status_code) from e

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise FetchFailed(f"se esperaba una lista JSON y llego {type(payload).__name__}")

        records = [self._to_record(index, item) for index, item in enumerate(payload)]
        logger.info(f"Alertas recibidas del feed: {len(records)}")
        return records

    def _to_record(self, index: int, item: Any) -> AlertRecord:
        if not isinstance(item, dict):
            raise FetchFailed(f"alerta #{index} no es un objeto JSON")
        values = {str(name): _to_text(value) for name, value in item.items()}
        try:
            return AlertRecord.from_mapping(values)
        except ValueError as e:
            raise FetchFailed(f"alerta #{index} invalida: {e}") from e
