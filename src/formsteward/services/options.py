"""
Descarga asíncrona de listas de opciones.

Un fallo de red o una respuesta inválida NO es fatal: se registra y se
trata como "sin opciones". La regla 'required' del campo sigue
aplicando, así que un select requerido sin opciones bloquea el paso.
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from formsteward.models import Option, dedupe_options
from formsteward.utils.logger import logger


class OptionFetcher:
    """Cliente de opciones: fetch(url) -> list[Option]."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        if timeout is None:
            from formsteward.settings import get_settings
            timeout = get_settings().fetch_timeout_s
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Cierra el cliente HTTP si fue creado por este objeto."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "OptionFetcher":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def fetch(self, url: str) -> list[Option]:
        """
        Descarga las opciones de una URL.

        Returns:
            Lista de opciones (vacía si la petición falla)
        """
        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("No se pudieron obtener opciones de {}: {}", url, e)
            return []

        if response.status_code != 200:
            logger.warning("Opciones de {}: HTTP {}", url, response.status_code)
            return []

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Opciones de {}: respuesta no es JSON", url)
            return []

        return parse_options(payload, source=url)


def parse_options(payload: Any, source: str = "") -> list[Option]:
    """
    Convierte la respuesta en opciones.

    Acepta una lista de {"id", "value"} o un objeto con clave "options".
    """
    if isinstance(payload, dict):
        payload = payload.get("options")
    if not isinstance(payload, list):
        logger.warning("Opciones de {}: formato inesperado", source or "respuesta")
        return []

    options = []
    for item in payload:
        try:
            if isinstance(item, dict) and "id" in item and "value" in item:
                # Claves extra del servidor se ignoran
                item = {"id": item["id"], "value": item["value"]}
            options.append(Option.model_validate(item))
        except ValidationError:
            logger.warning("Opción inválida descartada de {}: {!r}", source or "respuesta", item)
    return dedupe_options(options)
