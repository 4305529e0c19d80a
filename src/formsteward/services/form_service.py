"""
Carga de formularios desde texto, archivo o URL.
"""

from pathlib import Path
from typing import Optional

from formsteward.models import FormDefinition
from formsteward.parser import parse
from formsteward.services.api import ApiService
from formsteward.utils.logger import logger


class FormService:
    """Punto único para obtener un FormDefinition validado."""

    def __init__(self, api: Optional[ApiService] = None):
        self._api = api

    @property
    def api(self) -> ApiService:
        if self._api is None:
            self._api = ApiService()
        return self._api

    def load_form_from_json(self, json_text: str | bytes) -> FormDefinition:
        """Parsea un documento JSON (ver formsteward.parser.parse)."""
        return parse(json_text)

    def load_form_file(self, path: str | Path) -> FormDefinition:
        """Lee y parsea un archivo JSON."""
        path = Path(path)
        logger.debug("Cargando formulario desde {}", path)
        return parse(path.read_bytes())

    def load_form_from_url(self, url: str) -> FormDefinition:
        """Descarga y parsea un formulario remoto."""
        logger.debug("Descargando formulario desde {}", url)
        return parse(self.api.fetch_form_json(url))
