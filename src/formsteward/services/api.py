"""
Descarga de definiciones de formulario desde un servidor remoto.
"""

from typing import Optional

import httpx

from formsteward.exceptions import FormFetchError


class ApiService:
    """Obtiene el JSON de configuración de un formulario por HTTP GET."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        if timeout is None:
            from formsteward.settings import get_settings
            timeout = get_settings().fetch_timeout_s
        self.client = client or httpx.Client(timeout=timeout)

    def fetch_form_json(self, url: str) -> str:
        """
        Descarga el JSON del formulario.

        Raises:
            FormFetchError: si la respuesta no es 200 o falla la red
        """
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            raise FormFetchError(url) from e
        if response.status_code != 200:
            raise FormFetchError(url, response.status_code)
        return response.text

    def close(self) -> None:
        self.client.close()
