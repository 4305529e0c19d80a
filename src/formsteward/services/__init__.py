"""
Colaboradores externos del núcleo: carga de formularios y descarga de
opciones por HTTP.
"""

from formsteward.services.api import ApiService
from formsteward.services.form_service import FormService
from formsteward.services.options import OptionFetcher, parse_options

__all__ = [
    "ApiService",
    "FormService",
    "OptionFetcher",
    "parse_options",
]
