"""
Modelos de la definición de formularios.

Este módulo contiene los modelos Pydantic (inmutables) que describen
un formulario: reglas, opciones, campos, pasos y dependencias.
"""

from formsteward.models.base import DefinitionModel
from formsteward.models.validation import ValidationRule, format_bound
from formsteward.models.option import Option, find_option, dedupe_options
from formsteward.models.dependency import Dependency, PLACEHOLDER_RE
from formsteward.models.field import (
    FieldType,
    FormField,
    TEXT_TYPES,
    CHOICE_TYPES,
    MEDIA_TYPES,
)
from formsteward.models.step import FormStep
from formsteward.models.form import FormDefinition

__all__ = [
    # Clase base
    "DefinitionModel",
    # Reglas y opciones
    "ValidationRule",
    "format_bound",
    "Option",
    "find_option",
    "dedupe_options",
    # Dependencias
    "Dependency",
    "PLACEHOLDER_RE",
    # Campos
    "FieldType",
    "FormField",
    "TEXT_TYPES",
    "CHOICE_TYPES",
    "MEDIA_TYPES",
    # Pasos y formulario
    "FormStep",
    "FormDefinition",
]
