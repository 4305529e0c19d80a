"""
Definición de un campo del formulario.

El valor y la validez en tiempo de ejecución NO viven aquí sino en
FormStateStore; FormField es un objeto de valor inmutable.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from formsteward.models.base import DefinitionModel
from formsteward.models.option import Option
from formsteward.models.validation import ValidationRule


class FieldType(str, Enum):
    """Tipos de campo soportados."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    TEL = "tel"
    DATE = "date"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE = "file"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"

    @property
    def is_text(self) -> bool:
        """Campos de texto libre."""
        return self in TEXT_TYPES

    @property
    def is_choice(self) -> bool:
        """Campos que eligen entre opciones."""
        return self in CHOICE_TYPES

    @property
    def is_media(self) -> bool:
        """Campos cuyo valor es un recurso elegido o grabado."""
        return self in MEDIA_TYPES


TEXT_TYPES = frozenset({
    FieldType.TEXT, FieldType.TEXTAREA, FieldType.EMAIL, FieldType.TEL,
})
CHOICE_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX})
MEDIA_TYPES = frozenset({
    FieldType.FILE, FieldType.IMAGE, FieldType.AUDIO, FieldType.VIDEO,
})


class FormField(DefinitionModel):
    """Un campo: tipo, etiqueta, nombre y reglas."""
    type: FieldType
    label: str
    name: str
    id: Optional[int] = None
    validation: ValidationRule = Field(default_factory=ValidationRule)
    options: Optional[list[Option]] = None
    fetch_options_url: Optional[str] = Field(default=None, alias="fetchOptionsUrl")
    multi_select: bool = Field(default=False, alias="multiSelect")
    default_value: Any = Field(default=None, alias="value")

    @property
    def required(self) -> bool:
        return self.validation.required

    @property
    def has_static_options(self) -> bool:
        return bool(self.options)

    @property
    def is_boolean_checkbox(self) -> bool:
        """Checkbox sin opciones: una sola casilla sí/no."""
        return (
            self.type == FieldType.CHECKBOX
            and not self.options
            and not self.fetch_options_url
        )

    @property
    def accepts_many(self) -> bool:
        """True si el valor es una lista de ids de opción."""
        if self.type == FieldType.CHECKBOX:
            return not self.is_boolean_checkbox
        return self.type == FieldType.SELECT and self.multi_select

    def option_label(self, option_id) -> Optional[str]:
        """Etiqueta de una opción estática por id."""
        for opt in self.options or []:
            if opt.id == option_id:
                return opt.value
        return None
