"""
Paso de un formulario multi-paso.
"""

from typing import Optional

from formsteward.models.base import DefinitionModel
from formsteward.models.field import FormField


class FormStep(DefinitionModel):
    """Lista ordenada de campos con nombre y título."""
    name: str
    title: str
    fields: list[FormField]
    id: Optional[int] = None

    def field(self, name: str) -> Optional[FormField]:
        """Obtiene un campo por su nombre."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def required_count(self) -> int:
        return sum(1 for f in self.fields if f.required)
