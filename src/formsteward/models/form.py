"""
Definición completa de un formulario.

Producida una sola vez por el parser y tratada como configuración de
solo lectura durante toda la sesión.
"""

from typing import Any, Optional

from pydantic import Field

from formsteward.models.base import DefinitionModel
from formsteward.models.dependency import Dependency
from formsteward.models.field import FormField
from formsteward.models.step import FormStep


class FormDefinition(DefinitionModel):
    """Pasos ordenados, valores por defecto globales y dependencias."""
    form_name: str = Field(default="", alias="formName")
    default_values: dict[str, Any] = Field(default_factory=dict, alias="defaultValues")
    steps: list[FormStep]
    dependencies: list[Dependency] = Field(default_factory=list)

    def step(self, name: str) -> Optional[FormStep]:
        """Obtiene un paso por su nombre."""
        for s in self.steps:
            if s.name == name:
                return s
        return None

    def step_index(self, name: str) -> int:
        """Índice de un paso por nombre (-1 si no existe)."""
        for i, s in enumerate(self.steps):
            if s.name == name:
                return i
        return -1

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]

    @property
    def field_names(self) -> set[str]:
        """Nombres de todos los campos de todos los pasos."""
        return {f.name for s in self.steps for f in s.fields}

    def find_field(self, name: str) -> Optional[tuple[FormStep, FormField]]:
        """Busca un campo en todos los pasos; retorna (paso, campo)."""
        for s in self.steps:
            f = s.field(name)
            if f is not None:
                return s, f
        return None

    def default_for(self, field_name: str) -> Any:
        """
        Valor por defecto de un campo.

        El 'value' del propio campo tiene prioridad sobre
        formConfig.defaultValues.
        """
        found = self.find_field(field_name)
        if found is not None and found[1].default_value is not None:
            return found[1].default_value
        return self.default_values.get(field_name)

    def count_fields(self) -> int:
        return sum(len(s.fields) for s in self.steps)
