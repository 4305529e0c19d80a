"""
Reglas de validación de un campo.
"""

from typing import Optional

from pydantic import Field

from formsteward.models.base import DefinitionModel


class ValidationRule(DefinitionModel):
    """Restricciones asociadas a un campo del formulario."""
    required: bool = False
    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None  # Expresión regular
    year_only: Optional[bool] = Field(default=None, alias="yearOnly")

    @property
    def has_constraints(self) -> bool:
        """True si hay alguna restricción además de 'required'."""
        return any(
            v is not None
            for v in (self.min_length, self.max_length, self.min, self.max, self.pattern)
        )

    def describe(self) -> str:
        """Resumen corto de las reglas (para tablas de la CLI)."""
        parts = []
        if self.required:
            parts.append("requerido")
        if self.min_length is not None:
            parts.append(f"len>={self.min_length}")
        if self.max_length is not None:
            parts.append(f"len<={self.max_length}")
        if self.min is not None:
            parts.append(f">={format_bound(self.min)}")
        if self.max is not None:
            parts.append(f"<={format_bound(self.max)}")
        if self.pattern:
            parts.append(f"/{self.pattern}/")
        if self.year_only:
            parts.append("solo año")
        return ", ".join(parts) if parts else "-"


def format_bound(value: float) -> str:
    """Formatea un límite numérico sin '.0' si es entero."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
