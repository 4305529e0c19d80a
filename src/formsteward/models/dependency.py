"""
Dependencia entre campos: la lista de opciones de un campo depende
del valor actual de otro.
"""

import re
from typing import Optional

from pydantic import Field

from formsteward.models.base import DefinitionModel

# Marcador de sustitución en la plantilla de URL, ej: {parentValue}
PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class Dependency(DefinitionModel):
    """Relación campo dependiente -> campo padre."""
    dependent_field: str = Field(alias="dependentField")
    parent_field: str = Field(alias="parentField")
    fetch_options_url: Optional[str] = Field(default=None, alias="fetchOptionsUrl")

    @property
    def placeholder(self) -> Optional[str]:
        """Nombre del marcador en la plantilla (sin llaves), o None."""
        if not self.fetch_options_url:
            return None
        match = PLACEHOLDER_RE.search(self.fetch_options_url)
        return match.group(1) if match else None

    @property
    def is_self_reference(self) -> bool:
        return self.dependent_field == self.parent_field
