"""
Clase base para los modelos Pydantic de la definición de formularios.

Los modelos son inmutables una vez construidos y aceptan tanto los
nombres Python (min_length) como las claves JSON (minLength).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class DefinitionModel(BaseModel):
    """
    Modelo base inmutable.

    Proporciona:
    - Congelado tras la construcción (frozen)
    - Alias camelCase para (de)serializar el JSON de definición
    - to_json_dict(): dict con claves JSON, sin valores vacíos opcionales
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def to_json_dict(self) -> dict[str, Any]:
        """Retorna el modelo como dict con las claves del JSON de definición."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
