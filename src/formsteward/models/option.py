"""
Opción de un campo de selección (select, radio, checkbox).
"""

from formsteward.models.base import DefinitionModel


class Option(DefinitionModel):
    """Una opción: id numérico y etiqueta visible."""
    id: int
    value: str


def find_option(options: list[Option], option_id) -> Option | None:
    """Busca una opción por id."""
    for opt in options:
        if opt.id == option_id:
            return opt
    return None


def dedupe_options(options: list[Option]) -> list[Option]:
    """Elimina ids repetidos conservando la primera aparición."""
    seen: set[int] = set()
    result = []
    for opt in options:
        if opt.id in seen:
            continue
        seen.add(opt.id)
        result.append(opt)
    return result
