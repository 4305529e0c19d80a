"""
Resolución de dependencias entre campos.

Dado el valor nuevo de un campo padre, determina qué campos dependientes
deben volver a pedir su lista de opciones y construye la URL resuelta.
No hace la petición HTTP: eso queda a cargo del colaborador externo
(ver formsteward.services.options).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import quote

from formsteward.exceptions import UnknownFieldReferenceError
from formsteward.models import PLACEHOLDER_RE, Dependency, FormDefinition


@dataclass(frozen=True)
class DependentFieldUpdate:
    """Instrucción para un campo dependiente."""
    dependent_field: str
    parent_field: str
    url: Optional[str]  # None si el padre quedó vacío
    clear: bool = False  # True: el padre quedó vacío, descartar opciones


def placeholder_value(value: Any, encode: bool = True) -> str:
    """Representación en texto del valor del padre para la URL."""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (list, tuple)):
        text = ",".join(str(v) for v in value)
    else:
        text = str(value)
    return quote(text, safe="") if encode else text


def fill_template(template: str, value: Any, encode: bool = True) -> str:
    """Sustituye el marcador ({parentValue} o similar) por el valor."""
    text = placeholder_value(value, encode=encode)
    return PLACEHOLDER_RE.sub(lambda _m: text, template)


def _is_cleared(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def resolve(
    dependencies: Iterable[Dependency],
    field_name: str,
    new_value: Any,
    known_fields: Optional[Iterable[str]] = None,
    encode: Optional[bool] = None,
) -> list[DependentFieldUpdate]:
    """
    Calcula las actualizaciones de los campos que dependen de field_name.

    Args:
        dependencies: Dependencias declaradas en el formulario
        field_name: Campo cuyo valor cambió
        new_value: Valor nuevo del campo
        known_fields: Nombres válidos; si se indica, una referencia fuera
            de este conjunto lanza UnknownFieldReferenceError
        encode: Codificar el valor para URL (por defecto según Settings)

    Returns:
        Como máximo una actualización por campo dependiente
    """
    if encode is None:
        from formsteward.settings import get_settings
        encode = get_settings().encode_placeholder_values

    known = set(known_fields) if known_fields is not None else None
    if known is not None and field_name not in known:
        raise UnknownFieldReferenceError(field_name, "el campo que cambió no existe")

    updates: dict[str, DependentFieldUpdate] = {}
    for dep in dependencies:
        if known is not None:
            for name in (dep.dependent_field, dep.parent_field):
                if name not in known:
                    raise UnknownFieldReferenceError(name, "referenciado por una dependencia")
        if dep.parent_field != field_name:
            continue
        if not dep.fetch_options_url:
            # Sin plantilla: la dependencia no implica recargar opciones
            continue
        if dep.dependent_field in updates:
            continue

        if _is_cleared(new_value):
            update = DependentFieldUpdate(dep.dependent_field, field_name, url=None, clear=True)
        else:
            url = fill_template(dep.fetch_options_url, new_value, encode=encode)
            update = DependentFieldUpdate(dep.dependent_field, field_name, url=url)
        updates[dep.dependent_field] = update

    return list(updates.values())


class DependencyResolver:
    """Resolver ligado a una definición (siempre verifica los nombres)."""

    def __init__(self, definition: FormDefinition, encode: Optional[bool] = None):
        self.definition = definition
        self.encode = encode
        self._known = definition.field_names

    def resolve(self, field_name: str, new_value: Any) -> list[DependentFieldUpdate]:
        return resolve(
            self.definition.dependencies,
            field_name,
            new_value,
            known_fields=self._known,
            encode=self.encode,
        )

    def dependents_of(self, field_name: str) -> list[str]:
        """Campos que dependen directamente de field_name."""
        return [d.dependent_field for d in self.definition.dependencies if d.parent_field == field_name]

    def parents_of(self, field_name: str) -> list[str]:
        """Campos de los que depende field_name."""
        return [d.parent_field for d in self.definition.dependencies if d.dependent_field == field_name]
