"""
Evaluación de reglas de validación.

evaluate() es una función pura: dadas las reglas de un campo y un valor
candidato retorna un veredicto y un mensaje. Los mensajes son parte del
contrato visible para el usuario final y se mantienen literalmente.

evaluate_field() agrega los adaptadores por tipo de campo (número,
fecha, opciones, medios) y luego delega en evaluate().
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Optional

from formsteward.models import FieldType, FormField, ValidationRule, format_bound

YEAR_RE = re.compile(r"^\d{4}$")


@dataclass(frozen=True)
class ValidationResult:
    """Resultado de validar un valor."""
    valid: bool
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(True)


def is_empty(value: Any) -> bool:
    """Valor ausente: None, cadena vacía o lista vacía."""
    if value is None:
        return True
    if isinstance(value, str) and value == "":
        return True
    if isinstance(value, (list, tuple)) and len(value) == 0:
        return True
    return False


def is_number(value: Any) -> bool:
    """int/float, excluyendo bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern)


def evaluate(rule: ValidationRule, value: Any, label: str) -> ValidationResult:
    """
    Valida un valor contra las reglas de un campo.

    Orden: requerido -> longitud -> rango numérico -> patrón.
    Un valor ausente en un campo opcional es válido sin más chequeos.

    Args:
        rule: Reglas del campo
        value: Valor candidato
        label: Etiqueta del campo (para los mensajes)

    Returns:
        ValidationResult con valid y el mensaje del primer fallo
    """
    if is_empty(value):
        if rule.required:
            return ValidationResult(False, f"{label} is required")
        return VALID

    if isinstance(value, (str, list, tuple)):
        length = len(value)
        if rule.min_length is not None and length < rule.min_length:
            return ValidationResult(False, f"{label} must be at least {rule.min_length} characters")
        if rule.max_length is not None and length > rule.max_length:
            return ValidationResult(False, f"{label} cannot exceed {rule.max_length} characters")

    if is_number(value):
        if rule.min is not None and value < rule.min:
            return ValidationResult(False, f"{label} must be at least {format_bound(rule.min)}")
        if rule.max is not None and value > rule.max:
            return ValidationResult(False, f"{label} cannot exceed {format_bound(rule.max)}")

    if rule.pattern and isinstance(value, str):
        if not _compile(rule.pattern).search(value):
            return ValidationResult(False, f"Invalid {label}")

    return VALID


# ============================================================================
# Adaptadores por tipo de campo
# ============================================================================

def evaluate_field(field: FormField, value: Any) -> ValidationResult:
    """
    Valida el valor de un campo aplicando el adaptador de su tipo.

    Los tipos que no comparan cadenas (opciones por id, medios, casilla
    booleana) se adaptan aquí en lugar de duplicar reglas por tipo.
    """
    rule = field.validation
    ftype = field.type

    if ftype == FieldType.NUMBER:
        number = to_number(value)
        if number is None and not is_empty(value):
            return ValidationResult(False, f"{field.label} must be a number")
        return evaluate(rule, number, field.label)

    if ftype == FieldType.DATE:
        return _evaluate_date(field, value)

    if ftype.is_choice:
        return _evaluate_choice(field, value)

    if ftype.is_media:
        # Solo cuenta si el recurso está presente
        present = value if not isinstance(value, bool) else (value or None)
        return evaluate(ValidationRule(required=rule.required), present, field.label)

    return evaluate(rule, value, field.label)


def to_number(value: Any) -> Optional[float | int]:
    """Convierte un valor a número; None si no es posible."""
    if is_number(value):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip().replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() and "." not in text else number
    return None


def _evaluate_date(field: FormField, value: Any) -> ValidationResult:
    rule = field.validation
    if isinstance(value, datetime):
        value = value.date().isoformat()
    elif isinstance(value, date):
        value = value.isoformat()
    elif is_number(value):
        value = str(int(value))

    result = evaluate(rule, value, field.label)
    if not result.valid or is_empty(value):
        return result
    if rule.year_only and not YEAR_RE.match(str(value)):
        return ValidationResult(False, f"Invalid {field.label}")
    return result


def _evaluate_choice(field: FormField, value: Any) -> ValidationResult:
    rule = field.validation

    if field.is_boolean_checkbox:
        # Casilla única: requerida significa marcada
        if rule.required and value is not True:
            return ValidationResult(False, f"{field.label} is required")
        return VALID

    if isinstance(value, (list, tuple)):
        # Multi-selección: longitud = cantidad de opciones elegidas
        lengths = ValidationRule(
            required=rule.required,
            min_length=rule.min_length,
            max_length=rule.max_length,
        )
        return evaluate(lengths, list(value), field.label)

    # Selección única por id (0 es un id presente)
    return evaluate(ValidationRule(required=rule.required), value, field.label)
