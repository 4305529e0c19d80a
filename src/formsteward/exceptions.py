"""
Excepciones de formsteward.

Los errores estructurales (JSON mal formado, claves faltantes, referencias
colgantes) abortan la carga del formulario. Los fallos de validación de un
campo NO son excepciones: se devuelven como ValidationResult.
"""

from typing import Optional


class FormStewardError(Exception):
    """Excepción base del paquete."""


class MalformedJsonError(FormStewardError):
    """El texto recibido no es JSON válido (o no es un objeto)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"JSON mal formado: {detail}")


class MissingFieldError(FormStewardError):
    """Falta una clave requerida en la definición del formulario."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Falta la clave requerida: {path}")


class UnknownFieldReferenceError(FormStewardError):
    """Una dependencia nombra un campo que no existe en el formulario."""

    def __init__(self, field_name: str, detail: str = ""):
        self.field_name = field_name
        message = f"Campo desconocido: {field_name}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ConfigurationError(FormStewardError):
    """
    Definición estructuralmente inválida.

    Agrupa todas las violaciones encontradas en una sola excepción,
    en lugar de fallar en la primera.
    """

    def __init__(self, detail: str = "", issues: Optional[list[str]] = None):
        self.issues = list(issues or [])
        if not detail:
            detail = f"{len(self.issues)} problema(s) en la definición"
        self.detail = detail
        lines = [detail] + [f"  - {issue}" for issue in self.issues]
        super().__init__("\n".join(lines))


class FormFetchError(FormStewardError):
    """No se pudo descargar una definición de formulario."""

    def __init__(self, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        reason = f"HTTP {status_code}" if status_code is not None else "error de red"
        super().__init__(f"Failed to load data from {url} ({reason})")
