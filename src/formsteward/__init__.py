"""
formsteward - Motor de formularios multi-paso definidos en JSON.

Componentes principales:
- models: definición inmutable (pasos, campos, reglas, dependencias)
- parser: JSON -> FormDefinition, con validación estructural
- validation: evaluación pura de reglas
- state: almacén de valores/validez y canal de disparo de validación
- dependencies: resolución de URLs de opciones dependientes
- fields / session: dueños de campo y navegación entre pasos
"""

from loguru import logger as _logger

from formsteward.exceptions import (
    FormStewardError,
    MalformedJsonError,
    MissingFieldError,
    UnknownFieldReferenceError,
    ConfigurationError,
    FormFetchError,
)
from formsteward.models import (
    ValidationRule,
    Option,
    Dependency,
    FieldType,
    FormField,
    FormStep,
    FormDefinition,
)
from formsteward.parser import parse, try_parse, serialize, check_definition, ParseOk, ParseErr
from formsteward.validation import ValidationResult, evaluate, evaluate_field
from formsteward.state import FormState, FormStateStore, ValidationTrigger
from formsteward.dependencies import DependentFieldUpdate, DependencyResolver, resolve
from formsteward.fields import (
    CaptureResult,
    FieldController,
    ChoiceFieldController,
    MediaFieldController,
    build_controller,
)
from formsteward.session import FormSession, StepResult, StepperNavigation

__version__ = "0.1.0"

# Librería silenciosa por defecto; ver formsteward.utils.logger.setup_logging
_logger.disable("formsteward")

__all__ = [
    # Excepciones
    "FormStewardError",
    "MalformedJsonError",
    "MissingFieldError",
    "UnknownFieldReferenceError",
    "ConfigurationError",
    "FormFetchError",
    # Modelos
    "ValidationRule",
    "Option",
    "Dependency",
    "FieldType",
    "FormField",
    "FormStep",
    "FormDefinition",
    # Parser
    "parse",
    "try_parse",
    "serialize",
    "check_definition",
    "ParseOk",
    "ParseErr",
    # Validación
    "ValidationResult",
    "evaluate",
    "evaluate_field",
    # Estado
    "FormState",
    "FormStateStore",
    "ValidationTrigger",
    # Dependencias
    "DependentFieldUpdate",
    "DependencyResolver",
    "resolve",
    # Dueños de campo y sesión
    "CaptureResult",
    "FieldController",
    "ChoiceFieldController",
    "MediaFieldController",
    "build_controller",
    "FormSession",
    "StepResult",
    "StepperNavigation",
]
