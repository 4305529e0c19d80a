"""
Dueños de campo: la parte no visual de cada widget de campo.

Un controlador mantiene el valor crudo de un campo montado, escucha el
canal de disparo y, cuando el disparo nombra su propio paso, se valida
y reporta valor + validez al almacén.

El renderizado (texto, selector de fecha, grabadora, etc.) queda fuera;
el renderizador solo llama a set_value() / capture() y lee
error_message.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from formsteward.dependencies import DependentFieldUpdate
from formsteward.models import FieldType, FormField, Option
from formsteward.state import FormStateStore, ValidationTrigger
from formsteward.utils.logger import logger
from formsteward.validation import ValidationResult, evaluate_field, is_empty


@dataclass(frozen=True)
class CaptureResult:
    """Recurso elegido o grabado por el colaborador de medios."""
    path: str


# capture() -> CaptureResult | None (None = el usuario canceló)
Capturer = Callable[[], Awaitable[Optional[CaptureResult]]]


class FieldController:
    """Dueño de un campo de texto, número, email, teléfono o fecha."""

    # Tipos que se validan en cada cambio (no esperan fin de edición)
    validate_on_change = False

    def __init__(
        self,
        field: FormField,
        step_name: str,
        store: FormStateStore,
        trigger: ValidationTrigger,
        default: Any = None,
    ):
        self.field = field
        self.step_name = step_name
        self.store = store
        self.trigger = trigger
        self.default = default if default is not None else field.default_value
        self.value: Any = self.default
        self.error_message: Optional[str] = None
        self.mounted = False
        self.on_value_changed: Optional[Callable[["FieldController", Any], Any]] = None

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def is_valid(self) -> Optional[bool]:
        """Validez registrada en el almacén (None si no se evaluó)."""
        return self.store.get_field_validity(self.step_name, self.name)

    def mount(self) -> None:
        """Se suscribe al disparo y siembra el valor por defecto."""
        if self.mounted:
            return
        stored = self.store.get_field_value(self.step_name, self.name)
        if stored is not None:
            # Volver a montar conserva lo ingresado antes
            self.value = stored
        elif self.value is not None:
            self.store.seed_values(self.step_name, {self.name: self.value})
        self.trigger.subscribe(self._on_trigger)
        self.mounted = True

    def unmount(self) -> None:
        if not self.mounted:
            return
        self.trigger.unsubscribe(self._on_trigger)
        self.mounted = False

    def set_value(self, value: Any, editing_complete: bool = False) -> Optional[ValidationResult]:
        """
        Recibe un valor crudo del renderizador.

        Args:
            value: Valor actual
            editing_complete: El usuario terminó de editar el campo

        Returns:
            Resultado de la validación si se ejecutó, o None
        """
        self.value = value
        result = None
        if editing_complete or self.validate_on_change:
            result = self.validate()
        if self.on_value_changed is not None:
            self.on_value_changed(self, value)
        return result

    def validate(self) -> ValidationResult:
        """Valida el valor actual y lo reporta al almacén."""
        result = evaluate_field(self.field, self.value)
        self.error_message = result.message
        self.store.update_field(self.step_name, self.name, self.value, result.valid)
        return result

    def _on_trigger(self, step_name: Optional[str]) -> None:
        if step_name == self.step_name:
            self.validate()


class ChoiceFieldController(FieldController):
    """Dueño de un select, radio o checkbox (valor = id o lista de ids)."""

    validate_on_change = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.options: list[Option] = list(self.field.options or [])
        self.options_url: Optional[str] = self.field.fetch_options_url

    @property
    def option_ids(self) -> list[int]:
        return [opt.id for opt in self.options]

    def label_for(self, option_id) -> Optional[str]:
        for opt in self.options:
            if opt.id == option_id:
                return opt.value
        return None

    def set_options(self, options: list[Option]) -> None:
        """Reemplaza las opciones; descarta la selección que ya no exista."""
        self.options = list(options)
        if self.field.is_boolean_checkbox or is_empty(self.value):
            return
        ids = set(self.option_ids)
        if isinstance(self.value, (list, tuple)):
            kept = [v for v in self.value if v in ids]
            if len(kept) != len(self.value):
                self.value = kept
        elif self.value not in ids:
            self.value = None

    def apply_update(self, update: DependentFieldUpdate, options: Optional[list[Option]] = None) -> None:
        """Aplica la actualización de un padre (URL nueva u opciones vacías)."""
        previous = self.value
        self.options_url = update.url
        self.set_options(options or [])
        if update.clear:
            self.value = [] if self.field.accepts_many else None
        self._report_if_changed(previous)

    async def load_options(self, fetcher, url: Optional[str] = None) -> list[Option]:
        """
        Descarga las opciones con el colaborador externo.

        Un fallo de descarga deja el campo sin opciones.
        """
        url = url or self.options_url
        if not url:
            return self.options
        options = await fetcher.fetch(url)
        previous = self.value
        self.options_url = url
        self.set_options(options)
        self._report_if_changed(previous)
        return self.options

    def _report_if_changed(self, previous: Any) -> None:
        # Una selección descartada debe reflejarse en el almacén
        if self.mounted and self.value != previous:
            self.validate()


class MediaFieldController(FieldController):
    """Dueño de un campo de archivo, imagen, audio o video."""

    validate_on_change = True

    @property
    def has_resource(self) -> bool:
        return not is_empty(self.value) and self.value is not False

    def set_resource(self, path: Optional[str]) -> ValidationResult:
        """Registra el recurso elegido (None = sin recurso)."""
        return self.set_value(path)

    async def capture(self, capturer: Capturer) -> ValidationResult:
        """
        Pide un recurso al colaborador de medios.

        Cancelar equivale a dejar el campo vacío.
        """
        result = await capturer()
        if result is None:
            logger.debug("Captura cancelada para '{}'", self.name)
        return self.set_resource(result.path if result is not None else None)


def build_controller(
    field: FormField,
    step_name: str,
    store: FormStateStore,
    trigger: ValidationTrigger,
    default: Any = None,
) -> FieldController:
    """Crea el dueño adecuado para el tipo de campo."""
    ftype = field.type
    if ftype.is_choice:
        cls = ChoiceFieldController
    elif ftype.is_media:
        cls = MediaFieldController
    elif ftype.is_text or ftype in (FieldType.NUMBER, FieldType.DATE):
        cls = FieldController
    else:
        raise ValueError(f"Tipo de campo sin controlador: {ftype}")
    return cls(field, step_name, store, trigger, default=default)
