"""
Sesión de un formulario multi-paso.

Una FormSession es dueña de su almacén, su canal de disparo y su
posición de paso. Varias sesiones pueden convivir sin compartir estado.

Protocolo para avanzar de paso:
    1. trigger(paso actual): cada dueño de campo del paso se valida
    2. esperar a que las reacciones terminen
    3. leer is_step_valid(paso actual)
    4. reset() del disparo
    5. avanzar (o quedarse si el paso es inválido)
"""

from enum import Enum
from typing import Any, Optional

from formsteward.dependencies import DependencyResolver, DependentFieldUpdate
from formsteward.fields import ChoiceFieldController, FieldController, build_controller
from formsteward.models import FormDefinition, FormStep
from formsteward.state import FormStateStore, ValidationTrigger
from formsteward.utils.logger import logger


class StepResult(Enum):
    """Resultado de una acción de navegación."""
    NEXT = "next"             # Se avanzó al siguiente paso
    BACK = "back"             # Se volvió al paso anterior
    BLOCKED = "blocked"       # El paso tiene campos inválidos (o no hay a dónde ir)
    COMPLETED = "completed"   # Último paso válido: formulario enviado


class StepperNavigation:
    """
    Callbacks de navegación.

    Las subclases redefinen los que necesiten; por defecto no hacen nada.
    """

    def on_next_step(self, previous_step_data: Optional[dict[str, Any]]) -> None:
        """Se llama al avanzar, con los datos del paso que se deja."""

    def on_previous_step(self) -> None:
        """Se llama al volver al paso anterior."""

    def on_submit(self, form_data: dict[str, dict[str, Any]]) -> None:
        """Se llama al enviar el formulario completo."""


class FormSession:
    """Controlador de una sesión de formulario."""

    def __init__(
        self,
        definition: FormDefinition,
        navigation: Optional[StepperNavigation] = None,
        fetcher=None,
        store: Optional[FormStateStore] = None,
        trigger: Optional[ValidationTrigger] = None,
    ):
        self.definition = definition
        self.navigation = navigation or StepperNavigation()
        self.fetcher = fetcher
        self.store = store or FormStateStore()
        self.trigger = trigger or ValidationTrigger()
        self.resolver = DependencyResolver(definition)
        self.current_step = 0
        self.controllers: dict[str, FieldController] = {}
        self.submitted: Optional[dict[str, dict[str, Any]]] = None
        # URLs de opciones resueltas para campos aún no montados
        self._pending_updates: dict[str, DependentFieldUpdate] = {}
        self.mount_step(0)

    # ------------------------------------------------------------------
    # Pasos
    # ------------------------------------------------------------------

    @property
    def step(self) -> FormStep:
        return self.definition.steps[self.current_step]

    @property
    def step_count(self) -> int:
        return len(self.definition.steps)

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.step_count - 1

    def mount_step(self, index: int) -> None:
        """Desmonta los campos actuales y monta los del paso index."""
        if not 0 <= index < self.step_count:
            raise IndexError(f"Paso fuera de rango: {index}")

        for controller in self.controllers.values():
            controller.unmount()
        self.controllers = {}

        self.current_step = index
        step = self.step
        for fld in step.fields:
            controller = build_controller(
                fld,
                step.name,
                self.store,
                self.trigger,
                default=self.definition.default_for(fld.name),
            )
            controller.mount()
            self.controllers[fld.name] = controller

            pending = self._pending_updates.pop(fld.name, None)
            if pending is not None and isinstance(controller, ChoiceFieldController):
                controller.apply_update(pending)

        self.store.initialize_step_validity(step.name, step.field_names)
        logger.debug("Paso {}/{} montado: '{}'", index + 1, self.step_count, step.name)

    def controller(self, field_name: str) -> FieldController:
        """Dueño de un campo del paso actual."""
        try:
            return self.controllers[field_name]
        except KeyError:
            raise KeyError(f"El campo '{field_name}' no está montado en el paso '{self.step.name}'") from None

    def _settle(self) -> bool:
        step_name = self.step.name
        valid = self.store.is_step_valid(step_name)
        self.trigger.reset()
        if not valid:
            logger.debug(
                "Paso '{}' bloqueado; campos inválidos: {}",
                step_name,
                ", ".join(self.store.invalid_fields(step_name)),
            )
        return valid

    def _advance(self) -> StepResult:
        step_data = self.store.get_step_data(self.step.name)
        if self.is_last_step:
            return StepResult.COMPLETED if self.submit() is not None else StepResult.BLOCKED
        self.navigation.on_next_step(previous_step_data=step_data)
        self.mount_step(self.current_step + 1)
        return StepResult.NEXT

    def next_step(self) -> StepResult:
        """Valida el paso actual y avanza si es válido."""
        self.trigger.trigger(self.step.name)
        if not self._settle():
            return StepResult.BLOCKED
        return self._advance()

    async def next_step_async(self) -> StepResult:
        """Como next_step(), esperando a los dueños de campo asíncronos."""
        await self.trigger.trigger_and_wait(self.step.name)
        if not self._settle():
            return StepResult.BLOCKED
        return self._advance()

    def previous_step(self) -> StepResult:
        """Vuelve al paso anterior (sin validar)."""
        if self.is_first_step:
            return StepResult.BLOCKED
        self.mount_step(self.current_step - 1)
        self.navigation.on_previous_step()
        return StepResult.BACK

    def is_complete(self) -> bool:
        """True si todos los pasos son válidos."""
        return self.store.is_form_valid(self.definition.step_names)

    def submit(self) -> Optional[dict[str, dict[str, Any]]]:
        """
        Envía el formulario si todos los pasos son válidos.

        Returns:
            Datos de todos los pasos, o None si algún paso no es válido
        """
        if not self.is_complete():
            logger.debug("Envío rechazado: hay pasos sin validar o inválidos")
            return None
        data = self.store.get_all_data()
        self.submitted = data
        self.navigation.on_submit(form_data=data)
        return data

    # ------------------------------------------------------------------
    # Valores y dependencias
    # ------------------------------------------------------------------

    def set_field_value(self, field_name: str, value: Any, editing_complete: bool = True):
        """Asigna el valor de un campo montado (como lo haría el renderizador)."""
        return self.controller(field_name).set_value(value, editing_complete=editing_complete)

    async def propagate(self, field_name: str, value: Any) -> list[DependentFieldUpdate]:
        """
        Propaga el cambio de un campo a sus dependientes.

        Resuelve las URLs, descarga las opciones (si hay fetcher) y las
        entrega a los dueños montados; para los no montados quedan
        pendientes hasta que se monte su paso.
        """
        updates = self.resolver.resolve(field_name, value)
        for update in updates:
            controller = self.controllers.get(update.dependent_field)
            if not isinstance(controller, ChoiceFieldController):
                if controller is not None:
                    logger.warning("'{}' no es un campo de opciones", update.dependent_field)
                else:
                    logger.debug("'{}' no está montado; actualización pendiente", update.dependent_field)
                self._pending_updates[update.dependent_field] = update
                continue

            controller.apply_update(update)
            if update.url and self.fetcher is not None:
                await controller.load_options(self.fetcher, update.url)
        return updates
