"""
Almacén observable del estado del formulario.

Guarda, por paso y por campo, el valor actual y la validez actual.
Es la única pieza mutable compartida de una sesión; cada sesión tiene
el suyo (no hay singletons de proceso).
"""

import copy
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from formsteward.utils.logger import logger

StoreListener = Callable[["FormStateStore"], Any]


@dataclass(frozen=True)
class FormState:
    """Instantánea del estado: valores y validez por paso y campo."""
    values: dict[str, dict[str, Any]] = field(default_factory=dict)
    validity: dict[str, dict[str, bool]] = field(default_factory=dict)

    def is_step_valid(self, step_name: str) -> bool:
        """Válido si existe, tiene entradas y todas son True."""
        entries = self.validity.get(step_name)
        if not entries:
            return False
        return all(v is True for v in entries.values())


class FormStateStore:
    """
    Contenedor mutable y observable del estado de un formulario.

    Todas las operaciones son síncronas. Cada mutación escribe valor y
    validez bajo el mismo lock y luego notifica a los suscriptores, de
    modo que ningún suscriptor ve un valor nuevo con validez vieja.
    """

    def __init__(self):
        self._values: dict[str, dict[str, Any]] = {}
        self._validity: dict[str, dict[str, bool]] = {}
        self._listeners: list[StoreListener] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Suscripción
    # ------------------------------------------------------------------

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Registra un suscriptor.

        Returns:
            Función que cancela la suscripción
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Mutaciones
    # ------------------------------------------------------------------

    def initialize_step_validity(self, step_name: str, field_names: Iterable[str]) -> None:
        """
        Agrega una entrada True para cada campo que aún no la tenga.

        Nunca sobrescribe una entrada existente: volver a montar un paso
        no pierde validaciones ya hechas.
        """
        with self._lock:
            entries = self._validity.setdefault(step_name, {})
            added = [name for name in field_names if name not in entries]
            for name in added:
                entries[name] = True
            if added:
                logger.debug("Paso '{}': {} campo(s) inicializados", step_name, len(added))
                self._notify()

    def update_field(self, step_name: str, field_name: str, value: Any, is_valid: bool) -> None:
        """Actualiza valor y validez de un campo (una sola notificación)."""
        with self._lock:
            self._values.setdefault(step_name, {})[field_name] = value
            self._validity.setdefault(step_name, {})[field_name] = bool(is_valid)
            self._notify()

    def seed_values(self, step_name: str, values: dict[str, Any]) -> None:
        """
        Guarda valores iniciales (por defecto) sin tocar la validez.

        Solo completa campos sin valor; no pisa lo que ya ingresó el usuario.
        """
        with self._lock:
            step_values = self._values.setdefault(step_name, {})
            added = False
            for name, value in values.items():
                if value is None or name in step_values:
                    continue
                step_values[name] = value
                added = True
            if added:
                self._notify()

    def clear(self) -> None:
        """Descarta todo el estado."""
        with self._lock:
            self._values.clear()
            self._validity.clear()
            self._notify()

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    def is_step_valid(self, step_name: str) -> bool:
        """True si el paso existe, tiene campos evaluados y todos son válidos."""
        with self._lock:
            entries = self._validity.get(step_name)
            if not entries:
                return False
            return all(v is True for v in entries.values())

    def is_form_valid(self, step_names: Iterable[str]) -> bool:
        """True si todos los pasos indicados son válidos."""
        names = list(step_names)
        if not names:
            return False
        return all(self.is_step_valid(name) for name in names)

    def get_step_data(self, step_name: str) -> Optional[dict[str, Any]]:
        """Valores del paso, o None si nunca se tocó."""
        with self._lock:
            values = self._values.get(step_name)
            return dict(values) if values is not None else None

    def get_all_data(self) -> dict[str, dict[str, Any]]:
        """Copia de todos los valores, por paso."""
        with self._lock:
            return copy.deepcopy(self._values)

    def get_field_value(self, step_name: str, field_name: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(step_name, {}).get(field_name, default)

    def get_field_validity(self, step_name: str, field_name: str) -> Optional[bool]:
        """Validez de un campo; None si aún no fue evaluado."""
        with self._lock:
            return self._validity.get(step_name, {}).get(field_name)

    def invalid_fields(self, step_name: str) -> list[str]:
        """Campos del paso marcados como inválidos."""
        with self._lock:
            return [n for n, ok in self._validity.get(step_name, {}).items() if not ok]

    def snapshot(self) -> FormState:
        """Instantánea inmutable (copias profundas)."""
        with self._lock:
            return FormState(
                values=copy.deepcopy(self._values),
                validity=copy.deepcopy(self._validity),
            )
