"""
Canal de disparo de validación.

Difunde "validar ahora" dirigido a un paso por nombre. Cada dueño de
campo se suscribe al montarse y compara el nombre recibido con el de su
propio paso; así se valida un paso completo sin un registro central de
campos.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional

from formsteward.utils.logger import logger

TriggerListener = Callable[[Optional[str]], Any]


class ValidationTrigger:
    """Canal publish/subscribe con carga tipada: el nombre del paso."""

    def __init__(self):
        self._current: Optional[str] = None
        self._listeners: list[TriggerListener] = []

    @property
    def current(self) -> Optional[str]:
        """Paso con validación pendiente (None si no hay)."""
        return self._current

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: TriggerListener) -> Callable[[], None]:
        """
        Registra un suscriptor.

        Returns:
            Función que cancela la suscripción
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: TriggerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _broadcast(self, step_name: Optional[str]) -> list[Any]:
        self._current = step_name
        return [listener(step_name) for listener in list(self._listeners)]

    def trigger(self, step_name: str) -> int:
        """
        Dispara la validación de un paso.

        Al retornar, todos los suscriptores síncronos ya reaccionaron.

        Returns:
            Cantidad de suscriptores notificados
        """
        logger.debug("Validación disparada para el paso '{}'", step_name)
        results = self._broadcast(step_name)
        if _close_coroutines(results):
            logger.warning("Suscriptor asíncrono en trigger(); usar trigger_and_wait()")
        return len(results)

    async def trigger_and_wait(self, step_name: str) -> int:
        """
        Dispara la validación y espera a que todas las reacciones terminen.

        Los suscriptores pueden retornar un awaitable; se esperan todos
        juntos antes de retornar.

        Returns:
            Cantidad de suscriptores notificados
        """
        logger.debug("Validación disparada (con espera) para el paso '{}'", step_name)
        results = self._broadcast(step_name)
        pending = [r for r in results if inspect.isawaitable(r)]
        if pending:
            await asyncio.gather(*pending)
        return len(results)

    def reset(self) -> None:
        """Limpia la validación pendiente y notifica con None."""
        _close_coroutines(self._broadcast(None))


def _close_coroutines(results: list[Any]) -> int:
    """Cierra las corrutinas que nadie va a esperar; retorna cuántas había."""
    closed = 0
    for result in results:
        if inspect.iscoroutine(result):
            result.close()
            closed += 1
    return closed
