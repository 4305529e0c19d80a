"""
Estado en tiempo de ejecución: almacén de valores/validez y canal de
disparo de validación.
"""

from formsteward.state.store import FormState, FormStateStore, StoreListener
from formsteward.state.trigger import ValidationTrigger, TriggerListener

__all__ = [
    "FormState",
    "FormStateStore",
    "StoreListener",
    "ValidationTrigger",
    "TriggerListener",
]
