"""
Asistente interactivo: completa un formulario paso a paso en la terminal.

Cada campo se pide según su tipo con questionary; "Siguiente" dispara
la validación del paso y muestra los mensajes de los campos inválidos.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any, Optional

import questionary
import typer

from formsteward.cli.inspect import FormPath, load_or_exit
from formsteward.cli.theme import (
    get_prompt_style,
    print_error,
    print_header,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from formsteward.fields import ChoiceFieldController, FieldController, MediaFieldController
from formsteward.models import FieldType, FormDefinition
from formsteward.services import OptionFetcher
from formsteward.session import FormSession, StepResult
from formsteward.utils.logger import logger


class WizardCancelled(Exception):
    """El usuario canceló el asistente (Ctrl+C en un prompt)."""


NAV_NEXT = "Siguiente"
NAV_SUBMIT = "Enviar"
NAV_BACK = "Anterior"
NAV_EDIT = "Editar campos"
NAV_CANCEL = "Cancelar"


def _ask(question) -> Any:
    answer = question.ask()
    if answer is None:
        raise WizardCancelled()
    return answer


async def _load_options(controller: ChoiceFieldController) -> None:
    async with OptionFetcher() as fetcher:
        await controller.load_options(fetcher)


class FormWizard:
    """Recorre una FormSession pidiendo los campos por consola."""

    def __init__(self, definition: FormDefinition):
        self.definition = definition
        self.session = FormSession(definition)
        self.style = get_prompt_style()

    # ------------------------------------------------------------------
    # Prompts por tipo
    # ------------------------------------------------------------------

    def _prompt_text(self, controller: FieldController) -> Any:
        fld = controller.field
        default = "" if controller.value is None else str(controller.value)
        question = fld.label
        if fld.type == FieldType.DATE:
            question += " (AAAA)" if fld.validation.year_only else " (AAAA-MM-DD)"
        prompt = questionary.text(
            f"{question}:",
            default=default,
            multiline=fld.type == FieldType.TEXTAREA,
            style=self.style,
        )
        return _ask(prompt)

    def _prompt_choice(self, controller: ChoiceFieldController) -> Any:
        fld = controller.field
        if fld.is_boolean_checkbox:
            return _ask(questionary.confirm(
                f"{fld.label}?",
                default=bool(controller.value),
                style=self.style,
            ))

        if not controller.options and controller.options_url:
            asyncio.run(_load_options(controller))
        if not controller.options:
            print_warning(f"'{fld.label}' no tiene opciones disponibles")
            return [] if fld.accepts_many else None

        if fld.accepts_many:
            selected = controller.value or []
            choices = [
                questionary.Choice(opt.value, value=opt.id, checked=opt.id in selected)
                for opt in controller.options
            ]
            return _ask(questionary.checkbox(f"{fld.label}:", choices=choices, style=self.style))

        choices = [questionary.Choice(opt.value, value=opt.id) for opt in controller.options]
        default = controller.value if controller.value in controller.option_ids else None
        return _ask(questionary.select(
            f"{fld.label}:",
            choices=choices,
            default=next((c for c in choices if c.value == default), None),
            style=self.style,
        ))

    def _prompt_media(self, controller: MediaFieldController) -> Optional[str]:
        path = _ask(questionary.path(
            f"{controller.field.label} ({controller.field.type.value}):",
            default=controller.value or "",
            style=self.style,
        ))
        return path or None

    def prompt_field(self, controller: FieldController) -> None:
        """Pide un campo y entrega el valor a su dueño."""
        if isinstance(controller, ChoiceFieldController):
            value = self._prompt_choice(controller)
        elif isinstance(controller, MediaFieldController):
            value = self._prompt_media(controller)
        else:
            value = self._prompt_text(controller)

        result = self.session.set_field_value(controller.name, value)
        if result is not None and not result.valid:
            print_error(result.message)

        if self.session.resolver.dependents_of(controller.name):
            parent_value = value
            if isinstance(controller, ChoiceFieldController) and not controller.field.accepts_many:
                parent_value = controller.label_for(value)
            asyncio.run(self.session.propagate(controller.name, parent_value))

    def prompt_step(self, only_invalid: bool = False) -> None:
        for name, controller in self.session.controllers.items():
            if only_invalid and self.session.store.get_field_validity(self.session.step.name, name):
                continue
            self.prompt_field(controller)

    # ------------------------------------------------------------------
    # Navegación
    # ------------------------------------------------------------------

    def _show_errors(self) -> None:
        for controller in self.session.controllers.values():
            if controller.error_message:
                print_error(controller.error_message)

    def _navigation_choice(self) -> str:
        choices = [NAV_SUBMIT if self.session.is_last_step else NAV_NEXT, NAV_EDIT]
        if not self.session.is_first_step:
            choices.append(NAV_BACK)
        choices.append(NAV_CANCEL)
        return _ask(questionary.select("¿Qué desea hacer?", choices=choices, style=self.style))

    def run(self) -> Optional[dict[str, dict[str, Any]]]:
        """
        Ejecuta el asistente.

        Returns:
            Datos del formulario enviado, o None si se canceló
        """
        session = self.session
        print_header(self.definition.form_name or "Formulario", f"{session.step_count} pasos")
        prompted = -1

        while True:
            if prompted != session.current_step:
                print_step(session.current_step + 1, session.step_count, session.step.title)
                self.prompt_step()
                prompted = session.current_step

            action = self._navigation_choice()
            if action == NAV_CANCEL:
                return None
            if action == NAV_EDIT:
                self.prompt_step()
                continue
            if action == NAV_BACK:
                session.previous_step()
                continue

            result = session.next_step()
            if result == StepResult.COMPLETED:
                return session.submitted
            if result == StepResult.BLOCKED:
                self._show_errors()
                print_warning("Corrija los campos marcados antes de continuar")
                self.prompt_step(only_invalid=True)


def form_fill(
    path: FormPath,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Archivo JSON donde guardar los datos"),
    ] = None,
):
    """
    Completa un formulario de forma interactiva.

    Ejemplo:
        formsteward fill registro.json -o datos.json
    """
    definition = load_or_exit(path)
    try:
        data = FormWizard(definition).run()
    except (WizardCancelled, KeyboardInterrupt):
        data = None

    if data is None:
        print_info("Formulario cancelado")
        raise typer.Exit(1)

    print_success("Formulario completo")
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text, encoding="utf-8")
        logger.info("Datos guardados en {}", output)
        print_success(f"Datos guardados en {output}")
