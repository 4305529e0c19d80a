"""
Comandos CLI para inspeccionar definiciones: check, show, resolve.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.text import Text

from formsteward.dependencies import DependencyResolver
from formsteward.exceptions import ConfigurationError, FormStewardError
from formsteward.models import FormDefinition
from formsteward.services import FormService
from formsteward.cli.theme import (
    create_step_table,
    get_console,
    print_error,
    print_header,
    print_info,
    print_issues,
    print_success,
)

FormPath = Annotated[
    Path,
    typer.Argument(help="Archivo JSON con la definición", exists=True, dir_okay=False, readable=True),
]


def load_or_exit(path: Path) -> FormDefinition:
    """Carga la definición o termina con código 1 mostrando el error."""
    try:
        return FormService().load_form_file(path)
    except ConfigurationError as e:
        print_error(f"{path.name}: {e.detail}")
        print_issues(e.issues)
        raise typer.Exit(1)
    except FormStewardError as e:
        print_error(f"{path.name}: {e}")
        raise typer.Exit(1)


def form_check(path: FormPath):
    """
    Verifica que un formulario sea válido.

    Ejemplo:
        formsteward check registro.json
    """
    definition = load_or_exit(path)
    print_success(
        f"{path.name}: {len(definition.steps)} pasos, "
        f"{definition.count_fields()} campos, "
        f"{len(definition.dependencies)} dependencias"
    )


def form_show(path: FormPath):
    """
    Muestra los pasos y campos de un formulario.

    Ejemplo:
        formsteward show registro.json
    """
    definition = load_or_exit(path)
    console = get_console()
    print_header(definition.form_name or path.stem, f"{len(definition.steps)} pasos")
    for step in definition.steps:
        console.print(create_step_table(step))

    if definition.dependencies:
        console.print("Dependencias:", style="bold")
        for dep in definition.dependencies:
            url = dep.fetch_options_url or "(sin URL)"
            console.print(Text(f"  {dep.parent_field} -> {dep.dependent_field}  {url}"))


def form_resolve(
    path: FormPath,
    field: Annotated[str, typer.Argument(help="Campo padre que cambia")],
    value: Annotated[str, typer.Argument(help="Valor nuevo del campo padre")],
):
    """
    Muestra las URLs de opciones que se recargarían al cambiar un campo.

    Ejemplo:
        formsteward resolve autos.json make Toyota
    """
    definition = load_or_exit(path)
    try:
        updates = DependencyResolver(definition).resolve(field, value)
    except FormStewardError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not updates:
        print_info(f"Ningún campo depende de '{field}'")
        return
    for update in updates:
        typer.echo(f"{update.dependent_field}: {update.url}")
