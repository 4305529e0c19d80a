"""
CLI de formsteward - Formularios multi-paso definidos en JSON.

Comandos:
- check: Verifica una definición
- show: Muestra pasos, campos y dependencias
- resolve: Calcula las URLs de opciones dependientes
- fill: Asistente interactivo para completar un formulario
"""

from typing import Annotated, Optional

import typer

from formsteward.cli.fill import form_fill
from formsteward.cli.inspect import form_check, form_resolve, form_show
from formsteward.cli.theme import set_theme
from formsteward.settings import get_settings
from formsteward.utils.logger import setup_logging_from_settings

app = typer.Typer(
    name="formsteward",
    help="Motor de formularios multi-paso definidos en JSON.",
    no_args_is_help=True,
)

app.command("check")(form_check)
app.command("show")(form_show)
app.command("resolve")(form_resolve)
app.command("fill")(form_fill)


@app.callback()
def main(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Nivel de log (por defecto FORMSTEWARD_LOG_LEVEL)"),
    ] = None,
):
    """
    formsteward - Define formularios en JSON, valídalos y complétalos.
    """
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level.upper()})
    setup_logging_from_settings(settings)
    set_theme(settings.theme)


if __name__ == "__main__":
    app()
