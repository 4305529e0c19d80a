"""
Tema de la CLI: paleta de colores, consola Rich y funciones de impresión.
"""

from dataclasses import dataclass
from typing import Optional

from questionary import Style
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from formsteward.models import FormStep


@dataclass
class ColorPalette:
    """Paleta de colores para un tema."""
    primary: str      # Títulos, destacados
    secondary: str    # Subtítulos
    accent: str       # Valores importantes
    success: str
    warning: str
    error: str
    info: str
    muted: str        # Texto atenuado
    border: str


THEME_DEFAULT = ColorPalette(
    primary="#5f87af",
    secondary="#87afaf",
    accent="#af87af",
    success="#87af87",
    warning="#d7af5f",
    error="#d75f5f",
    info="#5f87af",
    muted="#808080",
    border="#5f5f5f",
)

THEME_MINIMAL = ColorPalette(
    primary="#ffffff",
    secondary="#b0b0b0",
    accent="#5fafff",
    success="#87d787",
    warning="#ffd787",
    error="#ff8787",
    info="#5fafff",
    muted="#606060",
    border="#404040",
)

THEMES = {
    "default": THEME_DEFAULT,
    "minimal": THEME_MINIMAL,
}

_palette: ColorPalette = THEME_DEFAULT
_console: Optional[Console] = None


def set_theme(name: str) -> None:
    """Establece el tema activo (desconocido -> default)."""
    global _palette, _console
    _palette = THEMES.get(name, THEME_DEFAULT)
    _console = None


def get_palette() -> ColorPalette:
    return _palette


def get_console() -> Console:
    """Consola Rich compartida por la CLI."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def get_prompt_style() -> Style:
    """Estilo de questionary según el tema actual."""
    p = get_palette()
    return Style([
        ("qmark", f"fg:{p.accent} bold"),
        ("question", "bold"),
        ("answer", f"fg:{p.success} bold"),
        ("pointer", f"fg:{p.accent} bold"),
        ("highlighted", f"fg:{p.primary} bold"),
        ("selected", f"fg:{p.success} bold"),
        ("instruction", f"fg:{p.muted} italic"),
    ])


# ============================================================================
# Impresión
# ============================================================================

def print_header(text: str, subtitle: Optional[str] = None) -> None:
    """Imprime un encabezado en panel."""
    p = get_palette()
    content = Text(text, style=f"bold {p.primary}")
    if subtitle:
        content.append(f"\n{subtitle}", style=p.muted)
    get_console().print(Panel(content, border_style=p.border, box=box.ROUNDED, padding=(0, 2)))


def print_step(step_num: int, total: int, title: str) -> None:
    """Imprime el indicador de paso con barra de progreso."""
    p = get_palette()
    bar_width = 30
    filled_width = int((step_num / total) * bar_width)

    progress_line = Text()
    progress_line.append("█" * filled_width, style=p.primary)
    progress_line.append("░" * (bar_width - filled_width), style=p.muted)
    progress_line.append(f"  {int((step_num / total) * 100)}%", style=p.muted)

    panel = Panel(
        progress_line,
        title=Text(f" Paso {step_num} de {total}", style=f"bold {p.secondary}"),
        subtitle=Text(title, style=f"italic {p.muted}"),
        subtitle_align="left",
        title_align="left",
        border_style=p.border,
        box=box.ROUNDED,
        padding=(0, 1),
        width=50,
    )
    console = get_console()
    console.print()
    console.print(panel)


def print_success(text: str) -> None:
    get_console().print(Text(f"[+] {text}", style=get_palette().success))


def print_warning(text: str) -> None:
    get_console().print(Text(f"[!] {text}", style=get_palette().warning))


def print_error(text: str) -> None:
    get_console().print(Text(f"[x] {text}", style=get_palette().error))


def print_info(text: str) -> None:
    get_console().print(Text(f"[i] {text}", style=get_palette().info))


def print_issues(issues: list[str], title: str = "Problemas") -> None:
    """Imprime una lista de problemas en un panel."""
    p = get_palette()
    content = Text()
    for i, issue in enumerate(issues):
        if i:
            content.append("\n")
        content.append("- ", style=p.error)
        content.append(issue)
    get_console().print(Panel(content, title=title, border_style=p.error, box=box.ROUNDED))


# ============================================================================
# Tablas
# ============================================================================

def create_step_table(step: FormStep) -> Table:
    """Tabla con los campos de un paso."""
    p = get_palette()
    table = Table(
        title=Text(f"{step.title} ({step.name})", style=f"bold {p.secondary}"),
        box=box.SIMPLE_HEAD,
        header_style=f"bold {p.primary}",
    )
    table.add_column("Campo", style="bold")
    table.add_column("Tipo")
    table.add_column("Etiqueta")
    table.add_column("Reglas", style=p.muted)
    table.add_column("Opciones", style=p.muted)

    for fld in step.fields:
        if fld.options:
            options = ", ".join(opt.value for opt in fld.options)
        elif fld.fetch_options_url:
            options = fld.fetch_options_url
        else:
            options = "-"
        table.add_row(
            Text(fld.name),
            fld.type.value,
            Text(fld.label),
            Text(fld.validation.describe()),
            Text(options),
        )
    return table
