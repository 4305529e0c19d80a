"""
Parser de definiciones de formulario en JSON.

Convierte el documento JSON en un FormDefinition y ejecuta una pasada
estructural que reúne TODAS las violaciones en un único
ConfigurationError. Nunca se entrega una definición parcialmente válida.

Formato esperado:

    {
      "formName": "...",
      "formConfig": {"defaultValues": {"campo": valor}},
      "steps": [
        {"id": 1, "name": "...", "title": "...", "fields": [
          {"type": "text", "label": "...", "name": "...",
           "validation": {...}, "options": [...], "fetchOptionsUrl": "...",
           "multiSelect": false, "value": ..., "dependencies": [...]}
        ]}
      ],
      "dependencies": [...]
    }
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from formsteward.exceptions import (
    ConfigurationError,
    FormStewardError,
    MalformedJsonError,
    MissingFieldError,
)
from formsteward.models import (
    Dependency,
    FieldType,
    FormDefinition,
    FormField,
    FormStep,
    Option,
    ValidationRule,
)
from formsteward.utils.logger import logger

VALIDATION_KEYS = ("required", "minLength", "maxLength", "min", "max", "pattern", "yearOnly")


# ============================================================================
# Resultado explícito (Ok | Err)
# ============================================================================

@dataclass(frozen=True)
class ParseOk:
    """Parseo exitoso."""
    definition: FormDefinition
    ok = True


@dataclass(frozen=True)
class ParseErr:
    """Parseo fallido con el error estructural correspondiente."""
    error: FormStewardError
    ok = False


ParseResult = Union[ParseOk, ParseErr]


# ============================================================================
# API pública
# ============================================================================

def parse(json_text: str | bytes) -> FormDefinition:
    """
    Parsea un documento JSON y retorna la definición del formulario.

    Args:
        json_text: Documento JSON (texto o bytes UTF-8)

    Returns:
        FormDefinition validado estructuralmente

    Raises:
        MalformedJsonError: si el texto no es JSON o no es un objeto
        MissingFieldError: en la primera clave requerida ausente
        ConfigurationError: con todas las violaciones estructurales
    """
    data = _decode(json_text)
    builder = _DefinitionBuilder()
    definition = builder.build(data)

    issues = builder.issues + check_definition(definition)
    if issues:
        raise ConfigurationError(issues=issues)

    logger.debug(
        "Formulario '{}' parseado: {} pasos, {} campos, {} dependencias",
        definition.form_name,
        len(definition.steps),
        definition.count_fields(),
        len(definition.dependencies),
    )
    return definition


def try_parse(json_text: str | bytes) -> ParseResult:
    """Como parse(), pero retorna ParseOk/ParseErr en lugar de lanzar."""
    try:
        return ParseOk(parse(json_text))
    except FormStewardError as e:
        return ParseErr(e)


def serialize(definition: FormDefinition, indent: Optional[int] = 2) -> str:
    """
    Serializa una definición al formato JSON que acepta parse().

    Las dependencias se escriben en la forma por nombres
    (dependentField/parentField), de modo que parse(serialize(d)) == d.
    """
    data: dict[str, Any] = {
        "formName": definition.form_name,
        "formConfig": {"defaultValues": definition.default_values},
        "steps": [step.to_json_dict() for step in definition.steps],
        "dependencies": [dep.to_json_dict() for dep in definition.dependencies],
    }
    return json.dumps(data, indent=indent, ensure_ascii=False)


def check_definition(definition: FormDefinition) -> list[str]:
    """
    Pasada estructural sobre una definición ya construida.

    Returns:
        Lista de problemas encontrados (vacía si la definición es válida)
    """
    issues: list[str] = []

    if not definition.steps:
        issues.append("steps: el formulario no tiene pasos")

    seen_steps: set[str] = set()
    for i, step in enumerate(definition.steps):
        path = f"steps[{i}]"
        if step.name in seen_steps:
            issues.append(f"{path}.name: paso duplicado '{step.name}'")
        seen_steps.add(step.name)

        if not step.fields:
            issues.append(f"{path}.fields: el paso '{step.name}' no tiene campos")

        seen_fields: set[str] = set()
        for j, fld in enumerate(step.fields):
            fpath = f"{path}.fields[{j}]"
            if fld.name in seen_fields:
                issues.append(f"{fpath}.name: campo duplicado '{fld.name}' en el paso '{step.name}'")
            seen_fields.add(fld.name)
            issues.extend(_check_field(fld, fpath))

    issues.extend(_check_dependencies(definition))
    return issues


# ============================================================================
# Decodificación y construcción
# ============================================================================

def _decode(json_text: str | bytes) -> dict:
    """Decodifica el JSON de nivel superior."""
    if isinstance(json_text, (bytes, bytearray)):
        try:
            json_text = json_text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJsonError(f"no es UTF-8 válido ({e})") from e
    try:
        data = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedJsonError(str(e)) from e
    if not isinstance(data, dict):
        raise MalformedJsonError("el documento debe ser un objeto JSON")
    return data


def _require(obj: dict, key: str, path: str) -> Any:
    """Obtiene una clave requerida; falla en la primera ausente."""
    if key not in obj:
        raise MissingFieldError(f"{path}.{key}" if path else key)
    return obj[key]


class _DefinitionBuilder:
    """Construye los modelos acumulando problemas de tipo en self.issues."""

    def __init__(self):
        self.issues: list[str] = []
        # id de campo -> [(id de paso, nombre de campo)]
        self._field_ids: dict[int, list[tuple[Optional[int], str]]] = {}
        self._field_dependencies: list[Dependency] = []

    def build(self, data: dict) -> FormDefinition:
        raw_steps = _require(data, "steps", "")
        form_name = data.get("formName") or ""
        if not isinstance(form_name, str):
            self.issues.append("formName: debe ser texto")
            form_name = str(form_name)

        default_values = self._default_values(data.get("formConfig"))

        steps: list[FormStep] = []
        if not isinstance(raw_steps, list):
            self.issues.append("steps: debe ser una lista")
        else:
            for i, raw_step in enumerate(raw_steps):
                step = self._step(raw_step, f"steps[{i}]")
                if step is not None:
                    steps.append(step)

        dependencies = self._dependencies(data.get("dependencies"), steps)
        for dep in self._field_dependencies:
            if dep not in dependencies:
                dependencies.append(dep)

        return FormDefinition(
            form_name=form_name,
            default_values=default_values,
            steps=steps,
            dependencies=dependencies,
        )

    def _default_values(self, form_config) -> dict:
        if form_config is None:
            return {}
        if not isinstance(form_config, dict):
            self.issues.append("formConfig: debe ser un objeto")
            return {}
        values = form_config.get("defaultValues") or {}
        if not isinstance(values, dict):
            self.issues.append("formConfig.defaultValues: debe ser un objeto")
            return {}
        return dict(values)

    def _step(self, raw: Any, path: str) -> Optional[FormStep]:
        if not isinstance(raw, dict):
            self.issues.append(f"{path}: debe ser un objeto")
            return None

        raw_fields = _require(raw, "fields", path)
        name = raw.get("name")
        title = raw.get("title")
        if name is None and title is None:
            raise MissingFieldError(f"{path}.name")
        name = name if name is not None else title
        title = title if title is not None else name
        if not isinstance(name, str) or not isinstance(title, str):
            self.issues.append(f"{path}: 'name' y 'title' deben ser texto")
            return None

        step_id = raw.get("id")
        if step_id is not None and not _is_int(step_id):
            self.issues.append(f"{path}.id: debe ser entero")
            step_id = None

        fields: list[FormField] = []
        if not isinstance(raw_fields, list):
            self.issues.append(f"{path}.fields: debe ser una lista")
        else:
            for j, raw_field in enumerate(raw_fields):
                fld = self._field(raw_field, f"{path}.fields[{j}]")
                if fld is None:
                    continue
                fields.append(fld)
                if fld.id is not None:
                    self._field_ids.setdefault(fld.id, []).append((step_id, fld.name))

        return FormStep(id=step_id, name=name, title=title, fields=fields)

    def _field(self, raw: Any, path: str) -> Optional[FormField]:
        if not isinstance(raw, dict):
            self.issues.append(f"{path}: debe ser un objeto")
            return None

        type_tag = _require(raw, "type", path)
        label = _require(raw, "label", path)
        name = _require(raw, "name", path)

        ok = True
        try:
            field_type = FieldType(type_tag)
        except ValueError:
            self.issues.append(f"{path}.type: tipo no soportado '{type_tag}'")
            ok = False
        for key, value in (("label", label), ("name", name)):
            if not isinstance(value, str):
                self.issues.append(f"{path}.{key}: debe ser texto")
                ok = False

        field_id = raw.get("id")
        if field_id is not None and not _is_int(field_id):
            self.issues.append(f"{path}.id: debe ser entero")
            field_id = None

        validation = self._validation(raw.get("validation"), f"{path}.validation")
        options = self._options(raw.get("options"), f"{path}.options")

        fetch_url = raw.get("fetchOptionsUrl")
        if fetch_url is not None and not isinstance(fetch_url, str):
            self.issues.append(f"{path}.fetchOptionsUrl: debe ser texto")
            fetch_url = None

        multi_select = raw.get("multiSelect") or False
        if not isinstance(multi_select, bool):
            self.issues.append(f"{path}.multiSelect: debe ser booleano")
            multi_select = False

        if not ok:
            return None

        fld = FormField(
            type=field_type,
            label=label,
            name=name,
            id=field_id,
            validation=validation,
            options=options,
            fetch_options_url=fetch_url,
            multi_select=multi_select,
            default_value=raw.get("value"),
        )
        self._collect_field_dependencies(fld, raw.get("dependencies"), f"{path}.dependencies")
        return fld

    def _validation(self, raw: Any, path: str) -> ValidationRule:
        if raw is None:
            return ValidationRule()
        if not isinstance(raw, dict):
            self.issues.append(f"{path}: debe ser un objeto")
            return ValidationRule()
        values = {k: raw[k] for k in VALIDATION_KEYS if raw.get(k) is not None}
        try:
            return ValidationRule.model_validate(values)
        except ValidationError as e:
            self.issues.extend(_pydantic_issues(e, path))
            return ValidationRule()

    def _options(self, raw: Any, path: str) -> Optional[list[Option]]:
        if raw is None:
            return None
        if not isinstance(raw, list):
            self.issues.append(f"{path}: debe ser una lista")
            return None
        options = []
        for k, raw_opt in enumerate(raw):
            opt_path = f"{path}[{k}]"
            if not isinstance(raw_opt, dict):
                self.issues.append(f"{opt_path}: debe ser un objeto")
                continue
            _require(raw_opt, "id", opt_path)
            _require(raw_opt, "value", opt_path)
            try:
                options.append(Option.model_validate({"id": raw_opt["id"], "value": raw_opt["value"]}))
            except ValidationError as e:
                self.issues.extend(_pydantic_issues(e, opt_path))
        return options

    def _collect_field_dependencies(self, fld: FormField, raw: Any, path: str) -> None:
        """Dependencias declaradas dentro del propio campo."""
        if raw is None:
            return
        if not isinstance(raw, list):
            self.issues.append(f"{path}: debe ser una lista")
            return
        for k, entry in enumerate(raw):
            if isinstance(entry, str):
                parent, url = entry, fld.fetch_options_url
            elif isinstance(entry, dict):
                parent = entry.get("parentField", entry.get("dependsOn"))
                if parent is None:
                    raise MissingFieldError(f"{path}[{k}].parentField")
                url = entry.get("fetchOptionsUrl", fld.fetch_options_url)
            else:
                self.issues.append(f"{path}[{k}]: debe ser texto u objeto")
                continue
            if not isinstance(parent, str):
                self.issues.append(f"{path}[{k}]: el campo padre debe ser texto")
                continue
            self._field_dependencies.append(
                Dependency(dependent_field=fld.name, parent_field=parent, fetch_options_url=url)
            )

    def _dependencies(self, raw: Any, steps: list[FormStep]) -> list[Dependency]:
        """Dependencias de nivel superior, por nombre o por id."""
        if raw is None:
            return []
        if not isinstance(raw, list):
            self.issues.append("dependencies: debe ser una lista")
            return []

        dependencies: list[Dependency] = []
        for i, entry in enumerate(raw):
            path = f"dependencies[{i}]"
            if not isinstance(entry, dict):
                self.issues.append(f"{path}: debe ser un objeto")
                continue

            if "fieldId" in entry:
                dep = self._dependency_by_id(entry, path, steps)
            else:
                dependent = _require(entry, "dependentField", path)
                parent = _require(entry, "parentField", path)
                url = entry.get("fetchOptionsUrl")
                if not isinstance(dependent, str) or not isinstance(parent, str):
                    self.issues.append(f"{path}: los nombres de campo deben ser texto")
                    continue
                if url is not None and not isinstance(url, str):
                    self.issues.append(f"{path}.fetchOptionsUrl: debe ser texto")
                    url = None
                dep = Dependency(dependent_field=dependent, parent_field=parent, fetch_options_url=url)

            if dep is not None and dep not in dependencies:
                dependencies.append(dep)
        return dependencies

    def _dependency_by_id(self, entry: dict, path: str, steps: list[FormStep]) -> Optional[Dependency]:
        field_id = entry["fieldId"]
        parent_id = _require(entry, "dependsOnFieldId", path)
        step_id = entry.get("stepId")

        dependent = self._field_name_for_id(field_id, step_id)
        parent = self._field_name_for_id(parent_id, step_id)
        if dependent is None:
            self.issues.append(f"{path}.fieldId: no existe un campo con id {field_id}")
        if parent is None:
            self.issues.append(f"{path}.dependsOnFieldId: no existe un campo con id {parent_id}")
        if dependent is None or parent is None:
            return None

        url = None
        for step in steps:
            fld = step.field(dependent)
            if fld is not None:
                url = fld.fetch_options_url
                break
        return Dependency(dependent_field=dependent, parent_field=parent, fetch_options_url=url)

    def _field_name_for_id(self, field_id: Any, step_id: Any) -> Optional[str]:
        candidates = self._field_ids.get(field_id, []) if _is_int(field_id) else []
        if not candidates:
            return None
        # Preferir el campo del mismo paso
        for cand_step, name in candidates:
            if step_id is not None and cand_step == step_id:
                return name
        return candidates[0][1]


# ============================================================================
# Comprobaciones estructurales
# ============================================================================

def _check_field(fld: FormField, path: str) -> list[str]:
    issues = []
    rule = fld.validation

    if rule.pattern is not None:
        try:
            re.compile(rule.pattern)
        except re.error as e:
            issues.append(f"{path}.validation.pattern: expresión regular inválida ({e})")

    if rule.min_length is not None and rule.max_length is not None and rule.min_length > rule.max_length:
        issues.append(f"{path}.validation: minLength ({rule.min_length}) > maxLength ({rule.max_length})")

    if rule.min is not None and rule.max is not None and rule.min > rule.max:
        issues.append(f"{path}.validation: min ({rule.min}) > max ({rule.max})")

    if fld.options:
        ids = [opt.id for opt in fld.options]
        duplicated = sorted({i for i in ids if ids.count(i) > 1})
        if duplicated:
            issues.append(f"{path}.options: ids repetidos {duplicated}")

    if fld.type.is_choice and not fld.options and not fld.fetch_options_url and not fld.is_boolean_checkbox:
        logger.warning("Campo '{}' sin opciones ni fetchOptionsUrl: se mostrará vacío", fld.name)

    return issues


def _check_dependencies(definition: FormDefinition) -> list[str]:
    issues = []
    names = definition.field_names
    graph: dict[str, set[str]] = {}

    for i, dep in enumerate(definition.dependencies):
        path = f"dependencies[{i}]"
        if dep.dependent_field not in names:
            issues.append(f"{path}.dependentField: campo desconocido '{dep.dependent_field}'")
        if dep.parent_field not in names:
            issues.append(f"{path}.parentField: campo desconocido '{dep.parent_field}'")
        if dep.is_self_reference:
            issues.append(f"{path}: el campo '{dep.dependent_field}' depende de sí mismo")
            continue
        graph.setdefault(dep.parent_field, set()).add(dep.dependent_field)

    cycle = _find_cycle(graph)
    if cycle:
        issues.append("dependencies: ciclo de dependencias " + " -> ".join(cycle))
    return issues


def _find_cycle(graph: dict[str, set[str]]) -> Optional[list[str]]:
    """Busca un ciclo en el grafo padre -> dependientes (DFS)."""
    visiting: list[str] = []
    done: set[str] = set()

    def visit(node: str) -> Optional[list[str]]:
        if node in visiting:
            return visiting[visiting.index(node):] + [node]
        if node in done:
            return None
        visiting.append(node)
        for child in sorted(graph.get(node, ())):
            cycle = visit(child)
            if cycle:
                return cycle
        visiting.pop()
        done.add(node)
        return None

    for start in sorted(graph):
        cycle = visit(start)
        if cycle:
            return cycle
    return None


def _pydantic_issues(error: ValidationError, path: str) -> list[str]:
    """Convierte un ValidationError de pydantic en mensajes con ruta."""
    issues = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        issues.append(f"{path}.{loc}: {err['msg']}" if loc else f"{path}: {err['msg']}")
    return issues


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
