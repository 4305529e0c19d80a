"""Configuración de pytest para tests de formsteward."""

import json

import pytest
from loguru import logger

from formsteward.parser import parse
from formsteward.state import FormStateStore, ValidationTrigger


REGISTRATION_FORM = {
    "formName": "Registro",
    "formConfig": {"defaultValues": {"country": "Uruguay"}},
    "steps": [
        {
            "id": 1,
            "name": "personal",
            "title": "Datos personales",
            "fields": [
                {
                    "type": "text",
                    "label": "First Name",
                    "name": "first_name",
                    "validation": {"required": True, "minLength": 2},
                },
                {
                    "type": "text",
                    "label": "Last Name",
                    "name": "last_name",
                    "validation": {"required": True},
                },
                {
                    "type": "text",
                    "label": "Country",
                    "name": "country",
                },
            ],
        },
        {
            "id": 2,
            "name": "contact",
            "title": "Contacto",
            "fields": [
                {
                    "type": "tel",
                    "label": "Phone Number",
                    "name": "phone_number",
                    "validation": {"required": True, "pattern": "^[0-9]{8,}$"},
                },
                {
                    "type": "number",
                    "label": "Age",
                    "name": "age",
                    "validation": {"min": 18, "max": 99},
                },
            ],
        },
    ],
}


CARS_FORM = {
    "formName": "Autos",
    "steps": [
        {
            "name": "vehicle",
            "title": "Vehículo",
            "fields": [
                {
                    "type": "select",
                    "label": "Make",
                    "name": "make",
                    "validation": {"required": True},
                    "options": [
                        {"id": 1, "value": "Toyota"},
                        {"id": 2, "value": "Ford"},
                    ],
                },
                {
                    "type": "select",
                    "label": "Model",
                    "name": "model",
                    "validation": {"required": True},
                    "fetchOptionsUrl": "http://x/models?make={parentValue}",
                },
            ],
        },
        {
            "name": "extras",
            "title": "Extras",
            "fields": [
                {
                    "type": "checkbox",
                    "label": "Trim",
                    "name": "trim",
                    "fetchOptionsUrl": "http://x/trims?model={parentValue}",
                },
                {
                    "type": "checkbox",
                    "label": "Accept terms",
                    "name": "terms",
                    "validation": {"required": True},
                },
            ],
        },
    ],
    "dependencies": [
        {
            "dependentField": "model",
            "parentField": "make",
            "fetchOptionsUrl": "http://x/models?make={parentValue}",
        },
        {
            "dependentField": "trim",
            "parentField": "model",
            "fetchOptionsUrl": "http://x/trims?model={parentValue}",
        },
    ],
}


@pytest.fixture
def registration_data():
    """Diccionario del formulario de registro (copia modificable)."""
    return json.loads(json.dumps(REGISTRATION_FORM))


@pytest.fixture
def registration_json(registration_data):
    return json.dumps(registration_data)


@pytest.fixture
def registration(registration_json):
    """FormDefinition de registro (dos pasos)."""
    return parse(registration_json)


@pytest.fixture
def cars_data():
    return json.loads(json.dumps(CARS_FORM))


@pytest.fixture
def cars_json(cars_data):
    return json.dumps(cars_data)


@pytest.fixture
def cars(cars_json):
    """FormDefinition con dependencias marca -> modelo -> versión."""
    return parse(cars_json)


@pytest.fixture
def store():
    return FormStateStore()


@pytest.fixture
def trigger():
    return ValidationTrigger()


@pytest.fixture
def form_file(tmp_path, registration_json):
    """Archivo JSON temporal con el formulario de registro."""
    path = tmp_path / "registro.json"
    path.write_text(registration_json, encoding="utf-8")
    return path


@pytest.fixture
def cars_file(tmp_path, cars_json):
    path = tmp_path / "autos.json"
    path.write_text(cars_json, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_logging():
    """La CLI activa loguru; se vuelve a silenciar tras cada test."""
    yield
    logger.remove()
    logger.disable("formsteward")
