"""Tests para los dueños de campo."""

import pytest

from formsteward.dependencies import DependentFieldUpdate
from formsteward.fields import (
    CaptureResult,
    ChoiceFieldController,
    FieldController,
    MediaFieldController,
    build_controller,
)
from formsteward.models import FieldType, FormField, Option, ValidationRule


class FakeFetcher:
    """Colaborador de opciones en memoria."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.urls = []

    async def fetch(self, url):
        self.urls.append(url)
        return self.responses.get(url, [])


@pytest.fixture
def text_field():
    return FormField(
        type=FieldType.TEXT,
        label="First Name",
        name="first_name",
        validation=ValidationRule(required=True, min_length=2),
    )


@pytest.fixture
def make_field():
    return FormField(
        type=FieldType.SELECT,
        label="Make",
        name="make",
        validation=ValidationRule(required=True),
        options=[Option(id=1, value="Toyota"), Option(id=2, value="Ford")],
    )


class TestFieldController:
    """Tests para FieldController."""

    def test_validates_on_editing_complete(self, text_field, store, trigger):
        ctrl = FieldController(text_field, "personal", store, trigger)
        ctrl.mount()

        assert ctrl.set_value("A") is None
        assert store.get_field_validity("personal", "first_name") is None

        result = ctrl.set_value("A", editing_complete=True)
        assert result.message == "First Name must be at least 2 characters"
        assert ctrl.error_message == result.message
        assert ctrl.is_valid is False
        assert store.get_field_value("personal", "first_name") == "A"

    def test_valid_value_clears_message(self, text_field, store, trigger):
        ctrl = FieldController(text_field, "personal", store, trigger)
        ctrl.mount()
        ctrl.set_value("", editing_complete=True)
        ctrl.set_value("Ana", editing_complete=True)
        assert ctrl.error_message is None
        assert ctrl.is_valid is True

    def test_mount_seeds_default(self, text_field, store, trigger):
        ctrl = FieldController(text_field, "personal", store, trigger, default="Juan")
        ctrl.mount()
        assert store.get_field_value("personal", "first_name") == "Juan"
        assert ctrl.is_valid is None

    def test_remount_keeps_stored_value(self, text_field, store, trigger):
        store.update_field("personal", "first_name", "Ana", True)
        ctrl = FieldController(text_field, "personal", store, trigger, default="Juan")
        ctrl.mount()
        assert ctrl.value == "Ana"

    def test_mount_twice_subscribes_once(self, text_field, store, trigger):
        ctrl = FieldController(text_field, "personal", store, trigger)
        ctrl.mount()
        ctrl.mount()
        assert trigger.listener_count == 1
        ctrl.unmount()
        assert trigger.listener_count == 0

    def test_on_value_changed_callback(self, text_field, store, trigger):
        seen = []
        ctrl = FieldController(text_field, "personal", store, trigger)
        ctrl.on_value_changed = lambda c, value: seen.append((c.name, value))
        ctrl.set_value("Ana")
        assert seen == [("first_name", "Ana")]


class TestChoiceFieldController:
    """Tests para ChoiceFieldController."""

    def test_validates_on_change(self, make_field, store, trigger):
        ctrl = ChoiceFieldController(make_field, "vehicle", store, trigger)
        result = ctrl.set_value(1)
        assert result.valid
        assert ctrl.label_for(1) == "Toyota"
        assert ctrl.option_ids == [1, 2]

    def test_set_options_drops_stale_selection(self, make_field, store, trigger):
        ctrl = ChoiceFieldController(make_field, "vehicle", store, trigger)
        ctrl.value = 2
        ctrl.set_options([Option(id=1, value="Toyota")])
        assert ctrl.value is None

    def test_set_options_filters_list(self, store, trigger):
        fld = FormField(
            type=FieldType.CHECKBOX,
            label="Trim",
            name="trim",
            options=[Option(id=1, value="LE"), Option(id=2, value="XLE")],
        )
        ctrl = ChoiceFieldController(fld, "extras", store, trigger)
        ctrl.value = [1, 2]
        ctrl.set_options([Option(id=2, value="XLE")])
        assert ctrl.value == [2]

    def test_apply_cleared_update(self, store, trigger):
        fld = FormField(type=FieldType.SELECT, label="Model", name="model", fetch_options_url="http://x/{p}")
        ctrl = ChoiceFieldController(fld, "vehicle", store, trigger)
        ctrl.set_options([Option(id=5, value="Corolla")])
        ctrl.value = 5

        ctrl.apply_update(DependentFieldUpdate("model", "make", url=None, clear=True))

        assert ctrl.options == []
        assert ctrl.options_url is None
        assert ctrl.value is None

    @pytest.mark.asyncio
    async def test_load_options(self, store, trigger):
        fld = FormField(type=FieldType.SELECT, label="Model", name="model")
        ctrl = ChoiceFieldController(fld, "vehicle", store, trigger)
        fetcher = FakeFetcher({"http://x/models?make=Toyota": [Option(id=5, value="Corolla")]})

        options = await ctrl.load_options(fetcher, "http://x/models?make=Toyota")

        assert [o.value for o in options] == ["Corolla"]
        assert ctrl.options_url == "http://x/models?make=Toyota"

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_required_rule(self, store, trigger):
        fld = FormField(
            type=FieldType.SELECT,
            label="Model",
            name="model",
            validation=ValidationRule(required=True),
            fetch_options_url="http://x/models",
        )
        ctrl = ChoiceFieldController(fld, "vehicle", store, trigger)
        await ctrl.load_options(FakeFetcher())

        assert ctrl.options == []
        assert ctrl.validate().message == "Model is required"


class TestMediaFieldController:
    """Tests para MediaFieldController."""

    @pytest.fixture
    def photo(self):
        return FormField(type=FieldType.IMAGE, label="Photo", name="photo", validation=ValidationRule(required=True))

    @pytest.mark.asyncio
    async def test_capture(self, photo, store, trigger):
        ctrl = MediaFieldController(photo, "media", store, trigger)

        async def capturer():
            return CaptureResult(path="/tmp/photo.png")

        result = await ctrl.capture(capturer)

        assert result.valid
        assert ctrl.has_resource
        assert store.get_field_value("media", "photo") == "/tmp/photo.png"

    @pytest.mark.asyncio
    async def test_cancelled_capture_is_empty(self, photo, store, trigger):
        ctrl = MediaFieldController(photo, "media", store, trigger)

        async def capturer():
            return None

        result = await ctrl.capture(capturer)

        assert result.message == "Photo is required"
        assert not ctrl.has_resource


class TestBuildController:
    """Tests para build_controller()."""

    @pytest.mark.parametrize(
        "ftype, cls",
        [
            (FieldType.TEXT, FieldController),
            (FieldType.NUMBER, FieldController),
            (FieldType.DATE, FieldController),
            (FieldType.RADIO, ChoiceFieldController),
            (FieldType.CHECKBOX, ChoiceFieldController),
            (FieldType.VIDEO, MediaFieldController),
        ],
    )
    def test_controller_class(self, ftype, cls, store, trigger):
        fld = FormField(type=ftype, label="X", name="x")
        assert type(build_controller(fld, "s", store, trigger)) is cls
