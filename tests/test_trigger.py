"""Tests para ValidationTrigger."""

import asyncio
import gc
import warnings

import pytest

from formsteward.fields import FieldController
from formsteward.models import FieldType, FormField, ValidationRule


def _required_text(name: str) -> FormField:
    return FormField(type=FieldType.TEXT, label=name.title(), name=name, validation=ValidationRule(required=True))


class TestTriggerChannel:
    """Tests del canal publish/subscribe."""

    def test_trigger_sets_current_and_notifies(self, trigger):
        received = []
        trigger.subscribe(received.append)

        count = trigger.trigger("a")

        assert count == 1
        assert trigger.current == "a"
        assert received == ["a"]

    def test_reset_broadcasts_none(self, trigger):
        received = []
        trigger.subscribe(received.append)
        trigger.trigger("a")
        trigger.reset()
        assert trigger.current is None
        assert received == ["a", None]

    def test_subscribe_once(self, trigger):
        listener = lambda step: None  # noqa: E731
        trigger.subscribe(listener)
        trigger.subscribe(listener)
        assert trigger.listener_count == 1

    def test_unsubscribe(self, trigger):
        received = []
        unsubscribe = trigger.subscribe(received.append)
        unsubscribe()
        trigger.trigger("a")
        assert received == []
        assert trigger.listener_count == 0

    def test_async_listener_without_wait_is_closed(self, trigger):
        async def listener(step):
            raise AssertionError("no debe ejecutarse")

        trigger.subscribe(listener)
        assert trigger.trigger("a") == 1

    def test_reset_closes_async_results(self, trigger):
        called = []

        async def owner(step):
            called.append(step)

        trigger.subscribe(owner)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger.reset()
            gc.collect()

        assert not [w for w in caught if "never awaited" in str(w.message)]
        assert called == []
        assert trigger.current is None

    @pytest.mark.asyncio
    async def test_trigger_and_wait(self, trigger):
        done = []

        async def slow(step):
            await asyncio.sleep(0)
            done.append(step)

        trigger.subscribe(slow)
        trigger.subscribe(lambda step: done.append(f"sync:{step}"))

        count = await trigger.trigger_and_wait("a")

        assert count == 2
        assert sorted(done) == ["a", "sync:a"]


class TestTriggerSteps:
    """Un disparo solo valida los campos de su propio paso."""

    def test_other_step_not_validated(self, store, trigger, monkeypatch):
        field_a = FieldController(_required_text("alpha"), "A", store, trigger)
        field_b = FieldController(_required_text("beta"), "B", store, trigger)
        field_a.mount()
        field_b.mount()

        calls = []
        original = store.update_field

        def spy(step_name, field_name, value, is_valid):
            calls.append((step_name, field_name))
            original(step_name, field_name, value, is_valid)

        monkeypatch.setattr(store, "update_field", spy)

        trigger.trigger("A")

        assert calls == [("A", "alpha")]
        assert field_a.error_message == "Alpha is required"
        assert field_b.error_message is None
        assert store.get_field_validity("B", "beta") is None

    def test_unmounted_field_ignores_trigger(self, store, trigger):
        fld = FieldController(_required_text("alpha"), "A", store, trigger)
        fld.mount()
        fld.unmount()
        trigger.trigger("A")
        assert store.get_field_validity("A", "alpha") is None
