"""Tests para formsteward.dependencies."""

import pytest

from formsteward.dependencies import DependencyResolver, DependentFieldUpdate, fill_template, resolve
from formsteward.exceptions import UnknownFieldReferenceError
from formsteward.models import Dependency


MAKE_MODEL = Dependency(
    dependent_field="model",
    parent_field="make",
    fetch_options_url="http://x/models?make={parentValue}",
)


class TestResolve:
    """Tests para resolve()."""

    def test_toyota(self):
        updates = resolve([MAKE_MODEL], "make", "Toyota")
        assert updates == [DependentFieldUpdate("model", "make", url="http://x/models?make=Toyota")]

    def test_unrelated_field(self):
        assert resolve([MAKE_MODEL], "model", "Corolla") == []

    def test_no_template_means_no_refetch(self):
        dep = Dependency(dependent_field="model", parent_field="make")
        assert resolve([dep], "make", "Toyota") == []

    def test_at_most_one_update_per_dependent(self):
        duplicate = Dependency(
            dependent_field="model",
            parent_field="make",
            fetch_options_url="http://y/models/{make}",
        )
        updates = resolve([MAKE_MODEL, duplicate], "make", "Ford")
        assert len(updates) == 1
        assert updates[0].url == "http://x/models?make=Ford"

    def test_several_dependents(self):
        year = Dependency(dependent_field="year", parent_field="make", fetch_options_url="http://x/years/{make}")
        updates = resolve([MAKE_MODEL, year], "make", "Ford")
        assert [u.dependent_field for u in updates] == ["model", "year"]
        assert updates[1].url == "http://x/years/Ford"

    def test_cleared_parent(self):
        for value in (None, "", []):
            (update,) = resolve([MAKE_MODEL], "make", value)
            assert update.url is None
            assert update.clear

    def test_value_is_encoded(self):
        (update,) = resolve([MAKE_MODEL], "make", "Alfa Romeo&Co", encode=True)
        assert update.url == "http://x/models?make=Alfa%20Romeo%26Co"

    def test_value_not_encoded(self):
        (update,) = resolve([MAKE_MODEL], "make", "Alfa Romeo", encode=False)
        assert update.url == "http://x/models?make=Alfa Romeo"

    def test_unknown_parent_fails(self):
        with pytest.raises(UnknownFieldReferenceError) as exc_info:
            resolve([MAKE_MODEL], "make", "Toyota", known_fields={"model"})
        assert exc_info.value.field_name == "make"

    def test_unknown_dependent_fails(self):
        with pytest.raises(UnknownFieldReferenceError) as exc_info:
            resolve([MAKE_MODEL], "make", "Toyota", known_fields={"make"})
        assert exc_info.value.field_name == "model"


class TestFillTemplate:
    """Tests para fill_template()."""

    def test_bool_and_numbers(self):
        assert fill_template("http://x?v={v}", True) == "http://x?v=true"
        assert fill_template("http://x?v={v}", 3) == "http://x?v=3"

    def test_list(self):
        assert fill_template("http://x?ids={ids}", [1, 2], encode=False) == "http://x?ids=1,2"


class TestDependencyResolver:
    """Tests para DependencyResolver ligado a una definición."""

    def test_resolve(self, cars):
        resolver = DependencyResolver(cars)
        (update,) = resolver.resolve("make", "Toyota")
        assert update.url == "http://x/models?make=Toyota"

    def test_unknown_field(self, cars):
        with pytest.raises(UnknownFieldReferenceError):
            DependencyResolver(cars).resolve("color", "red")

    def test_graph_queries(self, cars):
        resolver = DependencyResolver(cars)
        assert resolver.dependents_of("make") == ["model"]
        assert resolver.parents_of("trim") == ["model"]
        assert resolver.dependents_of("trim") == []
