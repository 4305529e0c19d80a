"""Tests para los servicios HTTP (con httpx.MockTransport)."""

import httpx
import pytest

from formsteward.exceptions import ConfigurationError, FormFetchError
from formsteward.services import ApiService, FormService, OptionFetcher, parse_options


def _async_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestOptionFetcher:
    """Tests para OptionFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_list(self):
        def handler(request):
            assert request.url.params["make"] == "Toyota"
            return httpx.Response(200, json=[{"id": 1, "value": "Corolla"}, {"id": 2, "value": "Hilux"}])

        async with OptionFetcher(client=_async_client(handler)) as fetcher:
            options = await fetcher.fetch("http://x/models?make=Toyota")

        assert [(o.id, o.value) for o in options] == [(1, "Corolla"), (2, "Hilux")]

    @pytest.mark.asyncio
    async def test_fetch_wrapped_object(self):
        def handler(request):
            return httpx.Response(200, json={"options": [{"id": 7, "value": "LE"}]})

        fetcher = OptionFetcher(client=_async_client(handler))
        options = await fetcher.fetch("http://x/trims")
        assert options[0].value == "LE"

    @pytest.mark.asyncio
    async def test_fetch_with_extra_keys(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": 1, "value": "Corolla", "make": "Toyota"}])

        fetcher = OptionFetcher(client=_async_client(handler))
        options = await fetcher.fetch("http://x/models?make=Toyota")
        assert [o.value for o in options] == ["Corolla"]

    @pytest.mark.asyncio
    async def test_http_error_status_means_no_options(self):
        fetcher = OptionFetcher(client=_async_client(lambda request: httpx.Response(500)))
        assert await fetcher.fetch("http://x/models") == []

    @pytest.mark.asyncio
    async def test_network_error_means_no_options(self):
        def handler(request):
            raise httpx.ConnectError("sin conexión", request=request)

        fetcher = OptionFetcher(client=_async_client(handler))
        assert await fetcher.fetch("http://x/models") == []

    @pytest.mark.asyncio
    async def test_invalid_json_means_no_options(self):
        fetcher = OptionFetcher(client=_async_client(lambda request: httpx.Response(200, text="<html>")))
        assert await fetcher.fetch("http://x/models") == []


class TestParseOptions:
    """Tests para parse_options()."""

    def test_skips_invalid_and_duplicates(self):
        payload = [{"id": 1, "value": "a"}, {"id": "x"}, {"id": 1, "value": "b"}, {"id": 2, "value": "c"}]
        assert [o.value for o in parse_options(payload)] == ["a", "c"]

    def test_extra_keys_are_ignored(self):
        payload = [{"id": 1, "value": "Corolla", "make": "Toyota"}, {"id": 2, "value": "Hilux", "year": 2020}]
        assert [(o.id, o.value) for o in parse_options(payload)] == [(1, "Corolla"), (2, "Hilux")]

    def test_unexpected_shape(self):
        assert parse_options("nope") == []
        assert parse_options({"items": []}) == []


class TestApiService:
    """Tests para ApiService."""

    def test_fetch_form_json(self, registration_json):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=registration_json)))
        api = ApiService(client=client)
        assert api.fetch_form_json("http://x/form") == registration_json
        api.close()

    def test_non_200_raises(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        with pytest.raises(FormFetchError) as exc_info:
            ApiService(client=client).fetch_form_json("http://x/form")
        assert exc_info.value.status_code == 404
        assert "Failed to load data from http://x/form" in str(exc_info.value)


class TestFormService:
    """Tests para FormService."""

    def test_load_form_file(self, form_file):
        definition = FormService().load_form_file(form_file)
        assert definition.form_name == "Registro"

    def test_load_form_from_json_invalid(self):
        with pytest.raises(ConfigurationError):
            FormService().load_form_from_json('{"steps": []}')

    def test_load_form_from_url(self, cars_json):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=cars_json)))
        service = FormService(api=ApiService(client=client))
        definition = service.load_form_from_url("http://x/cars")
        assert definition.count_fields() == 4
