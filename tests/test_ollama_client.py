"""Tests for the Ollama HTTP client using httpx.MockTransport."""

import json

import httpx
import pytest

from sales_report.clients.ollama import OllamaClient, OllamaError
from sales_report.models import SaleExtractionResponse


def make_client(handler) -> OllamaClient:
    client = OllamaClient(host="ollama.test", port=11434, model="mistral")
    client._client.close()
    client._client = httpx.Client(transport=httpx.MockTransport(handler))
    return client


def reply(body: str) -> httpx.Response:
    return httpx.Response(200, json={"response": body, "eval_count": 10})


class TestGenerate:
    def test_posts_prompt_and_schema(self):
        requests = []

        def handler(request):
            requests.append(request)
            return reply("ok")

        with make_client(handler) as client:
            assert client.generate("hi", system="sys", schema={"type": "object"}) == "ok"

        payload = json.loads(requests[0].content)
        assert str(requests[0].url) == "http://ollama.test:11434/api/generate"
        assert payload["model"] == "mistral"
        assert payload["system"] == "sys"
        assert payload["format"] == {"type": "object"}
        assert payload["stream"] is False

    def test_http_error_wrapped(self):
        with make_client(lambda request: httpx.Response(500, text="boom")) as client:
            with pytest.raises(OllamaError, match="HTTP error: 500"):
                client.generate("hi")

    def test_connection_error_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(OllamaError, match="Failed to connect"):
                client.generate("hi")


class TestGenerateStructured:
    def test_valid_reply_is_validated(self):
        body = json.dumps({"sales": [{"ean": "8437021807011", "amount": "119.76", "quantity": 3}]})
        with make_client(lambda request: reply(body)) as client:
            result = client.generate_structured("hi", SaleExtractionResponse)

        assert result.sales[0].ean == "8437021807011"
        assert result.sales[0].quantity == 3

    def test_non_json_reply_wrapped(self):
        with make_client(lambda request: reply("Sure! Here is your CSV:")) as client:
            with pytest.raises(OllamaError, match="Failed to parse JSON"):
                client.generate_structured("hi", SaleExtractionResponse)

    def test_schema_mismatch_wrapped(self):
        with make_client(lambda request: reply('{"rows": []}')) as client:
            with pytest.raises(OllamaError, match="Failed to validate"):
                client.generate_structured("hi", SaleExtractionResponse)


class TestCheckConnection:
    def test_reachable(self):
        with make_client(lambda request: httpx.Response(200, json={"models": []})) as client:
            assert client.check_connection() is True

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            assert client.check_connection() is False
