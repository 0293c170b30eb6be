import asyncio

import httpx
import pytest

from models.plant_models import ErrorKind
from services.errors import RemoteServiceError
from services.plantnet.identification_client import PlantNetClient

TOP_MATCH = {
    "results": [
        {
            "score": 0.947,
            "species": {
                "scientificNameWithoutAuthor": "Monstera deliciosa",
                "commonNames": ["Swiss cheese plant", "Split-leaf philodendron"],
            },
        },
        {"score": 0.02, "species": {"scientificNameWithoutAuthor": "Philodendron bipinnatifidum"}},
    ]
}


def run_identify(handler, image):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = PlantNetClient(http_client, "pn-key")
            return await client.identify(image)

    return asyncio.run(_run())


def test_identify_normalizes_top_candidate(image):
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json=TOP_MATCH)

    candidate = run_identify(handler, image)

    assert candidate.scientific_name == "Monstera deliciosa"
    assert candidate.common_name == "Swiss cheese plant"
    assert candidate.confidence_percent == 95

    request = seen["request"]
    assert request.method == "POST"
    assert request.url.path == "/v2/identify/weurope"
    assert request.url.params["api-key"] == "pn-key"
    body = request.read()
    assert b'name="images"' in body
    assert b'["crops", "flower", "leaf", "auto"]' in body
    assert b'name="project"' in body


def test_missing_common_name_falls_back_to_scientific(image):
    payload = {"results": [{"score": 0.5, "species": {"scientificNameWithoutAuthor": "Ficus lyrata", "commonNames": []}}]}
    candidate = run_identify(lambda request: httpx.Response(200, json=payload), image)
    assert candidate.common_name == "Ficus lyrata"
    assert candidate.confidence_percent == 50


@pytest.mark.parametrize(
    "response, kind",
    [
        (httpx.Response(429, json={"message": "quota"}), ErrorKind.RATE_LIMITED),
        (httpx.Response(401, json={"message": "bad key"}), ErrorKind.UNAUTHORIZED),
        (httpx.Response(404, json={"message": "Species not found"}), ErrorKind.SERVICE_UNAVAILABLE),
        (httpx.Response(502, text="bad gateway"), ErrorKind.TRANSIENT_NETWORK),
        (httpx.Response(200, text="<html>not json</html>"), ErrorKind.MALFORMED_RESPONSE),
        (httpx.Response(200, json=["not", "an", "object"]), ErrorKind.MALFORMED_RESPONSE),
        (httpx.Response(200, json={"results": []}), ErrorKind.NO_CANDIDATES),
        (httpx.Response(200, json={"results": [{"score": 0.9}]}), ErrorKind.MALFORMED_RESPONSE),
        (
            httpx.Response(200, json={"results": [{"score": "high", "species": {"scientificNameWithoutAuthor": "X y"}}]}),
            ErrorKind.MALFORMED_RESPONSE,
        ),
    ],
)
def test_failures_are_classified(image, response, kind):
    with pytest.raises(RemoteServiceError) as excinfo:
        run_identify(lambda request: response, image)
    assert excinfo.value.kind is kind


def test_transport_error_is_transient(image):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteServiceError) as excinfo:
        run_identify(handler, image)
    assert excinfo.value.kind is ErrorKind.TRANSIENT_NETWORK


def test_requires_api_key():
    with pytest.raises(ValueError):
        PlantNetClient(object(), "")


def test_undecodable_body_is_malformed(image):
    def handler(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    with pytest.raises(RemoteServiceError) as excinfo:
        run_identify(handler, image)
    assert excinfo.value.kind is ErrorKind.MALFORMED_RESPONSE
