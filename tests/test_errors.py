import httpx
import openai

from models.plant_models import ErrorKind
from services.errors import RemoteServiceError, classify_openai_error, kind_for_status


def test_kind_for_status():
    assert kind_for_status(429) is ErrorKind.RATE_LIMITED
    assert kind_for_status(401) is ErrorKind.UNAUTHORIZED
    assert kind_for_status(403) is ErrorKind.UNAUTHORIZED
    assert kind_for_status(503) is ErrorKind.TRANSIENT_NETWORK
    assert kind_for_status(404) is ErrorKind.SERVICE_UNAVAILABLE


def test_classify_openai_errors(rate_limit_error, auth_error, server_error, connection_error):
    assert classify_openai_error(rate_limit_error).kind is ErrorKind.RATE_LIMITED
    assert classify_openai_error(auth_error).kind is ErrorKind.UNAUTHORIZED
    assert classify_openai_error(server_error).kind is ErrorKind.TRANSIENT_NETWORK
    assert classify_openai_error(connection_error).kind is ErrorKind.TRANSIENT_NETWORK


def test_classify_timeout_and_unknown_errors():
    timeout = openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1"))
    assert classify_openai_error(timeout).kind is ErrorKind.TRANSIENT_NETWORK
    assert classify_openai_error(RuntimeError("odd")).kind is ErrorKind.SERVICE_UNAVAILABLE


def test_existing_remote_error_passes_through():
    error = RemoteServiceError(ErrorKind.NO_CANDIDATES, "nothing")
    assert classify_openai_error(error) is error
    assert str(error) == "NoCandidates: nothing"


def test_only_transient_failures_are_retryable():
    assert [kind for kind in ErrorKind if kind.retryable] == [ErrorKind.TRANSIENT_NETWORK]
