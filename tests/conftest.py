import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock

# Ensure repository root is on sys.path so tests can import application modules
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import httpx
import openai
import pytest

from models.session_models import UploadedImage

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def openai_status_error(cls, status_code):
    request = httpx.Request("POST", OPENAI_URL)
    return cls("error", response=httpx.Response(status_code, request=request), body=None)


@pytest.fixture
def image():
    return UploadedImage(filename="leaf.jpg", content_type="image/jpeg", data=b"\xff\xd8\xff-fake-jpeg")


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def fake_openai_client():
    """Build an object shaped like AsyncOpenAI whose create() yields the given side effects."""

    def _build(*side_effects):
        create = AsyncMock(side_effect=list(side_effects))
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    return _build


@pytest.fixture
def rate_limit_error():
    return openai_status_error(openai.RateLimitError, 429)


@pytest.fixture
def auth_error():
    return openai_status_error(openai.AuthenticationError, 401)


@pytest.fixture
def server_error():
    return openai_status_error(openai.InternalServerError, 500)


@pytest.fixture
def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL))
