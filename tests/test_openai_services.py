import asyncio
import json

import pytest

from models.plant_models import ErrorKind
from services.errors import RemoteServiceError
from services.knowledge_base import GENERIC_CARE_PROFILE
from services.openai.care_advisor import CareProfileFetcher
from services.openai.chat_client import PlantChatClient
from services.openai.prompts import PLANT_PAL_PERSONA
from services.openai.vision_identifier import VisionIdentifier

CARE_REPLY = json.dumps(
    {
        "care": {
            "watering": "Weekly",
            "light": "Bright indirect",
            "humidity": "50%",
            "temperature": "18-27C",
            "soil": "Chunky aroid mix",
            "fertilizer": "Monthly in summer",
            "repotting": "Every 2 years",
        },
        "tips": ["Use a moss pole", "Wipe leaves"],
    }
)


class TestVisionIdentifier:
    def test_parses_json_reply(self, image, fake_openai_client, make_completion):
        client = fake_openai_client(
            make_completion('{"name": "Monstera deliciosa", "commonName": "Swiss Cheese Plant", "confidence": 0.947}')
        )
        candidate = asyncio.run(VisionIdentifier(client).identify(image))

        assert candidate.scientific_name == "Monstera deliciosa"
        assert candidate.common_name == "Swiss Cheese Plant"
        assert candidate.confidence_percent == 95

        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 150
        (turn,) = kwargs["messages"]
        assert turn["role"] == "user"
        assert turn["content"][0]["type"] == "text"
        assert turn["content"][1]["image_url"]["url"].startswith("data:image/jpeg;base64,")

    @pytest.mark.parametrize(
        "content",
        [
            "It looks like a Monstera!",
            '["Monstera deliciosa"]',
            '{"commonName": "Swiss Cheese Plant", "confidence": 0.9}',
            '{"name": "Monstera deliciosa", "confidence": 95}',
            "",
        ],
    )
    def test_malformed_reply_is_a_hard_failure(self, image, fake_openai_client, make_completion, content):
        client = fake_openai_client(make_completion(content))
        with pytest.raises(RemoteServiceError) as excinfo:
            asyncio.run(VisionIdentifier(client).identify(image))
        assert excinfo.value.kind is ErrorKind.MALFORMED_RESPONSE

    def test_sdk_errors_are_classified(self, image, fake_openai_client, rate_limit_error):
        client = fake_openai_client(rate_limit_error)
        with pytest.raises(RemoteServiceError) as excinfo:
            asyncio.run(VisionIdentifier(client).identify(image))
        assert excinfo.value.kind is ErrorKind.RATE_LIMITED


class TestCareProfileFetcher:
    def test_returns_remote_profile(self, fake_openai_client, make_completion, recording_sleep):
        client = fake_openai_client(make_completion(CARE_REPLY))
        profile = asyncio.run(CareProfileFetcher(client, sleep=recording_sleep).fetch("Monstera deliciosa"))

        assert profile.soil == "Chunky aroid mix"
        assert profile.tips == ("Use a moss pole", "Wipe leaves")
        assert recording_sleep.delays == []
        prompt = client.chat.completions.create.await_args.kwargs["messages"][0]["content"]
        assert "Monstera deliciosa" in prompt

    def test_retries_once_after_fixed_delay(self, fake_openai_client, make_completion, recording_sleep, server_error):
        client = fake_openai_client(server_error, make_completion(CARE_REPLY))
        profile = asyncio.run(CareProfileFetcher(client, sleep=recording_sleep).fetch("Monstera deliciosa"))

        assert profile.watering == "Weekly"
        assert client.chat.completions.create.await_count == 2
        assert recording_sleep.delays == [1.0]

    def test_malformed_replies_fall_back_to_generic(self, fake_openai_client, make_completion, recording_sleep):
        client = fake_openai_client(make_completion("Water it weekly."), make_completion('{"care": {"watering": "x"}}'))
        profile = asyncio.run(CareProfileFetcher(client, sleep=recording_sleep).fetch("Ficus"))

        assert profile == GENERIC_CARE_PROFILE
        assert client.chat.completions.create.await_count == 2

    def test_without_client_returns_generic_immediately(self, recording_sleep):
        profile = asyncio.run(CareProfileFetcher(None, sleep=recording_sleep).fetch("Ficus"))
        assert profile == GENERIC_CARE_PROFILE
        assert recording_sleep.delays == []


class TestPlantChatClient:
    def test_returns_reply_verbatim_with_persona(self, fake_openai_client, make_completion):
        client = fake_openai_client(make_completion("  Try a south window!  "))
        reply = asyncio.run(PlantChatClient(client).reply("Where should my cactus go?"))

        assert reply == "  Try a south window!  "
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": PLANT_PAL_PERSONA}
        assert kwargs["messages"][1] == {"role": "user", "content": "Where should my cactus go?"}
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 300

    def test_failures_are_classified(self, fake_openai_client, auth_error):
        client = fake_openai_client(auth_error)
        with pytest.raises(RemoteServiceError) as excinfo:
            asyncio.run(PlantChatClient(client).reply("hi"))
        assert excinfo.value.kind is ErrorKind.UNAUTHORIZED
