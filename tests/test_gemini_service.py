from __future__ import annotations

import base64
import json
from types import SimpleNamespace

import pytest

from conftest import fake_genai_client
from s2m import config
from s2m.core.contracts import Scene
from s2m.services import gemini
from s2m.services.errors import GenerationError, NoImageGeneratedError


def _image_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def test_build_prompt_request_lists_existing_scenes() -> None:
    existing = [Scene(id="a", scene_number=1, prompt="A dark alley")]
    text = gemini.build_prompt_request("My story", 1, existing)

    assert "Story: My story" in text
    assert "Number of NEW scenes to generate: 1" in text
    payload = text.split("Already existing scenes: ", 1)[1]
    assert json.loads(payload) == [{"number": 1, "prompt": "A dark alley"}]


def test_generate_prompts_sends_schema_and_parses_response() -> None:
    body = {
        "scenes": [
            {"sceneNumber": 1, "prompt": "Wide shot of a harbor at dawn"},
            {"sceneNumber": 2, "prompt": "Close-up of weathered hands"},
        ],
        "thumbnailPrompt": "Harbor silhouette",
    }
    client = fake_genai_client(SimpleNamespace(text=json.dumps(body)))

    batch = gemini.generate_prompts("Il était une fois", 2, client=client)

    assert [s.scene_number for s in batch.scenes] == [1, 2]
    assert batch.scenes[1].prompt == "Close-up of weathered hands"
    assert batch.thumbnail_prompt == "Harbor silhouette"

    call = client.calls[0]
    assert call["model"] == config.PROMPT_MODEL
    assert "Il était une fois" in call["contents"]
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].system_instruction == gemini.PROMPT_GENERATOR_INSTRUCTIONS
    assert call["config"].response_schema == gemini.PROMPT_RESPONSE_SCHEMA


@pytest.mark.parametrize(
    "text",
    ["not json", "[]", json.dumps({"thumbnailPrompt": "t"}), json.dumps({"scenes": [{"sceneNumber": 1}]})],
)
def test_parse_prompt_response_rejects_bad_payloads(text) -> None:
    with pytest.raises(GenerationError):
        gemini.parse_prompt_response(text)


@pytest.mark.parametrize(
    "payload",
    [
        {"scenes": [{"sceneNumber": 1, "prompt": "p"}]},
        {"scenes": [{"sceneNumber": 1, "prompt": "p"}], "thumbnailPrompt": None},
        {"scenes": [{"prompt": "p"}], "thumbnailPrompt": "t"},
        {"scenes": [{"sceneNumber": "x", "prompt": "p"}], "thumbnailPrompt": "t"},
        {"scenes": [{"sceneNumber": True, "prompt": "p"}], "thumbnailPrompt": "t"},
    ],
)
def test_parse_prompt_response_requires_scene_numbers_and_thumbnail(payload) -> None:
    with pytest.raises(GenerationError):
        gemini.parse_prompt_response(json.dumps(payload))


def test_parse_prompt_response_keeps_model_numbers() -> None:
    batch = gemini.parse_prompt_response(
        json.dumps({"scenes": [{"sceneNumber": 4, "prompt": "p"}], "thumbnailPrompt": "t"})
    )
    assert batch.scenes[0].scene_number == 4
    assert batch.thumbnail_prompt == "t"


def test_generate_image_returns_first_inline_part_as_data_url() -> None:
    png = b"\x89PNG\r\n"
    response = _image_response(
        SimpleNamespace(inline_data=None, text="here you go"),
        SimpleNamespace(inline_data=SimpleNamespace(data=png, mime_type="image/png")),
    )
    client = fake_genai_client(response)

    url = gemini.generate_image("A castle", "9:16", client=client)

    assert url == "data:image/png;base64," + base64.b64encode(png).decode("ascii")
    call = client.calls[0]
    assert call["model"] == config.IMAGE_MODEL
    assert call["config"].image_config.aspect_ratio == "9:16"
    assert call["contents"].parts[0].text == "A castle"


def test_generate_image_without_inline_data_raises() -> None:
    client = fake_genai_client(_image_response(SimpleNamespace(inline_data=None, text="sorry")))
    with pytest.raises(NoImageGeneratedError, match="No image generated in response"):
        gemini.generate_image("A castle", client=client)


def test_generate_image_skips_inline_parts_without_data() -> None:
    png = b"\x89PNG"
    response = _image_response(
        SimpleNamespace(inline_data=SimpleNamespace(data=b"", mime_type="image/png")),
        SimpleNamespace(inline_data=SimpleNamespace(data=png, mime_type="image/png")),
    )
    url = gemini.generate_image("A castle", client=fake_genai_client(response))
    assert gemini.decode_data_url(url) == png


def test_generate_image_with_no_candidates_raises() -> None:
    client = fake_genai_client(SimpleNamespace(candidates=None))
    with pytest.raises(NoImageGeneratedError):
        gemini.generate_image("A castle", client=client)


def test_generate_image_rejects_unknown_aspect_ratio() -> None:
    client = fake_genai_client(None)
    with pytest.raises(ValueError):
        gemini.generate_image("A castle", "4:3", client=client)
    assert client.calls == []


def test_data_url_helpers() -> None:
    assert gemini.to_data_url("QUJD") == "data:image/png;base64,QUJD"
    assert gemini.decode_data_url(gemini.to_data_url(b"ABC")) == b"ABC"
    with pytest.raises(ValueError):
        gemini.decode_data_url("https://example.com/a.png")


def test_get_client_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(gemini, "_client", None)
    for name in ("S2M_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(GenerationError):
        gemini.get_client()


def test_get_client_builds_and_caches(monkeypatch) -> None:
    created = []

    class _FakeClient:
        def __init__(self, api_key):
            created.append(api_key)

    monkeypatch.setattr(gemini, "_client", None)
    monkeypatch.setattr(gemini.genai, "Client", _FakeClient)
    monkeypatch.setenv("S2M_API_KEY", "secret")

    first = gemini.get_client()
    second = gemini.get_client()

    assert first is second
    assert created == ["secret"]
