from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from s2m.core.contracts import Scene
from s2m.services.backend import resolve_generators
from s2m.services import gemini
from s2m.services.errors import GenerationError
from s2m.services.http_client import ApiGenerator


def _response(status: int, body) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.json.return_value = body
    resp.text = str(body)
    return resp


def _api(resp) -> tuple[ApiGenerator, MagicMock]:
    session = MagicMock()
    session.post.return_value = resp
    return ApiGenerator("http://svc:8000/", timeout_s=5, session=session), session


def test_generate_prompts_posts_payload_and_parses_batch() -> None:
    api, session = _api(
        _response(200, {"scenes": [{"scene_number": 2, "prompt": "p2"}], "thumbnail_prompt": "t"})
    )
    existing = [Scene(id="a", scene_number=1, prompt="p1")]

    batch = api.generate_prompts("story", 1, existing)

    session.post.assert_called_once_with(
        "http://svc:8000/prompts",
        json={"story": "story", "scene_count": 1, "existing_scenes": [{"scene_number": 1, "prompt": "p1"}]},
        timeout=5,
    )
    assert batch.scenes[0].prompt == "p2"
    assert batch.thumbnail_prompt == "t"


def test_generate_image_returns_image_url() -> None:
    api, session = _api(_response(200, {"image_url": "data:image/png;base64,AA"}))

    assert api.generate_image("prompt", "9:16") == "data:image/png;base64,AA"
    assert session.post.call_args.kwargs["json"] == {"prompt": "prompt", "aspect_ratio": "9:16"}


def test_error_status_raises_with_detail() -> None:
    api, _ = _api(_response(502, {"detail": "Image generation failed: boom"}))

    with pytest.raises(GenerationError, match="Image generation failed: boom"):
        api.generate_image("prompt")


def test_transport_error_is_wrapped() -> None:
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")
    api = ApiGenerator("http://svc", session=session)

    with pytest.raises(GenerationError, match="refused"):
        api.generate_prompts("story", 1)


def test_missing_image_url_raises() -> None:
    api, _ = _api(_response(200, {}))
    with pytest.raises(GenerationError):
        api.generate_image("prompt")


def test_resolve_generators_prefers_direct_gemini_without_url(monkeypatch) -> None:
    monkeypatch.delenv("S2M_API_URL", raising=False)
    prompts_fn, image_fn = resolve_generators()
    assert prompts_fn is gemini.generate_prompts
    assert image_fn is gemini.generate_image


def test_resolve_generators_uses_http_service_when_configured(monkeypatch) -> None:
    monkeypatch.setenv("S2M_API_URL", "http://svc:8000/")
    prompts_fn, image_fn = resolve_generators()
    assert isinstance(prompts_fn.__self__, ApiGenerator)
    assert prompts_fn.__self__.base_url == "http://svc:8000"
    assert image_fn.__self__ is prompts_fn.__self__
