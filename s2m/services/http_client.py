"""HTTP client for the S2M FastAPI service (see ``api/main.py``).

Mirrors the call signatures of :mod:`s2m.services.gemini` so the UI can switch
between calling Gemini directly and going through the service.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from s2m import config
from s2m.core.contracts import PromptBatch, Scene
from s2m.services.errors import GenerationError

logger = logging.getLogger(__name__)


class ApiGenerator:
    def __init__(self, base_url: str, *, timeout_s: float | None = None, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else config.SERVICE.request_timeout_s
        self.session = session or requests.Session()

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise GenerationError(f"Request to {url} failed: {exc}") from exc

        if not resp.ok:
            try:
                body = resp.json()
                detail = body.get("detail") if isinstance(body, dict) else body
            except ValueError:
                detail = resp.text
            raise GenerationError(f"{url} returned {resp.status_code}: {detail}")

        data = resp.json()
        if not isinstance(data, dict):
            raise GenerationError(f"{url} returned a non-object JSON body")
        return data

    def generate_prompts(self, story: str, scene_count: int, existing_scenes: Iterable[Scene] = ()) -> PromptBatch:
        payload = {
            "story": story,
            "scene_count": int(scene_count),
            "existing_scenes": [
                {"scene_number": s.scene_number, "prompt": s.prompt} for s in existing_scenes
            ],
        }
        logger.debug("POST /prompts scene_count=%d", payload["scene_count"])
        return PromptBatch.from_dict(self._post("/prompts", payload))

    def generate_image(self, prompt: str, aspect_ratio: str = config.DEFAULT_ASPECT_RATIO) -> str:
        data = self._post("/images", {"prompt": prompt, "aspect_ratio": aspect_ratio})
        image_url = data.get("image_url")
        if not image_url:
            raise GenerationError("Image service returned no image_url")
        return str(image_url)
