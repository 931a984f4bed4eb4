"""Pytest configuration to make the project root importable as a package.

This ensures that ``import s2m`` and ``import api`` work when tests are run
from the repository root or other locations. Shared fakes for the remote
generation calls live here too.
"""

import os
import sys
from types import SimpleNamespace

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from s2m.core.contracts import PromptBatch, ScenePrompt  # noqa: E402


class FakeGenerators:
    """Records calls and replays canned prompt/image responses."""

    def __init__(self, batches=None, image_results=None):
        self.batches = list(batches or [])
        self.image_results = list(image_results or [])
        self.prompt_calls = []
        self.image_calls = []

    def generate_prompts(self, story, scene_count, existing_scenes=()):
        self.prompt_calls.append((story, scene_count, list(existing_scenes)))
        result = self.batches.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def generate_image(self, prompt, aspect_ratio="16:9"):
        self.image_calls.append((prompt, aspect_ratio))
        result = self.image_results.pop(0) if self.image_results else f"data:image/png;base64,{len(self.image_calls)}"
        if isinstance(result, Exception):
            raise result
        return result


def make_batch(*prompts: str, thumbnail: str = "thumb prompt", start: int = 1) -> PromptBatch:
    return PromptBatch(
        scenes=[ScenePrompt(scene_number=start + i, prompt=p) for i, p in enumerate(prompts)],
        thumbnail_prompt=thumbnail,
    )


def fake_genai_client(response):
    """Build an object shaped like ``genai.Client`` whose generate_content returns ``response``."""
    calls = []

    def generate_content(**kwargs):
        calls.append(kwargs)
        return response

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    client.calls = calls
    return client


@pytest.fixture
def fakes():
    return FakeGenerators()
