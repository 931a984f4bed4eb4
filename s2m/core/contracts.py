from __future__ import annotations

import secrets
import string
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Iterable

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9


def new_scene_id() -> str:
    """Return a random 9-character base-36 identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class AppStatus(str, Enum):
    IDLE = "idle"
    GENERATING_PROMPTS = "generating_prompts"
    GENERATING_IMAGES = "generating_images"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Scene:
    id: str
    scene_number: int
    prompt: str
    image_url: str | None = None
    is_generating: bool = False

    @property
    def is_rendered(self) -> bool:
        return bool(self.image_url)

    def with_image(self, image_url: str | None) -> "Scene":
        return replace(self, image_url=image_url, is_generating=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Scene":
        return cls(**d)


@dataclass(frozen=True)
class StoryState:
    original_story: str
    scene_count: int
    scenes: list[Scene] = field(default_factory=list)
    thumbnail_prompt: str = ""
    thumbnail_url: str | None = None

    @classmethod
    def empty(cls) -> "StoryState":
        return cls(original_story="", scene_count=0)

    @property
    def has_scenes(self) -> bool:
        return len(self.scenes) > 0

    def pending_scenes(self) -> list[Scene]:
        """Scenes that do not have an image yet, in storyboard order."""
        return [s for s in self.scenes if not s.is_rendered]

    def find_scene_index(self, scene_id: str) -> int:
        for idx, s in enumerate(self.scenes):
            if s.id == scene_id:
                return idx
        return -1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "StoryState":
        data = dict(d)
        data["scenes"] = [Scene.from_dict(s) for s in data.get("scenes") or []]
        return cls(**data)


@dataclass(frozen=True)
class ScenePrompt:
    """A single scene prompt as returned by the prompt generator."""

    scene_number: int
    prompt: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PromptBatch:
    scenes: list[ScenePrompt]
    thumbnail_prompt: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenes": [s.to_dict() for s in self.scenes],
            "thumbnail_prompt": self.thumbnail_prompt,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "PromptBatch":
        return cls(
            scenes=[ScenePrompt(**s) for s in d.get("scenes") or []],
            thumbnail_prompt=str(d.get("thumbnail_prompt") or ""),
        )


def scenes_from_prompts(prompts: Iterable[ScenePrompt], *, start_number: int | None = None) -> list[Scene]:
    """Turn generated prompts into fresh, unrendered scenes.

    With ``start_number`` the returned scenes are renumbered contiguously from
    that value in response order; otherwise the generator's numbers are kept.
    """
    scenes: list[Scene] = []
    for idx, p in enumerate(prompts):
        number = p.scene_number if start_number is None else start_number + idx
        scenes.append(Scene(id=new_scene_id(), scene_number=number, prompt=p.prompt))
    return scenes
