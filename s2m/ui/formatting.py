"""Formatting and export helpers for UI display."""

from __future__ import annotations

import json

import pandas as pd

from s2m.config import UI
from s2m.core.contracts import StoryState

STORYBOARD_COLUMNS = ["scene_number", "prompt", "rendered"]


def story_preview(story: str | None, max_chars: int = UI.story_preview_chars) -> str:
    """Return the first ``max_chars`` characters of the story followed by '...'."""
    return f"{(story or '')[:max_chars]}..."


def storyboard_to_frame(state: StoryState) -> pd.DataFrame:
    """Return one row per scene with its number, prompt and render flag."""
    rows = [
        {"scene_number": s.scene_number, "prompt": s.prompt, "rendered": s.is_rendered}
        for s in state.scenes
    ]
    return pd.DataFrame(rows, columns=STORYBOARD_COLUMNS)


def storyboard_to_csv(state: StoryState) -> str:
    return storyboard_to_frame(state).to_csv(index=False)


def storyboard_to_json(state: StoryState, *, include_images: bool = False) -> str:
    """Serialize the storyboard; image data URLs are dropped unless requested."""
    data = state.to_dict()
    if not include_images:
        data["thumbnail_url"] = None
        for scene in data["scenes"]:
            scene["image_url"] = None
    for scene in data["scenes"]:
        scene.pop("is_generating", None)
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_progress(state: StoryState) -> tuple[int, int]:
    """Return ``(rendered, total)`` scene counts."""
    total = len(state.scenes)
    return total - len(state.pending_scenes()), total
