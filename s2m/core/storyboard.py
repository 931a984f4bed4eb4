"""Storyboard orchestration.

``StoryboardController`` owns the state behind the storyboard page: the story
being worked on, its scenes, the thumbnail, the overall ``AppStatus`` and the
user-facing error message. Every operation awaits one remote call at a time
and reports progress through ``on_change`` so a UI can repaint between calls.

The controller never lets a generation failure escape: failures are logged and
surfaced through ``error`` with a fixed message.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable

from s2m import config
from s2m.core.contracts import AppStatus, PromptBatch, Scene, StoryState, scenes_from_prompts

logger = logging.getLogger(__name__)

PromptsFn = Callable[..., PromptBatch]
ImageFn = Callable[[str, str], str]
ChangeFn = Callable[["StoryboardController"], None]

PROMPTS_ERROR = "Failed to generate prompts. Please check your API key and try again."
ADD_SCENE_ERROR = "Failed to add scene."
IMAGES_ERROR = "Failed to generate some images."


class StoryboardController:
    def __init__(
        self,
        generate_prompts_fn: PromptsFn,
        generate_image_fn: ImageFn,
        on_change: ChangeFn | None = None,
        *,
        state: StoryState | None = None,
        status: AppStatus = AppStatus.IDLE,
        error: str | None = None,
    ) -> None:
        self.generate_prompts_fn = generate_prompts_fn
        self.generate_image_fn = generate_image_fn
        self.on_change = on_change
        self.state = state or StoryState.empty()
        self.status = status
        self.error = error

    # ------------------------------------------------------------------
    # Read-only helpers
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.status in (AppStatus.GENERATING_PROMPTS, AppStatus.GENERATING_IMAGES)

    def can_generate(self, story: str) -> bool:
        return bool(story and story.strip()) and self.status != AppStatus.GENERATING_PROMPTS

    # ------------------------------------------------------------------
    # Internal state updates
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _set_status(self, status: AppStatus) -> None:
        self.status = status
        self._notify()

    def _set_scenes(self, scenes: Iterable[Scene]) -> None:
        self.state = replace(self.state, scenes=list(scenes))
        self._notify()

    def _replace_scene(self, index: int, scene: Scene) -> None:
        scenes = list(self.state.scenes)
        scenes[index] = scene
        self._set_scenes(scenes)

    def _render_scene(self, index: int, aspect_ratio: str) -> None:
        """Render the scene at ``index``; a failed call only clears its flag."""
        scene = self.state.scenes[index]
        try:
            url = self.generate_image_fn(scene.prompt, aspect_ratio)
        except Exception:  # noqa: BLE001
            logger.exception("Error generating image for scene %d", scene.scene_number)
            self._replace_scene(index, replace(scene, is_generating=False))
            return
        self._replace_scene(index, scene.with_image(url))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def generate(self, story: str, scene_count: int) -> None:
        """Replace the storyboard with ``scene_count`` freshly generated scenes."""
        if not story or not story.strip():
            return

        self.error = None
        self._set_status(AppStatus.GENERATING_PROMPTS)

        try:
            batch = self.generate_prompts_fn(story, scene_count)
        except Exception:  # noqa: BLE001
            logger.exception("Prompt generation failed")
            self.error = PROMPTS_ERROR
            self._set_status(AppStatus.ERROR)
            return

        self.state = StoryState(
            original_story=story,
            scene_count=scene_count,
            scenes=scenes_from_prompts(batch.scenes),
            thumbnail_prompt=batch.thumbnail_prompt,
        )
        logger.info("Storyboard created with %d scene(s)", len(self.state.scenes))
        self._set_status(AppStatus.READY)

    def add_scene(self) -> None:
        """Append one more scene continuing the current storyboard."""
        self.error = None
        self._set_status(AppStatus.GENERATING_PROMPTS)

        try:
            batch = self.generate_prompts_fn(self.state.original_story, 1, self.state.scenes)
        except Exception:  # noqa: BLE001
            logger.exception("Adding a scene failed")
            self.error = ADD_SCENE_ERROR
            self._set_status(AppStatus.ERROR)
            return

        # The model may return more than one; numbering continues regardless of
        # what it reports.
        next_num = len(self.state.scenes) + 1
        additional = scenes_from_prompts(batch.scenes, start_number=next_num)
        self.state = replace(self.state, scenes=[*self.state.scenes, *additional])
        self._set_status(AppStatus.READY)

    def generate_images(self, aspect_ratio: str = config.DEFAULT_ASPECT_RATIO) -> None:
        """Render the thumbnail, then every scene that has no image yet."""
        self._set_status(AppStatus.GENERATING_IMAGES)

        try:
            if self.state.thumbnail_prompt and not self.state.thumbnail_url:
                thumb_url = self.generate_image_fn(self.state.thumbnail_prompt, aspect_ratio)
                self.state = replace(self.state, thumbnail_url=thumb_url)
                self._notify()

            for i in range(len(self.state.scenes)):
                scene = self.state.scenes[i]
                if scene.image_url:
                    continue

                self._replace_scene(i, replace(scene, is_generating=True))
                self._render_scene(i, aspect_ratio)
        except Exception:  # noqa: BLE001
            logger.exception("Image generation failed")
            self.error = IMAGES_ERROR
        finally:
            self._set_status(AppStatus.READY)

    def generate_single_image(self, scene_id: str, aspect_ratio: str = config.DEFAULT_ASPECT_RATIO) -> None:
        """Render one scene by id; unknown ids are ignored."""
        index = self.state.find_scene_index(scene_id)
        if index == -1:
            return

        self._replace_scene(index, replace(self.state.scenes[index], is_generating=True))
        self._render_scene(index, aspect_ratio)

    def reset(self) -> None:
        """Drop the storyboard and go back to idle. The last error is kept."""
        self.state = StoryState.empty()
        self._set_status(AppStatus.IDLE)
