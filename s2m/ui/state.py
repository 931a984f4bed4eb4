"""UI state management for Streamlit app.

Provides centralized access to the storyboard held in session state. Nothing is
persisted across browser sessions.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import streamlit as st

from s2m.config import DEFAULT_SCENE_COUNT
from s2m.core.contracts import AppStatus, StoryState
from s2m.core.storyboard import StoryboardController


def get_ui_state() -> dict[str, Any]:
    """Return the centralized UI state dict, initializing if needed.

    Well-known keys:
    - story: current contents of the story text area
    - scene_count: requested number of scenes
    - storyboard: the last committed StoryState
    - status: AppStatus value
    - error: user-facing error message or None
    """
    if "ui_state" not in st.session_state:
        st.session_state["ui_state"] = {
            "story": "",
            "scene_count": DEFAULT_SCENE_COUNT,
            "storyboard": StoryState.empty(),
            "status": AppStatus.IDLE,
            "error": None,
        }
    return st.session_state["ui_state"]


def recover_interrupted_run(ui_state: dict[str, Any]) -> None:
    """Settle state left behind by a script run that Streamlit stopped mid-call.

    Operations run synchronously inside a single script run, so a busy status
    seen at the start of a run can only come from an interrupted one.
    """
    status = AppStatus(ui_state["status"])
    if status not in (AppStatus.GENERATING_PROMPTS, AppStatus.GENERATING_IMAGES):
        return

    storyboard: StoryState = ui_state["storyboard"]
    scenes = [replace(s, is_generating=False) for s in storyboard.scenes]
    ui_state["storyboard"] = replace(storyboard, scenes=scenes)
    ui_state["status"] = AppStatus.READY if scenes else AppStatus.IDLE


def save_controller(ui_state: dict[str, Any], controller: StoryboardController) -> None:
    """Copy the controller's observable state back into the UI state."""
    ui_state["storyboard"] = controller.state
    ui_state["status"] = controller.status
    ui_state["error"] = controller.error


def get_controller(
    *,
    generate_prompts_fn: Callable,
    generate_image_fn: Callable,
    on_change: Callable | None = None,
) -> StoryboardController:
    """Build a controller seeded from session state.

    Every state change is written back to session state before ``on_change``
    runs, so a rerun mid-render never loses finished scenes.
    """
    ui_state = get_ui_state()

    def _sync(controller: StoryboardController) -> None:
        save_controller(ui_state, controller)
        if on_change is not None:
            on_change(controller)

    return StoryboardController(
        generate_prompts_fn,
        generate_image_fn,
        _sync,
        state=ui_state["storyboard"],
        status=AppStatus(ui_state["status"]),
        error=ui_state["error"],
    )
