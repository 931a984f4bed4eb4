import logging
import os
import sys

# Ensure repository root is on sys.path so `s2m` can be imported when running
# `streamlit run s2m/app.py` from the project root.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import streamlit as st

from s2m.config import (
    DEFAULT_ASPECT_RATIO,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_SCENE_COUNT,
    MIN_SCENE_COUNT,
    SCENE_COUNT_PRESETS,
    UI,
    clamp_scene_count,
)
from s2m.services.backend import resolve_generators
from s2m.ui.formatting import (
    render_progress,
    story_preview,
    storyboard_to_csv,
    storyboard_to_json,
)
from s2m.ui.state import get_controller, get_ui_state, recover_interrupted_run

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

st.set_page_config(page_title="S2M Story-to-Media", page_icon="🎬", layout="wide")


def _make_controller(on_change=None):
    generate_prompts_fn, generate_image_fn = resolve_generators()
    return get_controller(
        generate_prompts_fn=generate_prompts_fn,
        generate_image_fn=generate_image_fn,
        on_change=on_change,
    )


from s2m.ui.pages import storyboard_page

storyboard_page.render_storyboard_page(
    st=st,
    get_ui_state=get_ui_state,
    recover_interrupted_run=recover_interrupted_run,
    make_controller=_make_controller,
    clamp_scene_count=clamp_scene_count,
    story_preview=story_preview,
    storyboard_to_csv=storyboard_to_csv,
    storyboard_to_json=storyboard_to_json,
    render_progress=render_progress,
    SCENE_COUNT_PRESETS=SCENE_COUNT_PRESETS,
    MIN_SCENE_COUNT=MIN_SCENE_COUNT,
    MAX_SCENE_COUNT=MAX_SCENE_COUNT,
    DEFAULT_ASPECT_RATIO=DEFAULT_ASPECT_RATIO,
    ENGINE_LABEL=UI.engine_label,
)
