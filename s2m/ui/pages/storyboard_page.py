from __future__ import annotations

from s2m.core.contracts import AppStatus
from s2m.ui import components

# Actions queued by button callbacks and executed once the page is painted.
GENERATE = "generate"
ADD_SCENE = "add_scene"
RENDER_ALL = "render_all"
RENDER_SCENE = "render_scene"
RESET = "reset"

_BUSY_LABELS = {
    GENERATE: "Analyzing Narrative...",
    ADD_SCENE: "Analyzing Narrative...",
    RENDER_ALL: "Rendering...",
    RENDER_SCENE: "Generating Visual...",
}


def render_storyboard_page(
    *,
    st,
    get_ui_state,
    recover_interrupted_run,
    make_controller,
    clamp_scene_count,
    story_preview,
    storyboard_to_csv,
    storyboard_to_json,
    render_progress,
    SCENE_COUNT_PRESETS: list[int],
    MIN_SCENE_COUNT: int,
    MAX_SCENE_COUNT: int,
    DEFAULT_ASPECT_RATIO: str,
    ENGINE_LABEL: str,
) -> None:
    ui_state = get_ui_state()
    recover_interrupted_run(ui_state)

    pending = ui_state.pop("pending_action", None)
    storyboard = ui_state["storyboard"]
    status = AppStatus(ui_state["status"])
    pending_kind = pending[0] if pending else None

    prompts_busy = status == AppStatus.GENERATING_PROMPTS or pending_kind in (GENERATE, ADD_SCENE)
    images_busy = status == AppStatus.GENERATING_IMAGES or pending_kind == RENDER_ALL

    def _queue(kind: str, *args) -> None:
        ui_state["pending_action"] = (kind, *args)

    def _pick_preset(n: int) -> None:
        ui_state["scene_count"] = n
        st.session_state["scene_count_input"] = n

    def _on_count_input() -> None:
        ui_state["scene_count"] = clamp_scene_count(
            st.session_state.get("scene_count_input", ui_state["scene_count"])
        )

    def _on_story_input() -> None:
        ui_state["story"] = st.session_state.get("story_input", "")

    def _on_generate() -> None:
        # Widget values land in session_state before callbacks run; ui_state
        # may still hold the previous run's text.
        _on_story_input()
        _on_count_input()
        _queue(GENERATE, ui_state["story"], ui_state["scene_count"])

    def _on_reset() -> None:
        ui_state["story"] = ""
        st.session_state["story_input"] = ""
        _queue(RESET)

    components.inject_custom_css(st)
    components.render_header(st, engine_label=ENGINE_LABEL)

    # ------------------------------------------------------------------
    # Input section
    # ------------------------------------------------------------------
    input_col, side_col = st.columns([2, 1])
    with input_col:
        st.markdown('<span class="s2m-label">The Story</span>', unsafe_allow_html=True)
        st.session_state.setdefault("story_input", ui_state["story"])
        ui_state["story"] = st.text_area(
            "The Story",
            key="story_input",
            on_change=_on_story_input,
            height=256,
            placeholder="Paste your story here (any language)...",
            label_visibility="collapsed",
        )

        st.markdown('<span class="s2m-label">Scenes</span>', unsafe_allow_html=True)
        preset_cols = st.columns(len(SCENE_COUNT_PRESETS) + 1)
        for col, n in zip(preset_cols, SCENE_COUNT_PRESETS):
            with col:
                st.button(
                    str(n),
                    key=f"preset_{n}",
                    type="primary" if ui_state["scene_count"] == n else "secondary",
                    on_click=_pick_preset,
                    args=(n,),
                    width="stretch",
                )
        with preset_cols[-1]:
            st.session_state.setdefault("scene_count_input", ui_state["scene_count"])
            st.number_input(
                "Scene count",
                min_value=MIN_SCENE_COUNT,
                max_value=MAX_SCENE_COUNT,
                step=1,
                key="scene_count_input",
                on_change=_on_count_input,
                label_visibility="collapsed",
            )

        story_blank = not ui_state["story"].strip()
        st.button(
            _BUSY_LABELS[GENERATE] if prompts_busy else "Generate Cinematic Prompts",
            key="generate_prompts",
            type="primary",
            disabled=prompts_busy or story_blank,
            on_click=_on_generate,
            width="stretch",
        )

    with side_col:
        components.render_process_panel(st, error=ui_state["error"])

    # ------------------------------------------------------------------
    # Output section
    # ------------------------------------------------------------------
    progress_slot = st.empty()

    if storyboard.has_scenes:
        head_col, render_col, add_col = st.columns([3, 1, 1])
        with head_col:
            st.markdown("## *Generated Storyboard*")
            rendered, total = render_progress(storyboard)
            st.caption(f"{rendered} / {total} scenes rendered")
        with render_col:
            st.button(
                "Rendering..." if images_busy else "Render All Media",
                key="render_all_top",
                type="primary",
                disabled=images_busy,
                on_click=_queue,
                args=(RENDER_ALL,),
                width="stretch",
            )
        with add_col:
            st.button(
                "Add Scene",
                key="add_scene",
                on_click=_queue,
                args=(ADD_SCENE,),
                width="stretch",
            )

        components.render_thumbnail_card(
            st,
            state=storyboard,
            on_render=lambda: _queue(RENDER_ALL),
            disabled=images_busy,
        )
        components.render_scene_grid(
            st,
            scenes=storyboard.scenes,
            on_render=lambda scene_id: _queue(RENDER_SCENE, scene_id),
        )

        with st.expander("Export storyboard"):
            exp_json, exp_csv = st.columns(2)
            with exp_json:
                st.download_button(
                    "Download JSON",
                    data=storyboard_to_json(storyboard),
                    file_name="storyboard.json",
                    mime="application/json",
                )
            with exp_csv:
                st.download_button(
                    "Download CSV",
                    data=storyboard_to_csv(storyboard),
                    file_name="storyboard.csv",
                    mime="text/csv",
                )

        # Action bar
        with st.container(border=True):
            story_col, reset_col, project_col = st.columns([3, 1, 2])
            with story_col:
                st.markdown('<span class="s2m-label">Current Story</span>', unsafe_allow_html=True)
                st.write(story_preview(storyboard.original_story))
            with reset_col:
                st.button("Reset", key="reset", on_click=_on_reset, width="stretch")
            with project_col:
                st.button(
                    "Rendering..." if images_busy else "Render Project",
                    key="render_all_bar",
                    type="primary",
                    disabled=images_busy,
                    on_click=_queue,
                    args=(RENDER_ALL,),
                    width="stretch",
                )
    elif status == AppStatus.IDLE and pending is None:
        components.render_empty_state(st)

    if pending is None:
        return

    # ------------------------------------------------------------------
    # Run the queued action with live progress, then repaint.
    # ------------------------------------------------------------------
    with progress_slot.container():
        progress_bar = st.progress(0.0, text=_BUSY_LABELS.get(pending_kind, ""))

        def _on_change(controller) -> None:
            if controller.status == AppStatus.GENERATING_IMAGES:
                done, total = render_progress(controller.state)
                frac = done / total if total else 0.0
                progress_bar.progress(frac, text=f"Rendering... {done}/{total} scenes")

        controller = make_controller(on_change=_on_change)
        with st.spinner(_BUSY_LABELS.get(pending_kind, "Working...")):
            run_action(controller, pending, aspect_ratio=DEFAULT_ASPECT_RATIO)

    st.rerun()


def run_action(controller, action: tuple, *, aspect_ratio: str) -> None:
    """Dispatch a queued ``(kind, *args)`` action to the controller."""
    kind, *args = action
    if kind == GENERATE:
        story, scene_count = args
        controller.generate(story, scene_count)
    elif kind == ADD_SCENE:
        controller.add_scene()
    elif kind == RENDER_ALL:
        controller.generate_images(aspect_ratio)
    elif kind == RENDER_SCENE:
        (scene_id,) = args
        controller.generate_single_image(scene_id, aspect_ratio)
    elif kind == RESET:
        controller.reset()
    else:
        raise ValueError(f"Unsupported action: {kind}")
