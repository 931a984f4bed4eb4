"""Reusable UI components for the storyboard page.

Components are stateless: they take data plus callbacks and render Streamlit
elements. Callbacks are wired through ``on_click`` so they run before the
next script run paints the page.
"""

from __future__ import annotations

from typing import Callable

from s2m.core.contracts import Scene, StoryState
from s2m.services.gemini import decode_data_url


# =============================================================================
# THEME & STYLING
# =============================================================================

def inject_custom_css(st) -> None:
    """Inject custom CSS for consistent styling across the app."""
    st.markdown("""
    <style>
        .s2m-brand {
            display: inline-flex;
            align-items: center;
            gap: 0.5rem;
            font-weight: 700;
        }
        .s2m-logo {
            background: #2563eb;
            color: white;
            border-radius: 0.5rem;
            padding: 0.15rem 0.45rem;
            font-style: italic;
        }
        .s2m-engine {
            font-size: 0.7rem;
            text-transform: uppercase;
            letter-spacing: 0.1em;
            color: #64748b;
        }
        .s2m-label {
            font-size: 0.7rem;
            font-weight: 700;
            text-transform: uppercase;
            letter-spacing: 0.1em;
            color: #64748b;
        }
        .s2m-placeholder {
            aspect-ratio: 16 / 9;
            display: flex;
            align-items: center;
            justify-content: center;
            background: #020617;
            color: #1e293b;
            font-family: serif;
            font-style: italic;
            font-size: 1.75rem;
            border-radius: 0.75rem;
        }
        .s2m-empty {
            text-align: center;
            padding: 4rem 0;
            opacity: 0.5;
            font-family: serif;
            font-style: italic;
        }
    </style>
    """, unsafe_allow_html=True)


# =============================================================================
# HEADER & STATIC PANELS
# =============================================================================

def render_header(st, *, engine_label: str) -> None:
    left, right = st.columns([4, 1])
    with left:
        st.markdown(
            '<div class="s2m-brand"><span class="s2m-logo">S2M</span>'
            '<span style="font-size:1.25rem">Story-to-Media</span></div>',
            unsafe_allow_html=True,
        )
    with right:
        st.markdown(f'<span class="s2m-engine">AI Engine: {engine_label}</span>', unsafe_allow_html=True)
    st.divider()


PROCESS_STEPS = [
    "Our AI analyzes your story's emotional beats and key visual moments.",
    "It constructs high-detail cinematic image prompts in English.",
    "You can then render each scene using state-of-the-art vision models.",
]


def render_process_panel(st, *, error: str | None) -> None:
    with st.container(border=True):
        st.markdown("#### *The S2M AI Process*")
        for idx, step in enumerate(PROCESS_STEPS, start=1):
            st.markdown(f"**{idx}.** {step}")
        if error:
            st.error(error)


def render_empty_state(st) -> None:
    st.markdown(
        '<div class="s2m-empty"><div style="font-size:2rem">🎬</div>'
        "Waiting for a story to unfold...</div>",
        unsafe_allow_html=True,
    )


# =============================================================================
# IMAGES
# =============================================================================

def render_image(st, image_url: str, *, caption: str | None = None) -> None:
    st.image(decode_data_url(image_url), caption=caption, width="stretch")


def render_placeholder(st, text: str) -> None:
    st.markdown(f'<div class="s2m-placeholder">{text}</div>', unsafe_allow_html=True)


def render_thumbnail_card(
    st,
    *,
    state: StoryState,
    on_render: Callable[[], None],
    disabled: bool = False,
) -> None:
    """Master thumbnail: prompt on the left, image or placeholder on the right."""
    with st.container(border=True):
        text_col, img_col = st.columns(2)
        with text_col:
            st.markdown('<span class="s2m-label" style="color:#3b82f6">Master Thumbnail</span>', unsafe_allow_html=True)
            st.markdown("### *Visual Narrative Summary*")
            st.caption(f'"{state.thumbnail_prompt}"')
            if not state.thumbnail_url:
                st.button(
                    "Render Thumbnail →",
                    key="render_thumbnail",
                    on_click=on_render,
                    disabled=disabled,
                )
        with img_col:
            if state.thumbnail_url:
                render_image(st, state.thumbnail_url)
            else:
                render_placeholder(st, "S2M Preview")


def render_scene_card(
    st,
    *,
    scene: Scene,
    on_render: Callable[[str], None],
    disabled: bool = False,
) -> None:
    """Card for a single scene: image area, prompt and copy affordance."""
    with st.container(border=True):
        st.markdown(f"**SCENE {scene.scene_number}**")
        if scene.image_url:
            render_image(st, scene.image_url, caption=f"Scene {scene.scene_number}")
        elif scene.is_generating:
            render_placeholder(st, "Generating Visual...")
            st.caption("Generating Visual...")
        else:
            render_placeholder(st, f"Scene {scene.scene_number}")
            st.button(
                "Render Scene",
                key=f"render_scene_{scene.id}",
                on_click=on_render,
                args=(scene.id,),
                disabled=disabled,
            )

        st.markdown('<span class="s2m-label">Image Prompt</span>', unsafe_allow_html=True)
        # st.code ships a copy-to-clipboard button.
        st.code(scene.prompt, language=None, wrap_lines=True)


def render_scene_grid(
    st,
    *,
    scenes: list[Scene],
    on_render: Callable[[str], None],
    disabled: bool = False,
    n_cols: int = 2,
) -> None:
    for start in range(0, len(scenes), n_cols):
        cols = st.columns(n_cols)
        for col, scene in zip(cols, scenes[start:start + n_cols]):
            with col:
                render_scene_card(st, scene=scene, on_render=on_render, disabled=disabled)
