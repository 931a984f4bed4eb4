from pathlib import Path

import pytest

from conftest import FakeGenerators, make_batch
from s2m.core.storyboard import StoryboardController
from s2m.ui import components
from s2m.ui.pages import storyboard_page


def test_storyboard_page_module_importable() -> None:
    assert callable(storyboard_page.render_storyboard_page)


def test_app_delegates_to_page_module() -> None:
    app_path = Path(__file__).resolve().parents[1] / "s2m" / "app.py"
    text = app_path.read_text(encoding="utf-8")

    assert "from s2m.ui.pages import storyboard_page" in text
    assert "storyboard_page.render_storyboard_page" in text


def test_run_action_dispatches_to_controller() -> None:
    fakes = FakeGenerators(batches=[make_batch("p1", "p2"), make_batch("p3")])
    c = StoryboardController(fakes.generate_prompts, fakes.generate_image)

    storyboard_page.run_action(c, (storyboard_page.GENERATE, "story", 2), aspect_ratio="16:9")
    storyboard_page.run_action(c, (storyboard_page.ADD_SCENE,), aspect_ratio="16:9")
    assert [s.scene_number for s in c.state.scenes] == [1, 2, 3]

    target = c.state.scenes[2].id
    storyboard_page.run_action(c, (storyboard_page.RENDER_SCENE, target), aspect_ratio="1:1")
    assert fakes.image_calls == [("p3", "1:1")]

    storyboard_page.run_action(c, (storyboard_page.RENDER_ALL,), aspect_ratio="16:9")
    assert all(s.image_url for s in c.state.scenes)
    assert c.state.thumbnail_url

    storyboard_page.run_action(c, (storyboard_page.RESET,), aspect_ratio="16:9")
    assert not c.state.has_scenes


def test_run_action_rejects_unknown_kind() -> None:
    c = StoryboardController(lambda *a: None, lambda *a: None)
    with pytest.raises(ValueError):
        storyboard_page.run_action(c, ("explode",), aspect_ratio="16:9")


def test_render_image_stretches_to_column_width() -> None:
    calls = []

    class _St:
        def image(self, data, **kwargs):
            calls.append((data, kwargs))

    components.render_image(_St(), "data:image/png;base64,iVBORw==", caption="Scene 1")

    data, kwargs = calls[0]
    assert data == b"\x89PNG"
    assert kwargs == {"caption": "Scene 1", "width": "stretch"}
