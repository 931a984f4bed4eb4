"""Headless storyboard generation.

Runs the same controller as the Streamlit page and persists the outcome under
runs/<run_id>/:

- storyboard.json / storyboard.csv
- artifacts/thumbnail.png and artifacts/scene_NN.png (with --render)
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from s2m import config, runs
from s2m.core.contracts import AppStatus
from s2m.core.storyboard import StoryboardController
from s2m.services.backend import resolve_generators
from s2m.services.gemini import decode_data_url
from s2m.ui.formatting import storyboard_to_csv, storyboard_to_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate a cinematic storyboard from a story file.")
    p.add_argument("--story-file", required=True, type=str, help="UTF-8 text file containing the story.")
    p.add_argument("--scenes", type=int, default=config.DEFAULT_SCENE_COUNT)
    p.add_argument("--add-scenes", type=int, default=0, help="Extra scenes to append one at a time.")
    p.add_argument("--render", action="store_true", help="Render the thumbnail and every scene.")
    p.add_argument("--aspect-ratio", choices=config.ASPECT_RATIO_OPTIONS, default=config.DEFAULT_ASPECT_RATIO)
    p.add_argument("--run-id", type=str, default=None)
    p.add_argument("--api-url", type=str, default=None, help="Route calls through an S2M API service.")
    return p


def write_outputs(run_id: str, controller: StoryboardController) -> Path:
    state = controller.state
    runs.write_text(run_id, "storyboard.json", storyboard_to_json(state))
    runs.write_text(run_id, "storyboard.csv", storyboard_to_csv(state))

    if state.thumbnail_url:
        runs.write_bytes_artifact(run_id, "thumbnail.png", decode_data_url(state.thumbnail_url))
    for scene in state.scenes:
        if scene.image_url:
            runs.write_bytes_artifact(
                run_id, f"scene_{scene.scene_number:02d}.png", decode_data_url(scene.image_url)
            )
    return runs.run_dir(run_id)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    story = Path(args.story_file).read_text(encoding="utf-8")
    if not story.strip():
        logger.error("Story file %s is empty", args.story_file)
        return 2

    run_id = args.run_id or runs.create_run_id()
    generate_prompts_fn, generate_image_fn = resolve_generators(args.api_url)
    controller = StoryboardController(generate_prompts_fn, generate_image_fn)

    controller.generate(story, config.clamp_scene_count(args.scenes))
    if controller.status == AppStatus.ERROR:
        logger.error(controller.error)
        return 1

    for _ in range(max(0, int(args.add_scenes))):
        controller.add_scene()
        if controller.status == AppStatus.ERROR:
            logger.error(controller.error)
            break

    if args.render:
        controller.generate_images(args.aspect_ratio)
        missing = len(controller.state.pending_scenes())
        if controller.error:
            logger.warning(controller.error)
        if missing:
            logger.warning("%d scene(s) could not be rendered", missing)

    out_dir = write_outputs(run_id, controller)
    logger.info("Storyboard with %d scene(s) written to %s", len(controller.state.scenes), out_dir)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
