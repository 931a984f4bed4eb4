"""Request formatting and response parsing for the Gemini generation calls.

Two operations are exposed:

- :func:`generate_prompts` turns a story into scene prompts plus a thumbnail
  prompt using a JSON-constrained text model.
- :func:`generate_image` renders a single prompt and returns it as a
  ``data:`` URL that can be dropped straight into an ``<img>`` tag.

Both accept an optional ``client`` so callers (and tests) can inject their
own ``google.genai.Client``-compatible object.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Iterable

from google import genai
from google.genai import types

from s2m import config
from s2m.core.contracts import PromptBatch, Scene, ScenePrompt
from s2m.services.errors import GenerationError, NoImageGeneratedError

logger = logging.getLogger(__name__)

PROMPT_GENERATOR_INSTRUCTIONS = """
You are a professional AI Prompt Generator for a web-based tool called "S2M AI - Story-to-Media Generator".

USER WILL PROVIDE:
- A story (any language)
- Desired number of scenes (user-entered number)
- Option to add more scenes if needed (indicated by existing scenes)

YOUR RESPONSIBILITIES:
1. Understand the story in its original language.
2. Do NOT rewrite, summarize, or modify the story.
3. Analyze the story structure and flow.
4. Generate image scenes intelligently based on the story.
5. If the user-entered scene count is low or high, adjust scene content smartly so the story still makes visual sense.
6. Generate EXACTLY the number of scenes requested.
7. If context of existing scenes is provided, continue generating NEW scenes from where they left off or expand the narrative logically.
8. Generate all IMAGE PROMPTS and the THUMBNAIL PROMPT in ENGLISH ONLY.
9. Keep output clean, professional, and copy-ready.
10. Do NOT include explanations, branding text, or extra commentary.

IMAGE PROMPT STYLE REQUIREMENTS:
- Cinematic composition
- Ultra-realistic visuals
- Lighting and shadow details
- Camera angle and depth of field
- Strong mood and emotion
- Story-accurate visuals
- 8K, high detail, professional photography

OUTPUT FORMAT:
You must return a JSON object containing an array of scenes (with text prompts) and one thumbnail prompt.
"""

PROMPT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "scenes": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "sceneNumber": types.Schema(type=types.Type.INTEGER),
                    "prompt": types.Schema(type=types.Type.STRING),
                },
                required=["sceneNumber", "prompt"],
            ),
        ),
        "thumbnailPrompt": types.Schema(type=types.Type.STRING),
    },
    required=["scenes", "thumbnailPrompt"],
)

IMAGE_MIME_TYPE = "image/png"

_client: Any = None


def get_client() -> Any:
    """Return a shared ``genai.Client``, creating it on first use."""
    global _client
    if _client is None:
        api_key = config.get_api_key()
        if not api_key:
            raise GenerationError("S2M_API_KEY (or GEMINI_API_KEY / API_KEY) must be set")
        _client = genai.Client(api_key=api_key)
    return _client


def build_prompt_request(story: str, scene_count: int, existing_scenes: Iterable[Scene] = ()) -> str:
    existing = [{"number": s.scene_number, "prompt": s.prompt} for s in existing_scenes]
    return "\n".join(
        [
            f"Story: {story}",
            f"Number of NEW scenes to generate: {int(scene_count)}",
            f"Already existing scenes: {json.dumps(existing, ensure_ascii=False)}",
        ]
    )


def parse_prompt_response(text: str | None) -> PromptBatch:
    """Parse the model's JSON answer into a :class:`PromptBatch`."""
    try:
        data = json.loads(text or "")
    except json.JSONDecodeError as exc:
        raise GenerationError(f"Prompt response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise GenerationError("Prompt response must be a JSON object")

    raw_scenes = data.get("scenes")
    if not isinstance(raw_scenes, list):
        raise GenerationError("Prompt response is missing 'scenes'")

    scenes: list[ScenePrompt] = []
    for idx, raw in enumerate(raw_scenes, start=1):
        if not isinstance(raw, dict) or not isinstance(raw.get("prompt"), str):
            raise GenerationError(f"Scene entry #{idx} is missing 'prompt'")
        number = raw.get("sceneNumber")
        # bool is an int subclass; JSON true/false is not a scene number.
        if not isinstance(number, int) or isinstance(number, bool):
            raise GenerationError(f"Scene entry #{idx} has no integer 'sceneNumber'")
        scenes.append(ScenePrompt(scene_number=number, prompt=raw["prompt"]))

    thumbnail_prompt = data.get("thumbnailPrompt")
    if not isinstance(thumbnail_prompt, str):
        raise GenerationError("Prompt response is missing 'thumbnailPrompt'")

    return PromptBatch(scenes=scenes, thumbnail_prompt=thumbnail_prompt)


def generate_prompts(
    story: str,
    scene_count: int,
    existing_scenes: Iterable[Scene] = (),
    *,
    client: Any = None,
) -> PromptBatch:
    """Ask the text model for ``scene_count`` new scene prompts and a thumbnail prompt."""
    client = client or get_client()
    existing_scenes = list(existing_scenes)

    logger.info(
        "Requesting %d new scene prompt(s) (%d existing) from %s",
        scene_count,
        len(existing_scenes),
        config.PROMPT_MODEL,
    )
    response = client.models.generate_content(
        model=config.PROMPT_MODEL,
        contents=build_prompt_request(story, scene_count, existing_scenes),
        config=types.GenerateContentConfig(
            system_instruction=PROMPT_GENERATOR_INSTRUCTIONS,
            response_mime_type="application/json",
            response_schema=PROMPT_RESPONSE_SCHEMA,
        ),
    )

    batch = parse_prompt_response(response.text)
    logger.debug("Received %d scene prompt(s)", len(batch.scenes))
    return batch


def to_data_url(data: bytes | str, mime_type: str = IMAGE_MIME_TYPE) -> str:
    """Encode inline image data as a ``data:`` URL.

    The SDK hands back raw bytes; already-encoded base64 strings pass through.
    """
    if isinstance(data, (bytes, bytearray)):
        encoded = base64.b64encode(bytes(data)).decode("ascii")
    else:
        encoded = str(data)
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(url: str) -> bytes:
    """Return the raw bytes of a base64 ``data:`` URL."""
    header, sep, payload = str(url).partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data: URL")
    return base64.b64decode(payload)


def extract_image_data_url(response: Any) -> str:
    """Return the first inline image of the first candidate as a data URL."""
    candidates = getattr(response, "candidates", None) or []
    parts: list[Any] = []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = list(getattr(content, "parts", None) or [])

    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return to_data_url(inline.data)

    raise NoImageGeneratedError()


def generate_image(
    prompt: str,
    aspect_ratio: str = config.DEFAULT_ASPECT_RATIO,
    *,
    client: Any = None,
) -> str:
    """Render ``prompt`` with the image model and return a ``data:image/png`` URL."""
    if aspect_ratio not in config.ASPECT_RATIO_OPTIONS:
        raise ValueError(
            f"Unsupported aspect_ratio '{aspect_ratio}'. Expected one of {config.ASPECT_RATIO_OPTIONS}."
        )

    client = client or get_client()
    logger.info("Rendering image (%s) with %s", aspect_ratio, config.IMAGE_MODEL)
    response = client.models.generate_content(
        model=config.IMAGE_MODEL,
        contents=types.Content(role="user", parts=[types.Part(text=prompt)]),
        config=types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        ),
    )
    return extract_image_data_url(response)
