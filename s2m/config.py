# s2m/config.py

import os
from dataclasses import dataclass, field
from typing import List

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or deployment)
BASE_DIR = os.path.abspath(os.getenv("S2M_BASE_DIR", os.path.join(os.path.dirname(__file__), "..")))


# ---------------------------
# Structured configuration
# ---------------------------

def _first_env(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass(frozen=True)
class GeminiConfig:
    """Generative model configuration.

    Values can be overridden via environment variables:
    - S2M_API_KEY (falls back to GEMINI_API_KEY, then API_KEY)
    - S2M_PROMPT_MODEL
    - S2M_IMAGE_MODEL
    """

    api_key: str = field(default_factory=lambda: _first_env("S2M_API_KEY", "GEMINI_API_KEY", "API_KEY"))
    prompt_model: str = field(
        default_factory=lambda: os.getenv("S2M_PROMPT_MODEL", "gemini-3-flash-preview")
    )
    image_model: str = field(
        default_factory=lambda: os.getenv("S2M_IMAGE_MODEL", "gemini-2.5-flash-image")
    )
    default_aspect_ratio: str = "16:9"
    aspect_ratio_options: List[str] = field(default_factory=lambda: ["1:1", "16:9", "9:16"])


@dataclass(frozen=True)
class UiConfig:
    """Input bounds and display options for the storyboard page."""

    scene_count_presets: List[int] = field(default_factory=lambda: [2, 3, 5, 8])
    min_scene_count: int = 1
    max_scene_count: int = 15
    default_scene_count: int = 3
    story_preview_chars: int = 40
    engine_label: str = "Gemini 3"


@dataclass(frozen=True)
class PathsConfig:
    """Filesystem configuration.

    Values can be overridden via environment variables:
    - S2M_RUNS_DIR
    """

    runs_dir: str = field(
        default_factory=lambda: os.getenv("S2M_RUNS_DIR", os.path.join(BASE_DIR, "runs"))
    )

    def run_dir(self, run_id: str) -> str:
        return os.path.join(self.runs_dir, str(run_id))


@dataclass(frozen=True)
class ServiceConfig:
    """HTTP service settings.

    When ``api_url`` is empty the UI calls Gemini directly; otherwise it goes
    through the FastAPI service at that address.
    """

    api_url: str = field(default_factory=lambda: os.getenv("S2M_API_URL", "").rstrip("/"))
    request_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("S2M_REQUEST_TIMEOUT_S", "120"))
    )


GEMINI = GeminiConfig()
UI = UiConfig()
PATHS = PathsConfig()
SERVICE = ServiceConfig()

# --- Flat aliases used across the codebase ---
PROMPT_MODEL = GEMINI.prompt_model
IMAGE_MODEL = GEMINI.image_model
DEFAULT_ASPECT_RATIO = GEMINI.default_aspect_ratio
ASPECT_RATIO_OPTIONS = GEMINI.aspect_ratio_options

SCENE_COUNT_PRESETS = UI.scene_count_presets
MIN_SCENE_COUNT = UI.min_scene_count
MAX_SCENE_COUNT = UI.max_scene_count
DEFAULT_SCENE_COUNT = UI.default_scene_count

RUNS_DIR = PATHS.runs_dir

LOG_LEVEL = os.getenv("S2M_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_api_key() -> str:
    """Return the API key, re-reading the environment on each call."""
    return GeminiConfig().api_key


def get_api_url() -> str:
    return ServiceConfig().api_url


def clamp_scene_count(value) -> int:
    """Coerce user input to a scene count within [MIN_SCENE_COUNT, MAX_SCENE_COUNT].

    Non-numeric or zero input falls back to the minimum.
    """
    try:
        n = int(value)
    except (TypeError, ValueError):
        return MIN_SCENE_COUNT
    if n < MIN_SCENE_COUNT:
        return MIN_SCENE_COUNT
    return min(n, MAX_SCENE_COUNT)
