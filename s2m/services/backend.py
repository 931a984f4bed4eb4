from __future__ import annotations

import logging
from typing import Callable

from s2m import config
from s2m.services import gemini
from s2m.services.http_client import ApiGenerator

logger = logging.getLogger(__name__)


def resolve_generators(api_url: str | None = None) -> tuple[Callable, Callable]:
    """Return ``(generate_prompts, generate_image)`` for the configured backend.

    An explicit or configured ``S2M_API_URL`` routes calls through the HTTP
    service; otherwise Gemini is called in-process.
    """
    url = config.get_api_url() if api_url is None else api_url.rstrip("/")
    if url:
        logger.info("Using S2M API service at %s", url)
        api = ApiGenerator(url)
        return api.generate_prompts, api.generate_image
    return gemini.generate_prompts, gemini.generate_image
