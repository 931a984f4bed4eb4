from __future__ import annotations


class GenerationError(RuntimeError):
    """A remote generation call failed or returned an unusable response."""


class NoImageGeneratedError(GenerationError):
    """The image model answered without any inline image data."""

    def __init__(self, message: str = "No image generated in response") -> None:
        super().__init__(message)
