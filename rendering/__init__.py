"""Rendering components for the fireflies simulation."""

from .volume import VolumeOutline
from .fireflies import FireflyRenderer
from .text import TextRenderer

__all__ = ["VolumeOutline", "FireflyRenderer", "TextRenderer"]
