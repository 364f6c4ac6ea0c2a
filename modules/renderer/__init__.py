"""
Renderer Module.

Turn generated scene source into a chapter video with Manim.
"""

from modules.renderer.manim_runner import ManimRenderer
from modules.renderer.scene_names import (
    expected_video_path,
    extract_scene_name,
    resolve_scene_name,
)
from shared.errors import RenderError, RenderExecutionError, RenderTimeoutError, SourceFormatError

__all__ = [
    "ManimRenderer",
    "expected_video_path",
    "extract_scene_name",
    "resolve_scene_name",
    "RenderError",
    "RenderExecutionError",
    "RenderTimeoutError",
    "SourceFormatError",
]
